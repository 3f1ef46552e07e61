from abc import ABC, abstractmethod
from typing import Dict, Any, List, Callable, Awaitable, Optional
from datetime import datetime
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum

from guarafood.utils.database_utils import now_trimmed

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    # Pedidos
    PEDIDOS_ATUALIZADOS = "pedidos_atualizados"
    PEDIDO_ENVIADO = "pedido_enviado"

    # Pagamento Pix
    PIX_GERADO = "pix_gerado"
    PIX_CONFIRMADO = "pix_confirmado"
    PIX_EXPIRADO = "pix_expirado"


@dataclass
class Event:
    event_type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=now_trimmed)


class EventHandler(ABC):
    """Interface para handlers de eventos"""

    @abstractmethod
    async def handle(self, event: Event) -> None:
        """Processa um evento"""
        pass

    @abstractmethod
    def can_handle(self, event_type: EventType) -> bool:
        """Verifica se pode processar o tipo de evento"""
        pass


class CallbackHandler(EventHandler):
    """Adapta uma corrotina simples para a interface de handler."""

    def __init__(self, event_type: EventType, callback: Callable[[Event], Awaitable[None]]):
        self.event_type = event_type
        self.callback = callback

    async def handle(self, event: Event) -> None:
        await self.callback(event)

    def can_handle(self, event_type: EventType) -> bool:
        return event_type == self.event_type


class EventBus:
    """Barramento local de eventos entre os componentes da loja (checkout, painel de pedidos)"""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}

    def subscribe(self, event_type: EventType, handler: EventHandler):
        """Registra um handler para um tipo de evento"""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)
        logger.info(f"Handler registrado para evento: {event_type}")

    def on(self, event_type: EventType, callback: Callable[[Event], Awaitable[None]]) -> EventHandler:
        handler = CallbackHandler(event_type, callback)
        self.subscribe(event_type, handler)
        return handler

    def unsubscribe(self, event_type: EventType, handler: EventHandler):
        """Remove um handler de um tipo de evento"""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.info(f"Handler removido para evento: {event_type}")
            except ValueError:
                logger.warning(f"Handler não encontrado para evento: {event_type}")

    async def publish(self, event_type: EventType, data: Optional[Dict[str, Any]] = None) -> Event:
        """Publica um evento e processa através dos handlers registrados"""
        event = Event(event_type=event_type, data=data or {})
        try:
            logger.info(f"Publicando evento: {event.event_type} - {event.id}")
            await self._process_event(event)
        except Exception as e:
            logger.error(f"Erro ao publicar evento {event.id}: {e}")
            # Não propaga o erro para não quebrar o fluxo principal
        return event

    async def _process_event(self, event: Event):
        """Processa um evento individual"""
        handlers = self._handlers.get(event.event_type) or []
        if not handlers:
            logger.debug(f"Nenhum handler registrado para evento: {event.event_type}")
            return

        tasks = [
            asyncio.create_task(self._execute_handler(handler, event))
            for handler in list(handlers)
            if handler.can_handle(event.event_type)
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _execute_handler(self, handler: EventHandler, event: Event):
        """Executa um handler de forma segura"""
        try:
            await handler.handle(event)
        except Exception as e:
            logger.error(f"Erro no handler para evento {event.id}: {e}")

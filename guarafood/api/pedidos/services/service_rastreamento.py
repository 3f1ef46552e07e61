from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from guarafood.api.notifications.core.event_bus import Event, EventBus, EventHandler, EventType
from guarafood.api.notifications.core.notificador import Notificador
from guarafood.api.pedidos.contracts.pedidos_contract import IPedidosContract
from guarafood.api.pedidos.schemas.schema_pedido import (
    STATUS_TERMINAIS,
    PainelPedidosOut,
    PedidoAcompanhado,
    PedidoStatusEnum,
)
from guarafood.api.pedidos.services.service_historico import HistoricoPedidosService
from guarafood.api.realtime.contracts.change_feed_contract import Assinatura, IChangeFeed
from guarafood.config.settings import TRACKER_POLL_IDLE_SECONDS, TRACKER_POLL_PENDING_SECONDS
from guarafood.integrations.supabase.client import SupabaseError
from guarafood.utils.logger import logger

TABELA_PEDIDOS = "orders"


class RastreadorPedidos:
    """
    Painel de acompanhamento dos pedidos guardados localmente.

    Atualiza ao iniciar, no evento de pedidos atualizados, no foco da janela,
    em qualquer alteração da tabela de pedidos que envolva um id acompanhado e
    por polling (mais curto enquanto houver pedido aguardando pagamento).
    Todas as origens passam pelo mesmo `atualizar`, serializado por um lock.
    Nunca altera status: só observa.
    """

    def __init__(
        self,
        *,
        pedidos: IPedidosContract,
        historico: HistoricoPedidosService,
        feed: IChangeFeed,
        notificador: Notificador,
        eventos: EventBus,
        intervalo_pendente: float = TRACKER_POLL_PENDING_SECONDS,
        intervalo_ocioso: float = TRACKER_POLL_IDLE_SECONDS,
    ) -> None:
        self.pedidos_api = pedidos
        self.historico = historico
        self.feed = feed
        self.notificador = notificador
        self.eventos = eventos
        self.intervalo_pendente = intervalo_pendente
        self.intervalo_ocioso = intervalo_ocioso

        self.pedidos: List[PedidoAcompanhado] = []
        self.expandido = False
        self._lock = asyncio.Lock()
        self._carregado = False
        self._assinatura: Optional[Assinatura] = None
        self._handler: Optional[EventHandler] = None
        self._tarefa_polling: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------
    async def iniciar(self) -> None:
        if self._tarefa_polling is not None:
            return
        self._assinatura = self.feed.assinar(TABELA_PEDIDOS, self._ao_alterar_pedido)
        self._handler = self.eventos.on(EventType.PEDIDOS_ATUALIZADOS, self._ao_evento)
        await self.atualizar()
        self._tarefa_polling = asyncio.create_task(self._loop_polling())
        logger.info("[Rastreamento] Iniciado")

    async def parar(self) -> None:
        if self._assinatura is not None:
            self._assinatura.cancelar()
            self._assinatura = None
        if self._handler is not None:
            self.eventos.unsubscribe(EventType.PEDIDOS_ATUALIZADOS, self._handler)
            self._handler = None
        tarefa, self._tarefa_polling = self._tarefa_polling, None
        if tarefa is not None and not tarefa.done():
            tarefa.cancel()
            try:
                await tarefa
            except asyncio.CancelledError:
                pass
        logger.info("[Rastreamento] Parado")

    @property
    def intervalo_polling(self) -> float:
        if any(p.status == PedidoStatusEnum.AGUARDANDO_PAGAMENTO for p in self.pedidos):
            return self.intervalo_pendente
        return self.intervalo_ocioso

    async def _loop_polling(self) -> None:
        while True:
            await asyncio.sleep(self.intervalo_polling)
            await self.atualizar()

    # ------------------------------------------------------------------
    # Gatilhos
    # ------------------------------------------------------------------
    async def _ao_evento(self, event: Event) -> None:
        await self.atualizar()

    async def _ao_alterar_pedido(self, registro: Dict[str, Any]) -> None:
        if str(registro.get("id")) in self.historico.ids_acompanhados():
            await self.atualizar()

    async def ao_focar(self) -> None:
        await self.atualizar()

    # ------------------------------------------------------------------
    # Atualização
    # ------------------------------------------------------------------
    async def atualizar(self) -> List[PedidoAcompanhado]:
        async with self._lock:
            ids = self.historico.ids_acompanhados()
            if not ids:
                self.pedidos = []
                self._carregado = True
                return []

            try:
                buscados = await self.pedidos_api.listar_por_ids(ids)
            except (SupabaseError, httpx.HTTPError) as e:
                logger.error(f"[Rastreamento] Falha ao buscar pedidos ativos: {e}")
                return self.pedidos

            ativos = [p for p in buscados if p.status not in STATUS_TERMINAIS]
            concluidos = [p.id for p in buscados if p.status in STATUS_TERMINAIS]
            if concluidos:
                self.historico.deixar_de_acompanhar(concluidos)

            if self._carregado:
                self._comparar(self.pedidos, buscados, ativos)

            self.pedidos = ativos
            self._carregado = True
            return list(self.pedidos)

    def _comparar(
        self,
        anteriores: List[PedidoAcompanhado],
        buscados: List[PedidoAcompanhado],
        ativos: List[PedidoAcompanhado],
    ) -> None:
        """Som quando algum status muda ou quando entra pedido novo; toast só na mudança de status."""
        por_id = {p.id: p for p in anteriores}
        mudou_status = False
        for pedido in buscados:
            anterior = por_id.get(pedido.id)
            if anterior is not None and anterior.status != pedido.status:
                mudou_status = True
                restaurante = pedido.restaurant_name or "Seu pedido"
                self.notificador.info(f"{restaurante}: {pedido.rotulo}", duracao=5000)

        if mudou_status or len(ativos) > len(anteriores):
            self.notificador.tocar_som()

    # ------------------------------------------------------------------
    # Painel
    # ------------------------------------------------------------------
    def remover(self, pedido_id: str) -> None:
        self.historico.deixar_de_acompanhar([pedido_id])
        self.pedidos = [p for p in self.pedidos if p.id != pedido_id]
        if not self.pedidos:
            self.expandido = False

    def alternar_expandido(self) -> bool:
        self.expandido = bool(self.pedidos) and not self.expandido
        return self.expandido

    def painel(self) -> PainelPedidosOut:
        principal = self.pedidos[0] if self.pedidos else None
        return PainelPedidosOut(
            pedidos=self.pedidos,
            expandido=self.expandido,
            etapa_principal=principal.etapa if principal else None,
            progresso_principal=principal.progresso if principal else None,
            intervalo_polling=int(self.intervalo_polling),
        )

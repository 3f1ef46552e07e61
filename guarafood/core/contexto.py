"""
Composição da loja: um único contexto por processo com armazenamento local,
carrinho, notificações, barramento de eventos, feed de alterações, serviços
de domínio, sessões de checkout (uma por restaurante) e o rastreador.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Optional

from guarafood.api.armazenamento.services import ArmazenamentoLocal
from guarafood.api.cardapio.adapters.supabase_catalogo_adapter import SupabaseCatalogoAdapter
from guarafood.api.cardapio.contracts import ICatalogoContract
from guarafood.api.cardapio.schemas.schema_cardapio import Restaurante
from guarafood.api.cardapio.services.service_cardapio import CardapioService
from guarafood.api.carrinho.services import CarrinhoService
from guarafood.api.clientes.services import FavoritosService, PerfilClienteService
from guarafood.api.cupons.adapters.supabase_cupom_adapter import SupabaseCupomAdapter
from guarafood.api.cupons.contracts import ICupomContract
from guarafood.api.cupons.services import CupomService
from guarafood.api.notifications.core.event_bus import EventBus
from guarafood.api.notifications.core.notificador import Notificador
from guarafood.api.pagamentos.adapters.supabase_pagamento_adapter import SupabasePagamentoAdapter
from guarafood.api.pagamentos.contracts import IPagamentoContract
from guarafood.api.pedidos.adapters.supabase_pedidos_adapter import SupabasePedidosAdapter
from guarafood.api.pedidos.contracts import IPedidosContract
from guarafood.api.pedidos.services.service_checkout import CheckoutSession
from guarafood.api.pedidos.services.service_historico import HistoricoPedidosService
from guarafood.api.pedidos.services.service_rastreamento import RastreadorPedidos
from guarafood.api.realtime.adapters import SupabaseRealtimeFeed
from guarafood.api.realtime.contracts import IChangeFeed
from guarafood.config.settings import (
    SUPABASE_ANON_KEY,
    SUPABASE_TIMEOUT_SECONDS,
    SUPABASE_URL,
)
from guarafood.database.db_connection import SessionLocal
from guarafood.integrations.supabase.client import SupabaseClient
from guarafood.utils.database_utils import now_trimmed
from guarafood.utils.logger import logger


class StorefrontContext:
    def __init__(
        self,
        *,
        armazenamento: ArmazenamentoLocal,
        catalogo: ICatalogoContract,
        cupons: ICupomContract,
        pedidos: IPedidosContract,
        pagamentos: IPagamentoContract,
        feed: IChangeFeed,
        supabase: Optional[SupabaseClient] = None,
        relogio: Callable[[], datetime] = now_trimmed,
        checkout_kwargs: Optional[dict] = None,
        rastreador_kwargs: Optional[dict] = None,
    ) -> None:
        self.armazenamento = armazenamento
        self.pedidos_api = pedidos
        self.pagamentos_api = pagamentos
        self.feed = feed
        self.supabase = supabase
        self.relogio = relogio
        self._checkout_kwargs = checkout_kwargs or {}

        self.notificador = Notificador()
        self.eventos = EventBus()
        self.carrinho = CarrinhoService(armazenamento)
        self.cardapio = CardapioService(catalogo)
        self.cupons = CupomService(cupons)
        self.historico = HistoricoPedidosService(armazenamento)
        self.perfis = PerfilClienteService(armazenamento)
        self.favoritos = FavoritosService(armazenamento)
        self.rastreador = RastreadorPedidos(
            pedidos=pedidos,
            historico=self.historico,
            feed=feed,
            notificador=self.notificador,
            eventos=self.eventos,
            **(rastreador_kwargs or {}),
        )
        self._checkouts: Dict[int, CheckoutSession] = {}

    def checkout(self, restaurante: Restaurante) -> CheckoutSession:
        """Sessão do restaurante; os dados do restaurante são sempre os mais recentes."""
        sessao = self._checkouts.get(restaurante.id)
        if sessao is None:
            sessao = CheckoutSession(
                restaurante=restaurante,
                carrinho=self.carrinho,
                pedidos=self.pedidos_api,
                pagamentos=self.pagamentos_api,
                cupons=self.cupons,
                feed=self.feed,
                historico=self.historico,
                perfis=self.perfis,
                notificador=self.notificador,
                eventos=self.eventos,
                relogio=self.relogio,
                **self._checkout_kwargs,
            )
            self._checkouts[restaurante.id] = sessao
        else:
            sessao.restaurante = restaurante
        return sessao

    async def iniciar(self) -> None:
        await self.rastreador.iniciar()

    async def encerrar(self) -> None:
        for sessao in self._checkouts.values():
            sessao.fechar()
        self._checkouts.clear()
        await self.rastreador.parar()
        await self.feed.fechar()
        if self.supabase is not None:
            await self.supabase.close()
        logger.info("[Contexto] Encerrado")


def criar_contexto() -> StorefrontContext:
    """Contexto de produção: backend hospedado no Supabase e armazenamento local no SQLAlchemy."""
    client = SupabaseClient(
        base_url=SUPABASE_URL,
        anon_key=SUPABASE_ANON_KEY,
        timeout=SUPABASE_TIMEOUT_SECONDS,
    )
    feed = SupabaseRealtimeFeed(url=client.realtime_url, access_token=SUPABASE_ANON_KEY)
    return StorefrontContext(
        armazenamento=ArmazenamentoLocal(SessionLocal),
        catalogo=SupabaseCatalogoAdapter(client),
        cupons=SupabaseCupomAdapter(client),
        pedidos=SupabasePedidosAdapter(client),
        pagamentos=SupabasePagamentoAdapter(client),
        feed=feed,
        supabase=client,
    )


_contexto: Optional[StorefrontContext] = None


def definir_contexto(contexto: Optional[StorefrontContext]) -> None:
    global _contexto
    _contexto = contexto


def get_contexto() -> StorefrontContext:
    if _contexto is None:
        raise RuntimeError("Contexto da loja não inicializado")
    return _contexto

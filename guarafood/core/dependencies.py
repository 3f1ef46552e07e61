from fastapi import Depends, Path

from guarafood.api.cardapio.services.service_cardapio import CardapioService
from guarafood.api.carrinho.services import CarrinhoService
from guarafood.api.clientes.services import FavoritosService
from guarafood.api.notifications.core.notificador import Notificador
from guarafood.api.pedidos.services.service_checkout import CheckoutSession
from guarafood.api.pedidos.services.service_historico import HistoricoPedidosService
from guarafood.api.pedidos.services.service_rastreamento import RastreadorPedidos
from guarafood.core.contexto import StorefrontContext, get_contexto


def get_cardapio_service(ctx: StorefrontContext = Depends(get_contexto)) -> CardapioService:
    return ctx.cardapio


def get_carrinho_service(ctx: StorefrontContext = Depends(get_contexto)) -> CarrinhoService:
    return ctx.carrinho


def get_favoritos_service(ctx: StorefrontContext = Depends(get_contexto)) -> FavoritosService:
    return ctx.favoritos


def get_historico_service(ctx: StorefrontContext = Depends(get_contexto)) -> HistoricoPedidosService:
    return ctx.historico


def get_notificador(ctx: StorefrontContext = Depends(get_contexto)) -> Notificador:
    return ctx.notificador


def get_rastreador(ctx: StorefrontContext = Depends(get_contexto)) -> RastreadorPedidos:
    return ctx.rastreador


async def get_checkout(
    restaurante_id: int = Path(..., description="ID do restaurante"),
    ctx: StorefrontContext = Depends(get_contexto),
) -> CheckoutSession:
    restaurante = await ctx.cardapio.obter_restaurante(restaurante_id)
    return ctx.checkout(restaurante)

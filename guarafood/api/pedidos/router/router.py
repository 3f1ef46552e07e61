"""
Router principal de Pedidos: checkout por restaurante e painel de acompanhamento.
"""
from fastapi import APIRouter

from guarafood.api.pedidos.router.public import router_acompanhamento_public, router_checkout_public

api_pedidos = APIRouter(
    tags=["API - Pedidos"]
)

api_pedidos.include_router(router_checkout_public.router)
api_pedidos.include_router(router_acompanhamento_public.router)

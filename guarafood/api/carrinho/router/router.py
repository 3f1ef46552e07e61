from fastapi import APIRouter

from guarafood.api.carrinho.router.public import router_carrinho_public

api_carrinho = APIRouter(
    tags=["API - Carrinho"]
)

api_carrinho.include_router(router_carrinho_public.router)

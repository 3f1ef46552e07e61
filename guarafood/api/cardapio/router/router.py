from fastapi import APIRouter

from guarafood.api.cardapio.router.public import router_restaurantes_public

api_cardapio = APIRouter(
    tags=["API - Cardápio"]
)

api_cardapio.include_router(router_restaurantes_public.router)

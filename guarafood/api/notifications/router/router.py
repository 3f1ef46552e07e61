from fastapi import APIRouter

from guarafood.api.notifications.router.public import router_notificacoes_public

router = APIRouter(
    tags=["API - Notificações"]
)

router.include_router(router_notificacoes_public.router)

from fastapi import APIRouter, Depends

from guarafood.api.notifications.core.notificador import Notificador
from guarafood.api.notifications.schemas.schema_notificacao import NotificacoesOut
from guarafood.core.dependencies import get_notificador

router = APIRouter(prefix="/api/notificacoes/public", tags=["Public - Notificações"])


@router.get("", response_model=NotificacoesOut)
def consumir_notificacoes(notificador: Notificador = Depends(get_notificador)):
    """Entrega os toasts pendentes (e os remove da fila)."""
    return NotificacoesOut(toasts=notificador.consumir(), sons_tocados=notificador.sons_tocados)

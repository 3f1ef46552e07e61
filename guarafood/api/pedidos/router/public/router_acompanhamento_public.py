from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Path

from guarafood.api.pedidos.schemas import PainelPedidosOut
from guarafood.api.pedidos.services.service_historico import HistoricoPedidosService
from guarafood.api.pedidos.services.service_rastreamento import RastreadorPedidos
from guarafood.core.dependencies import get_historico_service, get_rastreador

router = APIRouter(prefix="/api/pedidos/public/acompanhamento", tags=["Public - Acompanhamento"])


@router.get("", response_model=PainelPedidosOut)
def obter_painel(rastreador: RastreadorPedidos = Depends(get_rastreador)):
    return rastreador.painel()


@router.post("/atualizar", response_model=PainelPedidosOut)
async def atualizar_painel(rastreador: RastreadorPedidos = Depends(get_rastreador)):
    """Chamado quando a janela volta a ter foco."""
    await rastreador.ao_focar()
    return rastreador.painel()


@router.post("/expandir", response_model=PainelPedidosOut)
def alternar_expandido(rastreador: RastreadorPedidos = Depends(get_rastreador)):
    rastreador.alternar_expandido()
    return rastreador.painel()


@router.delete("/{pedido_id}", response_model=PainelPedidosOut)
def remover_pedido(
    pedido_id: str = Path(...),
    rastreador: RastreadorPedidos = Depends(get_rastreador),
):
    rastreador.remover(pedido_id)
    return rastreador.painel()


@router.get("/historico", response_model=List[Dict[str, Any]])
def listar_historico(historico: HistoricoPedidosService = Depends(get_historico_service)):
    return historico.historico()

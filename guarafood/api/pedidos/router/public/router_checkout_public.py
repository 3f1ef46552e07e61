from fastapi import APIRouter, Body, Depends

from guarafood.api.cupons.schemas import AplicarCupomRequest
from guarafood.api.pedidos.schemas import AtualizarDadosCheckoutRequest, PreencherDadosRequest
from guarafood.api.pedidos.services.service_checkout import CheckoutSession, EstadoCheckoutOut
from guarafood.core.dependencies import get_checkout
from guarafood.utils.logger import logger

router = APIRouter(prefix="/api/pedidos/public/checkout/{restaurante_id}", tags=["Public - Checkout"])


@router.get("", response_model=EstadoCheckoutOut)
def obter_estado(sessao: CheckoutSession = Depends(get_checkout)):
    return sessao.estado()


@router.post("/abrir", response_model=EstadoCheckoutOut)
async def abrir_checkout(sessao: CheckoutSession = Depends(get_checkout)):
    sessao.abrir()
    return sessao.estado()


@router.post("/fechar", response_model=EstadoCheckoutOut)
async def fechar_checkout(sessao: CheckoutSession = Depends(get_checkout)):
    sessao.fechar()
    return sessao.estado()


@router.post("/avancar", response_model=EstadoCheckoutOut)
async def avancar(sessao: CheckoutSession = Depends(get_checkout)):
    sessao.avancar()
    return sessao.estado()


@router.post("/voltar", response_model=EstadoCheckoutOut)
async def voltar(sessao: CheckoutSession = Depends(get_checkout)):
    sessao.voltar()
    return sessao.estado()


@router.patch("/dados", response_model=EstadoCheckoutOut)
def atualizar_dados(
    payload: AtualizarDadosCheckoutRequest = Body(...),
    sessao: CheckoutSession = Depends(get_checkout),
):
    sessao.atualizar_dados(**payload.model_dump(exclude_unset=True, exclude_none=True))
    return sessao.estado()


@router.post("/dados/preencher", response_model=EstadoCheckoutOut)
def preencher_dados(
    payload: PreencherDadosRequest = Body(...),
    sessao: CheckoutSession = Depends(get_checkout),
):
    sessao.preencher_por_nome(payload.nome)
    return sessao.estado()


@router.post("/cupom", response_model=EstadoCheckoutOut)
async def aplicar_cupom(
    payload: AplicarCupomRequest = Body(...),
    sessao: CheckoutSession = Depends(get_checkout),
):
    await sessao.aplicar_cupom(payload.codigo)
    return sessao.estado()


@router.delete("/cupom", response_model=EstadoCheckoutOut)
def remover_cupom(sessao: CheckoutSession = Depends(get_checkout)):
    sessao.remover_cupom()
    return sessao.estado()


@router.post("/enviar", response_model=EstadoCheckoutOut)
async def enviar_pedido(sessao: CheckoutSession = Depends(get_checkout)):
    logger.info(f"[Checkout] Envio solicitado - restaurante_id={sessao.restaurante.id}")
    await sessao.enviar()
    return sessao.estado()


@router.post("/pix/confirmar-manual", response_model=EstadoCheckoutOut)
async def confirmar_pix_manual(sessao: CheckoutSession = Depends(get_checkout)):
    await sessao.confirmar_pix_manual()
    return sessao.estado()

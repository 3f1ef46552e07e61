from fastapi import APIRouter, Body, Depends, Path, status

from guarafood.api.cardapio.services.service_cardapio import CardapioService
from guarafood.api.carrinho.schemas import (
    AdicionarItemRequest,
    ItemCarrinho,
    ObservacaoRequest,
    QuantidadeRequest,
    ResumoCarrinho,
)
from guarafood.api.carrinho.services import CarrinhoService
from guarafood.api.carrinho.services.service_adicionar_item import adicionar_do_cardapio
from guarafood.core.dependencies import get_cardapio_service, get_carrinho_service

router = APIRouter(prefix="/api/carrinho/public", tags=["Public - Carrinho"])


@router.get("", response_model=ResumoCarrinho)
def obter_carrinho(carrinho: CarrinhoService = Depends(get_carrinho_service)):
    return carrinho.resumo()


@router.post("/itens", response_model=ItemCarrinho, status_code=status.HTTP_201_CREATED)
async def adicionar_item(
    payload: AdicionarItemRequest = Body(...),
    carrinho: CarrinhoService = Depends(get_carrinho_service),
    cardapio: CardapioService = Depends(get_cardapio_service),
):
    return await adicionar_do_cardapio(carrinho, cardapio, payload)


@router.patch("/itens/{item_id}/quantidade", response_model=ResumoCarrinho)
def definir_quantidade(
    item_id: str = Path(...),
    payload: QuantidadeRequest = Body(...),
    carrinho: CarrinhoService = Depends(get_carrinho_service),
):
    carrinho.definir_quantidade(item_id, payload.quantidade)
    return carrinho.resumo()


@router.patch("/itens/{item_id}/observacao", response_model=ResumoCarrinho)
def definir_observacao(
    item_id: str = Path(...),
    payload: ObservacaoRequest = Body(...),
    carrinho: CarrinhoService = Depends(get_carrinho_service),
):
    carrinho.definir_observacao(item_id, payload.observacao)
    return carrinho.resumo()


@router.delete("/itens/{item_id}", response_model=ResumoCarrinho)
def remover_item(
    item_id: str = Path(...),
    carrinho: CarrinhoService = Depends(get_carrinho_service),
):
    carrinho.remover(item_id)
    return carrinho.resumo()


@router.delete("", response_model=ResumoCarrinho)
def limpar_carrinho(carrinho: CarrinhoService = Depends(get_carrinho_service)):
    carrinho.limpar()
    return carrinho.resumo()

from __future__ import annotations

from fastapi import HTTPException, status

from guarafood.api.cardapio.services.service_cardapio import CardapioService
from guarafood.api.cardapio.services.service_configurador import configurador_para, configurar_item
from guarafood.api.carrinho.schemas.schema_carrinho import (
    AdicionarItemRequest,
    ItemCarrinho,
    TipoProdutoEnum,
)
from guarafood.api.carrinho.services.service_carrinho import CarrinhoService


async def adicionar_do_cardapio(
    carrinho: CarrinhoService,
    cardapio: CardapioService,
    req: AdicionarItemRequest,
) -> ItemCarrinho:
    """
    Resolve o produto no cardápio (já com promoções) e adiciona ao carrinho.
    Pizza, açaí e itens com opções passam pelo configurador; o resto entra direto.
    """
    categorias = await cardapio.obter_cardapio(req.restaurante_id, incluir_ocultos=True)
    ids_existentes = {i.id for i in carrinho.itens}

    if req.tipo == TipoProdutoEnum.COMBO:
        combo = next((c for cat in categorias for c in cat.combos if c.id == req.produto_id), None)
        if combo is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Combo não encontrado")
        linha = carrinho.adicionar(combo)
    else:
        itens = {i.id: i for cat in categorias for i in cat.items}
        item = itens.get(req.produto_id)
        if item is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Item não encontrado")

        if configurador_para(item) is None:
            linha = carrinho.adicionar(item)
        else:
            segunda = None
            if req.segunda_metade_id is not None:
                segunda = itens.get(req.segunda_metade_id)
                if segunda is None or not segunda.is_pizza:
                    raise HTTPException(status.HTTP_400_BAD_REQUEST, "Sabor da segunda metade inválido")
            adicionais = await cardapio.listar_adicionais(req.restaurante_id)
            configurado = configurar_item(
                item,
                adicionais,
                tamanho=req.tamanho,
                adicional_ids=req.adicional_ids,
                segunda_metade=segunda,
            )
            linha = carrinho.adicionar(configurado)

    # Observação só vale para linha nova; a mesclada mantém a sua
    if req.observacao and linha.id not in ids_existentes:
        carrinho.definir_observacao(linha.id, req.observacao)
        linha = linha.model_copy(update={"notes": req.observacao})
    return linha

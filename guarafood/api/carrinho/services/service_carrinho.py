from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from guarafood.api.armazenamento.services.service_armazenamento import (
    CHAVE_CARRINHO,
    ArmazenamentoLocal,
)
from guarafood.api.cardapio.schemas.schema_cardapio import Combo, ItemCardapio
from guarafood.api.carrinho.schemas.schema_carrinho import ItemCarrinho, ResumoCarrinho
from guarafood.api.pedidos.services.service_pedido_helpers import _dec
from guarafood.utils.logger import logger

_LISTA_ITENS = TypeAdapter(List[ItemCarrinho])


def chave_catalogo(produto: Union[ItemCardapio, Combo]) -> str:
    prefixo = "combo" if isinstance(produto, Combo) else "item"
    return f"{prefixo}-{produto.id}"


def _item_de_catalogo(produto: Union[ItemCardapio, Combo]) -> ItemCarrinho:
    promocao = produto.active_promotion
    return ItemCarrinho(
        id=chave_catalogo(produto),
        name=produto.name,
        price=produto.price,
        base_price=produto.price,
        image_url=produto.image_url,
        quantity=1,
        description=produto.description,
        original_price=produto.original_price,
        promotion_name=promocao.name if promocao else None,
    )


class CarrinhoService:
    """
    Carrinho do cliente: lista ordenada de linhas com quantidades e observações.

    Toda mutação grava o carrinho inteiro no armazenamento local. Na criação o
    carrinho é hidratado do armazenamento; conteúdo ilegível vira carrinho vazio.
    """

    def __init__(self, armazenamento: ArmazenamentoLocal):
        self.armazenamento = armazenamento
        self._itens: List[ItemCarrinho] = self._hidratar()

    def _hidratar(self) -> List[ItemCarrinho]:
        bruto = self.armazenamento.get_json(CHAVE_CARRINHO, [])
        try:
            return _LISTA_ITENS.validate_python(bruto or [])
        except ValidationError as e:
            logger.warning(f"[Carrinho] Carrinho salvo inválido, iniciando vazio: {e.error_count()} erro(s)")
            return []

    def _persistir(self) -> None:
        self.armazenamento.set_json(CHAVE_CARRINHO, _LISTA_ITENS.dump_python(self._itens, mode="json"))

    def _buscar(self, item_id: str) -> Optional[ItemCarrinho]:
        return next((i for i in self._itens if i.id == item_id), None)

    # ---------------- LEITURA ----------------
    @property
    def itens(self) -> List[ItemCarrinho]:
        return [i.model_copy() for i in self._itens]

    @property
    def total_itens(self) -> int:
        return sum(i.quantity for i in self._itens)

    @property
    def total_preco(self) -> Decimal:
        return _dec(sum((i.price * i.quantity for i in self._itens), Decimal("0")))

    @property
    def vazio(self) -> bool:
        return not self._itens

    def resumo(self) -> ResumoCarrinho:
        return ResumoCarrinho(itens=self.itens, total_itens=self.total_itens, total_preco=self.total_preco)

    # ---------------- MUTAÇÕES ----------------
    def adicionar(self, produto: Union[ItemCarrinho, ItemCardapio, Combo]) -> ItemCarrinho:
        """
        Item já configurado mantém sua chave; item/combo do catálogo recebe
        `item-<id>`/`combo-<id>`. Chave repetida incrementa a quantidade.
        """
        novo = produto if isinstance(produto, ItemCarrinho) else _item_de_catalogo(produto)

        existente = self._buscar(novo.id)
        if existente:
            existente.quantity += 1
            linha = existente
        else:
            linha = novo.model_copy(update={"quantity": 1})
            self._itens.append(linha)

        self._persistir()
        logger.info(f"[Carrinho] + {linha.id} (qtd={linha.quantity})")
        return linha.model_copy()

    def remover(self, item_id: str) -> None:
        antes = len(self._itens)
        self._itens = [i for i in self._itens if i.id != item_id]
        if len(self._itens) != antes:
            self._persistir()

    def definir_quantidade(self, item_id: str, quantidade: int) -> None:
        if quantidade <= 0:
            self.remover(item_id)
            return
        linha = self._buscar(item_id)
        if linha is None:
            return
        linha.quantity = quantidade
        self._persistir()

    def definir_observacao(self, item_id: str, observacao: str) -> None:
        linha = self._buscar(item_id)
        if linha is None:
            return
        linha.notes = observacao
        self._persistir()

    def limpar(self) -> None:
        self._itens = []
        self._persistir()

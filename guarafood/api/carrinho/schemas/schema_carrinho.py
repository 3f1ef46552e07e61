from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from guarafood.api.cardapio.schemas.schema_cardapio import Adicional


class MetadePizza(BaseModel):
    name: str
    price: Decimal


class ItemCarrinho(BaseModel):
    """
    Linha do carrinho. O `id` identifica a configuração: `item-<id>`,
    `combo-<id>` ou a chave composta gerada por um configurador.
    """
    id: str
    name: str
    price: Decimal
    base_price: Decimal
    image_url: Optional[str] = None
    quantity: int = 1
    description: str = ""
    notes: Optional[str] = None
    selected_addons: List[Adicional] = Field(default_factory=list)
    size_name: Optional[str] = None
    halves: Optional[List[MetadePizza]] = None
    original_price: Optional[Decimal] = None
    promotion_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ResumoCarrinho(BaseModel):
    itens: List[ItemCarrinho]
    total_itens: int
    total_preco: Decimal


class QuantidadeRequest(BaseModel):
    quantidade: int


class ObservacaoRequest(BaseModel):
    observacao: str = ""


class TipoProdutoEnum(str, Enum):
    ITEM = "item"
    COMBO = "combo"


class AdicionarItemRequest(BaseModel):
    restaurante_id: int
    produto_id: int
    tipo: TipoProdutoEnum = TipoProdutoEnum.ITEM
    tamanho: Optional[str] = None
    adicional_ids: List[int] = Field(default_factory=list)
    segunda_metade_id: Optional[int] = None
    observacao: Optional[str] = None

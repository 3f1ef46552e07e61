from .schema_carrinho import (
    AdicionarItemRequest,
    ItemCarrinho,
    MetadePizza,
    ObservacaoRequest,
    QuantidadeRequest,
    ResumoCarrinho,
    TipoProdutoEnum,
)

__all__ = [
    "AdicionarItemRequest",
    "ItemCarrinho",
    "MetadePizza",
    "ObservacaoRequest",
    "QuantidadeRequest",
    "ResumoCarrinho",
    "TipoProdutoEnum",
]

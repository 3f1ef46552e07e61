"""
Schemas do catálogo (restaurantes, cardápio, adicionais, banners).
"""

from .schema_cardapio import (
    TipoDescontoEnum,
    TipoAlvoPromocaoEnum,
    HorarioFuncionamento,
    Restaurante,
    Promocao,
    OpcaoTamanho,
    Adicional,
    ItemCardapio,
    Combo,
    CategoriaCardapio,
    Banner,
    VitrineRestaurante,
)

__all__ = [
    "TipoDescontoEnum",
    "TipoAlvoPromocaoEnum",
    "HorarioFuncionamento",
    "Restaurante",
    "Promocao",
    "OpcaoTamanho",
    "Adicional",
    "ItemCardapio",
    "Combo",
    "CategoriaCardapio",
    "Banner",
    "VitrineRestaurante",
]

"""
Contract (Interface) para o catálogo hospedado: restaurantes, cardápio, adicionais e banners.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from guarafood.api.cardapio.schemas.schema_cardapio import (
    Adicional,
    Banner,
    CategoriaCardapio,
    Combo,
    ItemCardapio,
    Promocao,
    Restaurante,
)


class ICatalogoContract(ABC):
    @abstractmethod
    async def listar_restaurantes(self) -> List[Restaurante]:
        raise NotImplementedError

    @abstractmethod
    async def obter_restaurante(self, restaurante_id: int) -> Optional[Restaurante]:
        raise NotImplementedError

    @abstractmethod
    async def listar_categorias(self, restaurante_id: int) -> List[CategoriaCardapio]:
        """Categorias ordenadas por `display_order`, sem itens."""
        raise NotImplementedError

    @abstractmethod
    async def listar_itens(self, restaurante_id: int) -> List[ItemCardapio]:
        raise NotImplementedError

    @abstractmethod
    async def listar_combos(self, restaurante_id: int) -> List[Combo]:
        raise NotImplementedError

    @abstractmethod
    async def listar_promocoes_vigentes(self, restaurante_id: int, agora: datetime) -> List[Promocao]:
        raise NotImplementedError

    @abstractmethod
    async def listar_adicionais(self, restaurante_id: int) -> List[Adicional]:
        raise NotImplementedError

    @abstractmethod
    async def listar_banners_ativos(self) -> List[Banner]:
        raise NotImplementedError

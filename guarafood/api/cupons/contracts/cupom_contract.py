from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from guarafood.api.cupons.schemas.schema_cupom import Cupom


class ICupomContract(ABC):
    @abstractmethod
    async def buscar_por_codigo(self, codigo: str, restaurante_id: int) -> Optional[Cupom]:
        """Cupom do restaurante pelo código (maiúsculo); None quando não existe."""
        raise NotImplementedError

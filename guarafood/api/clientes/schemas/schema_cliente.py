from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from guarafood.api.pedidos.schemas.schema_pedido import EnderecoCliente


class PerfilCliente(BaseModel):
    """Dados salvos para preencher o checkout de quem já comprou (não é autenticação)."""
    phone: str
    address: Optional[EnderecoCliente] = None


class FiltroRestaurantes(BaseModel):
    busca: str = ""
    categorias: List[str] = Field(default_factory=list)
    apenas_abertos: bool = False

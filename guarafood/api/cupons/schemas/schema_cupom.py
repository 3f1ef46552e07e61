from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from guarafood.api.cardapio.schemas.schema_cardapio import TipoDescontoEnum


class Cupom(BaseModel):
    id: Optional[int] = None
    code: str
    description: Optional[str] = None
    discount_type: TipoDescontoEnum
    discount_value: Decimal
    min_order_value: Optional[Decimal] = None
    expiration_date: Optional[Union[datetime, date]] = None
    is_active: bool = True
    restaurant_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class AplicarCupomRequest(BaseModel):
    codigo: str

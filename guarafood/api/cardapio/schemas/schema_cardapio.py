from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TipoDescontoEnum(str, Enum):
    PERCENTUAL = "PERCENTAGE"
    FIXO = "FIXED"


class TipoAlvoPromocaoEnum(str, Enum):
    ITEM = "ITEM"
    COMBO = "COMBO"
    CATEGORIA = "CATEGORY"


class HorarioFuncionamento(BaseModel):
    """Um dia da semana com até dois turnos (0 = domingo)."""
    day_of_week: int = Field(ge=0, le=6)
    opens: Optional[str] = None
    closes: Optional[str] = None
    opens2: Optional[str] = None
    closes2: Optional[str] = None
    is_open: bool = True


class Restaurante(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    delivery_time: Optional[str] = None
    rating: Optional[float] = None
    image_url: Optional[str] = None
    payment_gateways: List[str] = Field(default_factory=list)
    address: Optional[str] = None
    phone: Optional[str] = None
    opening_hours: Optional[str] = None
    closing_hours: Optional[str] = None
    delivery_fee: Decimal = Decimal("0")
    operating_hours: Optional[List[HorarioFuncionamento]] = None
    has_auto_pix: bool = False  # token do gateway nunca sai do backend
    manual_pix_key: Optional[str] = None


class Promocao(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    discount_type: TipoDescontoEnum
    discount_value: Decimal
    target_type: TipoAlvoPromocaoEnum
    target_ids: List[int | str] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    restaurant_id: Optional[int] = None


class OpcaoTamanho(BaseModel):
    name: str
    price: Decimal
    free_addon_count: Optional[int] = None


class Adicional(BaseModel):
    id: int
    name: str
    price: Decimal
    restaurant_id: Optional[int] = None

    model_config = ConfigDict(frozen=True)


class ItemCardapio(BaseModel):
    id: int
    name: str
    description: str = ""
    price: Decimal
    original_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    restaurant_id: Optional[int] = None
    category_id: Optional[int] = None
    active_promotion: Optional[Promocao] = None
    is_pizza: bool = False
    is_acai: bool = False
    is_marmita: bool = False
    marmita_options: List[str] = Field(default_factory=list)
    free_addon_count: Optional[int] = None
    available_addon_ids: List[int] = Field(default_factory=list)
    sizes: List[OpcaoTamanho] = Field(default_factory=list)
    is_daily_special: bool = False
    is_weekly_special: bool = False
    available_days: List[int] = Field(default_factory=list)


class Combo(BaseModel):
    id: int
    name: str
    description: str = ""
    price: Decimal
    original_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    restaurant_id: Optional[int] = None
    menu_item_ids: List[int] = Field(default_factory=list)
    active_promotion: Optional[Promocao] = None
    category_id: Optional[int] = None


class CategoriaCardapio(BaseModel):
    id: int
    name: str
    items: List[ItemCardapio] = Field(default_factory=list)
    combos: List[Combo] = Field(default_factory=list)
    restaurant_id: Optional[int] = None
    display_order: Optional[int] = None
    icon_url: Optional[str] = None


class Banner(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    cta_text: Optional[str] = None
    target_type: str = "restaurant"
    target_value: Optional[str] = None
    active: bool = True


class VitrineRestaurante(BaseModel):
    """Seções especiais montadas a partir do cardápio completo."""
    cardapio: List[CategoriaCardapio] = Field(default_factory=list)
    marmitas: List[ItemCardapio] = Field(default_factory=list)
    destaques_do_dia: List[ItemCardapio] = Field(default_factory=list)
    promocoes_da_semana: List[ItemCardapio] = Field(default_factory=list)
    itens_em_promocao: List[ItemCardapio] = Field(default_factory=list)
    pizzas: List[ItemCardapio] = Field(default_factory=list)

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from guarafood.api.cardapio.contracts.catalogo_contract import ICatalogoContract
from guarafood.api.cardapio.schemas.schema_cardapio import (
    Adicional,
    Banner,
    CategoriaCardapio,
    Combo,
    HorarioFuncionamento,
    ItemCardapio,
    Promocao,
    Restaurante,
)
from guarafood.integrations.supabase.client import SupabaseClient, SupabaseError
from guarafood.utils.logger import logger


# ------------------------------------------------------------------
# Normalizadores (linha do banco -> schema)
# ------------------------------------------------------------------
def _normalizar_horarios(raw: Any) -> Optional[List[HorarioFuncionamento]]:
    if not isinstance(raw, list):
        return None
    horarios: List[HorarioFuncionamento] = []
    for dia in raw:
        if not isinstance(dia, dict):
            continue
        horarios.append(
            HorarioFuncionamento(
                day_of_week=dia.get("dayOfWeek", dia.get("day_of_week", len(horarios))),
                opens=dia.get("opens"),
                closes=dia.get("closes"),
                opens2=dia.get("opens2"),
                closes2=dia.get("closes2"),
                is_open=bool(dia.get("isOpen", dia.get("is_open", True))),
            )
        )
    return horarios


def normalizar_restaurante(data: Dict[str, Any]) -> Restaurante:
    credenciais = data.get("mercado_pago_credentials") or {}
    return Restaurante(
        id=data["id"],
        name=data.get("name") or "",
        category=data.get("category"),
        description=data.get("description"),
        delivery_time=data.get("delivery_time"),
        rating=data.get("rating"),
        image_url=data.get("image_url"),
        payment_gateways=data.get("payment_gateways") or [],
        address=data.get("address"),
        phone=data.get("phone"),
        opening_hours=data.get("opening_hours"),
        closing_hours=data.get("closing_hours"),
        delivery_fee=data.get("delivery_fee") or 0,
        operating_hours=_normalizar_horarios(data.get("operating_hours")),
        has_auto_pix=bool(credenciais.get("accessToken")) if isinstance(credenciais, dict) else False,
        manual_pix_key=data.get("manual_pix_key"),
    )


def _normalizar_promocao(data: Dict[str, Any]) -> Promocao:
    return Promocao(
        id=data["id"],
        name=data.get("name") or "",
        description=data.get("description"),
        discount_type=data.get("discount_type"),
        discount_value=data.get("discount_value") or 0,
        target_type=data.get("target_type"),
        target_ids=data.get("target_ids") or [],
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
        restaurant_id=data.get("restaurant_id"),
    )


def _normalizar_item(data: Dict[str, Any]) -> ItemCardapio:
    return ItemCardapio(
        id=data["id"],
        name=data.get("name") or "",
        description=data.get("description") or "",
        price=data.get("price") or 0,
        original_price=data.get("original_price"),
        image_url=data.get("image_url"),
        restaurant_id=data.get("restaurant_id"),
        category_id=data.get("category_id"),
        is_pizza=bool(data.get("is_pizza")),
        is_acai=bool(data.get("is_acai")),
        is_marmita=bool(data.get("is_marmita")),
        marmita_options=data.get("marmita_options") or [],
        free_addon_count=data.get("free_addon_count"),
        available_addon_ids=data.get("available_addon_ids") or [],
        sizes=data.get("sizes") or [],
        is_daily_special=bool(data.get("is_daily_special")),
        is_weekly_special=bool(data.get("is_weekly_special")),
        available_days=data.get("available_days") or [],
    )


def _normalizar_combo(data: Dict[str, Any]) -> Combo:
    return Combo(
        id=data["id"],
        name=data.get("name") or "",
        description=data.get("description") or "",
        price=data.get("price") or 0,
        original_price=data.get("original_price"),
        image_url=data.get("image_url"),
        restaurant_id=data.get("restaurant_id"),
        menu_item_ids=data.get("menu_item_ids") or [],
        category_id=data.get("category_id"),
    )


class SupabaseCatalogoAdapter(ICatalogoContract):
    """Adapter do catálogo sobre as tabelas do Supabase."""

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def listar_restaurantes(self) -> List[Restaurante]:
        rows = await self.client.select("restaurants", ordem="name.asc")
        return [normalizar_restaurante(r) for r in rows]

    async def obter_restaurante(self, restaurante_id: int) -> Optional[Restaurante]:
        rows = await self.client.select("restaurants", filtros={"id": f"eq.{restaurante_id}"})
        return normalizar_restaurante(rows[0]) if rows else None

    async def listar_categorias(self, restaurante_id: int) -> List[CategoriaCardapio]:
        rows = await self.client.select(
            "menu_categories",
            filtros={"restaurant_id": f"eq.{restaurante_id}"},
            ordem="display_order.asc",
        )
        return [
            CategoriaCardapio(
                id=r["id"],
                name=r.get("name") or "",
                restaurant_id=r.get("restaurant_id"),
                display_order=r.get("display_order"),
                icon_url=r.get("icon_url"),
            )
            for r in rows
        ]

    async def listar_itens(self, restaurante_id: int) -> List[ItemCardapio]:
        rows = await self.client.select(
            "menu_items",
            filtros={"restaurant_id": f"eq.{restaurante_id}"},
            ordem="display_order.asc",
        )
        return [_normalizar_item(r) for r in rows]

    async def listar_combos(self, restaurante_id: int) -> List[Combo]:
        rows = await self.client.select("combos", filtros={"restaurant_id": f"eq.{restaurante_id}"})
        return [_normalizar_combo(r) for r in rows]

    async def listar_promocoes_vigentes(self, restaurante_id: int, agora: datetime) -> List[Promocao]:
        iso = agora.isoformat()
        try:
            rows = await self.client.select(
                "promotions",
                filtros={
                    "restaurant_id": f"eq.{restaurante_id}",
                    "start_date": f"lte.{iso}",
                    "end_date": f"gte.{iso}",
                },
            )
        except SupabaseError as e:
            # Tabela de promoções é opcional; cardápio segue sem elas
            logger.warning(f"[Catalogo] Não foi possível buscar promoções: {e}")
            return []
        return [_normalizar_promocao(r) for r in rows]

    async def listar_adicionais(self, restaurante_id: int) -> List[Adicional]:
        rows = await self.client.select("addons", filtros={"restaurant_id": f"eq.{restaurante_id}"})
        return [
            Adicional(id=r["id"], name=r.get("name") or "", price=r.get("price") or 0, restaurant_id=r.get("restaurant_id"))
            for r in rows
        ]

    async def listar_banners_ativos(self) -> List[Banner]:
        rows = await self.client.select("banners", filtros={"active": "eq.true"})
        return [
            Banner(
                id=r["id"],
                title=r.get("title") or "",
                description=r.get("description"),
                image_url=r.get("image_url"),
                cta_text=r.get("cta_text"),
                target_type=r.get("target_type") or "restaurant",
                target_value=r.get("target_value"),
                active=bool(r.get("active", True)),
            )
            for r in rows
        ]

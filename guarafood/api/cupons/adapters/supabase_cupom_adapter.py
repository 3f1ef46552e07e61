from __future__ import annotations

from typing import Optional

from guarafood.api.cupons.contracts.cupom_contract import ICupomContract
from guarafood.api.cupons.schemas.schema_cupom import Cupom
from guarafood.integrations.supabase.client import SupabaseClient


class SupabaseCupomAdapter(ICupomContract):
    def __init__(self, client: SupabaseClient):
        self.client = client

    async def buscar_por_codigo(self, codigo: str, restaurante_id: int) -> Optional[Cupom]:
        rows = await self.client.select(
            "coupons",
            filtros={
                "code": f"eq.{codigo.strip().upper()}",
                "restaurant_id": f"eq.{restaurante_id}",
            },
        )
        if not rows:
            return None
        data = rows[0]
        return Cupom(
            id=data.get("id"),
            code=data["code"],
            description=data.get("description"),
            discount_type=data.get("discount_type"),
            discount_value=data.get("discount_value") or 0,
            min_order_value=data.get("min_order_value"),
            expiration_date=data.get("expiration_date"),
            is_active=bool(data.get("is_active")),
            restaurant_id=data.get("restaurant_id"),
        )

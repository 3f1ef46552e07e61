from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, status

from guarafood.api.cardapio.schemas.schema_cardapio import TipoDescontoEnum
from guarafood.api.cupons.contracts.cupom_contract import ICupomContract
from guarafood.api.cupons.schemas.schema_cupom import Cupom
from guarafood.api.pedidos.services.service_pedido_helpers import _dec
from guarafood.utils.database_utils import now_trimmed
from guarafood.utils.logger import logger


def cupom_expirado(cupom: Cupom, agora: datetime) -> bool:
    """Vale até o fim do dia da expiração."""
    if cupom.expiration_date is None:
        return False
    expira = cupom.expiration_date
    if isinstance(expira, datetime):
        if expira.tzinfo is not None and agora.tzinfo is not None:
            expira = expira.astimezone(agora.tzinfo)
        expira = expira.date()
    hoje: date = agora.date()
    return expira < hoje


def calcular_desconto(cupom: Optional[Cupom], subtotal: Decimal) -> Decimal:
    """Percentual incide sobre o subtotal dos itens; o desconto nunca passa do subtotal."""
    if cupom is None:
        return _dec(0)
    if cupom.discount_type == TipoDescontoEnum.FIXO:
        desconto = cupom.discount_value
    else:
        desconto = subtotal * cupom.discount_value / Decimal(100)
    return _dec(min(max(desconto, Decimal(0)), subtotal))


class CupomService:
    def __init__(self, cupons: ICupomContract):
        self.cupons = cupons

    async def validar(
        self,
        codigo: str,
        *,
        restaurante_id: int,
        subtotal: Decimal,
        agora: Optional[datetime] = None,
    ) -> Cupom:
        codigo = (codigo or "").strip()
        if not codigo:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Por favor, insira um código.")

        cupom = await self.cupons.buscar_por_codigo(codigo.upper(), restaurante_id)
        if not cupom or not cupom.is_active or cupom_expirado(cupom, agora or now_trimmed()):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Cupom inválido ou expirado.")

        if cupom.min_order_value and subtotal < cupom.min_order_value:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                f"Pedido mínimo de R$ {_dec(cupom.min_order_value):.2f}.",
            )

        logger.info(f"[Cupom] {cupom.code} aplicado no restaurante {restaurante_id}")
        return cupom

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional


def _dec(value: float | Decimal | int | str) -> Decimal:
    """Converte valor para Decimal com precisão de 2 casas decimais."""
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def formatar_brl(valor: Decimal | float | int) -> str:
    """`Decimal("1234.5")` -> `"1.234,50"` (sem o prefixo R$)."""
    texto = f"{_dec(valor):,.2f}"
    return texto.replace(",", "_").replace(".", ",").replace("_", ".")


@dataclass(frozen=True, slots=True)
class TotaisPedido:
    subtotal: Decimal
    desconto: Decimal
    taxa_entrega: Decimal
    total: Decimal


def calcular_totais(*, subtotal: Decimal, desconto: Decimal, taxa_entrega: Decimal) -> TotaisPedido:
    """
    total = max(0, subtotal - desconto) + taxa_entrega.
    O desconto nunca passa do subtotal.
    """
    subtotal = _dec(subtotal)
    desconto = min(max(_dec(desconto), _dec(0)), subtotal) if subtotal > 0 else _dec(0)
    taxa_entrega = _dec(taxa_entrega)
    total = _dec(max(subtotal - desconto, _dec(0)) + taxa_entrega)
    return TotaisPedido(subtotal=subtotal, desconto=desconto, taxa_entrega=taxa_entrega, total=total)


def parse_troco(valor: Any) -> Optional[Decimal]:
    """Aceita '50', '50.00' ou '50,00'. Retorna None quando vazio, inválido ou não positivo."""
    if valor is None:
        return None
    texto = str(valor).strip().replace("R$", "").strip()
    if not texto:
        return None
    if "," in texto:
        texto = texto.replace(".", "").replace(",", ".")
    try:
        numero = Decimal(texto)
    except InvalidOperation:
        return None
    if not numero.is_finite() or numero <= 0:
        return None
    return _dec(numero)


def rotulo_forma_pagamento(forma_pagamento: str, troco_para: Any = None) -> str:
    """
    Para pagamento em dinheiro com troco informado:
    'Dinheiro' + 50 -> 'Dinheiro (Troco para R$ 50.00)'.
    """
    if forma_pagamento.strip().lower() != "dinheiro":
        return forma_pagamento
    troco = parse_troco(troco_para)
    if troco is None:
        return forma_pagamento
    return f"Dinheiro (Troco para R$ {troco:.2f})"

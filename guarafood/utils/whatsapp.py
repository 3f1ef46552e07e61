import re
from decimal import Decimal
from typing import Iterable, Optional
from urllib.parse import quote


def normalizar_telefone(telefone: Optional[str]) -> Optional[str]:
    """
    Remove máscara e garante o prefixo do país (55) para números brasileiros.

    - Remove espaços, parênteses, hífen, '+' etc.
    - Remove prefixo internacional "00" (ex: 0055...).
    - DDD + número (10 ou 11 dígitos) ganha o "55" na frente.
    """
    if telefone is None:
        return None

    telefone_limpo = re.sub(r"[^\d]", "", telefone)
    if not telefone_limpo:
        return telefone_limpo

    if telefone_limpo.startswith("00"):
        telefone_limpo = telefone_limpo[2:]

    if telefone_limpo.startswith("55") and len(telefone_limpo) in (12, 13):
        return telefone_limpo

    if len(telefone_limpo) in (10, 11):
        return "55" + telefone_limpo

    return telefone_limpo


def telefone_valido(telefone: Optional[str]) -> bool:
    """DDD + número: 10 ou 11 dígitos, ignorando a máscara."""
    digitos = re.sub(r"[^\d]", "", telefone or "")
    return len(digitos) in (10, 11)


def montar_link_whatsapp(telefone: Optional[str], texto: str = "") -> Optional[str]:
    numero = normalizar_telefone(telefone)
    if not numero:
        return None
    url = f"https://wa.me/{numero}"
    if texto:
        url += f"?text={quote(texto)}"
    return url


def mensagem_confirmacao_pedido(
    *,
    restaurante: str,
    cliente: str,
    itens: Iterable[str],
    total: Decimal,
    forma_pagamento: str,
    numero_pedido: Optional[str] = None,
) -> str:
    linhas = [f"Olá, {restaurante}! Acabei de fazer um pedido pelo GuaraFood."]
    if numero_pedido:
        linhas.append(f"Pedido: #{numero_pedido}")
    linhas.append(f"Cliente: {cliente}")
    linhas.append("")
    linhas.extend(f"• {item}" for item in itens)
    linhas.append("")
    linhas.append(f"Total: R$ {total:.2f}")
    linhas.append(f"Pagamento: {forma_pagamento}")
    return "\n".join(linhas)

from .schema_cupom import AplicarCupomRequest, Cupom

__all__ = ["AplicarCupomRequest", "Cupom"]

from .service_cupom import CupomService, calcular_desconto

__all__ = ["CupomService", "calcular_desconto"]

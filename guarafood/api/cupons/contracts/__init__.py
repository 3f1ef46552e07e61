from .cupom_contract import ICupomContract

__all__ = ["ICupomContract"]

from .catalogo_contract import ICatalogoContract

__all__ = ["ICatalogoContract"]

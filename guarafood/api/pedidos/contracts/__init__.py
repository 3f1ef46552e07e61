from .pedidos_contract import IPedidosContract

__all__ = ["IPedidosContract"]

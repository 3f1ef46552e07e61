from .service_carrinho import CarrinhoService

__all__ = ["CarrinhoService"]

from .service_cliente import FavoritosService, PerfilClienteService, filtrar_restaurantes

__all__ = ["FavoritosService", "PerfilClienteService", "filtrar_restaurantes"]

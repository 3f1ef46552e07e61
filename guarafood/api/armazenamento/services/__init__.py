from .service_armazenamento import ArmazenamentoLocal

__all__ = ["ArmazenamentoLocal"]

from .change_feed_contract import Assinatura, CallbackAlteracao, IChangeFeed

__all__ = ["Assinatura", "CallbackAlteracao", "IChangeFeed"]

from .pagamento_contract import IPagamentoContract, PagamentoIndisponivelError

__all__ = ["IPagamentoContract", "PagamentoIndisponivelError"]

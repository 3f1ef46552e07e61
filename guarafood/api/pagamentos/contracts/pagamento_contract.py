from __future__ import annotations

from abc import ABC, abstractmethod

from guarafood.api.pedidos.schemas.schema_pedido import IntencaoPix, NovoPedido


class PagamentoIndisponivelError(Exception):
    """Não foi possível gerar a cobrança Pix automática."""


class IPagamentoContract(ABC):
    @abstractmethod
    async def criar_intencao_pix(self, restaurante_id: int, payload: NovoPedido) -> IntencaoPix:
        """
        Cria o pedido como `Aguardando Pagamento` e a cobrança Pix correspondente.
        A confirmação chega depois pelo feed de alterações do pedido.
        """
        raise NotImplementedError

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

from guarafood.api.pedidos.schemas.schema_pedido import NovoPedido, Pedido, PedidoAcompanhado


class IPedidosContract(ABC):
    @abstractmethod
    async def criar_pedido(self, payload: NovoPedido) -> Pedido:
        """Cria o pedido com status `Novo Pedido`; id, número e horário vêm do servidor."""
        raise NotImplementedError

    @abstractmethod
    async def listar_por_ids(self, ids: Sequence[str]) -> List[PedidoAcompanhado]:
        """Pedidos informados, do mais recente para o mais antigo."""
        raise NotImplementedError

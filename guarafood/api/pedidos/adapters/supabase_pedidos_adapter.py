from __future__ import annotations

from typing import List, Sequence

from guarafood.api.pedidos.contracts.pedidos_contract import IPedidosContract
from guarafood.api.pedidos.schemas.schema_pedido import (
    NovoPedido,
    Pedido,
    PedidoAcompanhado,
    PedidoStatusEnum,
)
from guarafood.integrations.supabase.client import SupabaseClient, chaves_camel, chaves_snake
from guarafood.utils.database_utils import now_trimmed
from guarafood.utils.logger import logger


class SupabasePedidosAdapter(IPedidosContract):
    """
    Tabela `orders` do backend hospedado.

    A criação grava o mesmo formato camelCase que a função `create-payment`
    espalha no insert do Pix; o acompanhamento lê as colunas resumidas em snake_case.
    """

    TABELA = "orders"

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def criar_pedido(self, payload: NovoPedido) -> Pedido:
        dados = chaves_camel(payload.model_dump(mode="json"))
        dados["status"] = PedidoStatusEnum.NOVO.value
        dados["timestamp"] = now_trimmed().isoformat()

        row = await self.client.insert(self.TABELA, dados)
        pedido = Pedido.model_validate(chaves_snake(row))
        logger.info(f"[Pedidos] Pedido criado id={pedido.id} restaurante={pedido.restaurant_id}")
        return pedido

    async def listar_por_ids(self, ids: Sequence[str]) -> List[PedidoAcompanhado]:
        if not ids:
            return []
        rows = await self.client.select(
            self.TABELA,
            colunas="id,status,restaurant_name,total_price,timestamp",
            filtros={"id": f"in.({','.join(ids)})"},
            ordem="timestamp.desc",
        )
        return [PedidoAcompanhado.model_validate(r) for r in rows]

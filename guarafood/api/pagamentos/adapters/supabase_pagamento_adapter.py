from __future__ import annotations

import httpx

from guarafood.api.pagamentos.contracts.pagamento_contract import (
    IPagamentoContract,
    PagamentoIndisponivelError,
)
from guarafood.api.pedidos.schemas.schema_pedido import IntencaoPix, NovoPedido
from guarafood.integrations.supabase.client import SupabaseClient, SupabaseError, chaves_camel
from guarafood.utils.logger import logger


class SupabasePagamentoAdapter(IPagamentoContract):
    """Chama a Edge Function `create-payment`, que fala com o gateway."""

    FUNCAO = "create-payment"

    def __init__(self, client: SupabaseClient):
        self.client = client

    async def criar_intencao_pix(self, restaurante_id: int, payload: NovoPedido) -> IntencaoPix:
        # A função lê orderData.totalPrice, orderData.customerName etc.
        body = {"restaurantId": restaurante_id, "orderData": chaves_camel(payload.model_dump(mode="json"))}
        try:
            data = await self.client.invoke_function(self.FUNCAO, body)
        except SupabaseError as e:
            raise PagamentoIndisponivelError(str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"[Pagamentos] Falha de rede ao gerar Pix: {e}")
            raise PagamentoIndisponivelError("Falha na conexão com o servidor de pagamento") from e

        order_id = data.get("orderId") if isinstance(data, dict) else None
        if not order_id:
            raise PagamentoIndisponivelError("Resposta de pagamento sem identificador do pedido")

        logger.info(f"[Pagamentos] Pix gerado para pedido {order_id}")
        return IntencaoPix(
            order_id=str(order_id),
            qr_code=data.get("qrCode"),
            qr_code_base64=data.get("qrCodeBase64"),
        )

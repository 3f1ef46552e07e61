from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from guarafood.api.carrinho.schemas.schema_carrinho import ItemCarrinho


class PedidoStatusEnum(str, Enum):
    AGUARDANDO_PAGAMENTO = "Aguardando Pagamento"
    NOVO = "Novo Pedido"
    PREPARANDO = "Preparando"
    A_CAMINHO = "A Caminho"
    ENTREGUE = "Entregue"
    CANCELADO = "Cancelado"


# Posição na barra de progresso (0..4)
ORDEM_STATUS: Dict[PedidoStatusEnum, int] = {
    PedidoStatusEnum.AGUARDANDO_PAGAMENTO: 0,
    PedidoStatusEnum.NOVO: 1,
    PedidoStatusEnum.PREPARANDO: 2,
    PedidoStatusEnum.A_CAMINHO: 3,
    PedidoStatusEnum.ENTREGUE: 4,
    PedidoStatusEnum.CANCELADO: 0,
}

ROTULOS_STATUS: Dict[PedidoStatusEnum, str] = {
    PedidoStatusEnum.AGUARDANDO_PAGAMENTO: "Aguardando Pagamento",
    PedidoStatusEnum.NOVO: "Recebido",
    PedidoStatusEnum.PREPARANDO: "Preparando",
    PedidoStatusEnum.A_CAMINHO: "Saiu para Entrega",
    PedidoStatusEnum.ENTREGUE: "Entregue",
    PedidoStatusEnum.CANCELADO: "Cancelado",
}

STATUS_TERMINAIS = frozenset({PedidoStatusEnum.ENTREGUE, PedidoStatusEnum.CANCELADO})


class TipoEntregaEnum(str, Enum):
    DELIVERY = "delivery"
    RETIRADA = "pickup"


class EnderecoCliente(BaseModel):
    zip_code: str = ""
    street: str = ""
    number: str = ""
    neighborhood: str = ""
    complement: Optional[str] = None

    @property
    def completo(self) -> bool:
        return all(v.strip() for v in (self.street, self.number, self.neighborhood))


class NovoPedido(BaseModel):
    """Payload enviado na criação do pedido (e na intenção de pagamento Pix)."""
    customer_name: str
    customer_phone: str
    customer_address: Optional[EnderecoCliente] = None
    delivery_method: TipoEntregaEnum = TipoEntregaEnum.DELIVERY
    needs_packaging: bool = False
    items: List[ItemCarrinho]
    subtotal: Decimal
    discount_amount: Decimal = Decimal("0")
    coupon_code: Optional[str] = None
    delivery_fee: Decimal = Decimal("0")
    total_price: Decimal
    restaurant_id: int
    restaurant_name: str
    restaurant_address: Optional[str] = None
    restaurant_phone: Optional[str] = None
    payment_method: str


class Pedido(NovoPedido):
    """Pedido persistido no backend; o cliente apenas observa o status."""
    id: str
    order_number: Optional[int] = None
    timestamp: Optional[str] = None
    status: PedidoStatusEnum
    payment_status: Optional[str] = None
    payment_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PedidoAcompanhado(BaseModel):
    """Visão resumida usada no painel de acompanhamento."""
    id: str
    status: PedidoStatusEnum
    restaurant_name: Optional[str] = None
    total_price: Optional[Decimal] = None
    timestamp: Optional[str] = None

    @property
    def etapa(self) -> int:
        return ORDEM_STATUS[self.status]

    @property
    def progresso(self) -> float:
        return self.etapa / 4 * 100

    @property
    def rotulo(self) -> str:
        return ROTULOS_STATUS[self.status]


class IntencaoPix(BaseModel):
    order_id: str
    qr_code: Optional[str] = None
    qr_code_base64: Optional[str] = None


class PainelPedidosOut(BaseModel):
    pedidos: List[PedidoAcompanhado] = Field(default_factory=list)
    expandido: bool = False
    etapa_principal: Optional[int] = None
    progresso_principal: Optional[float] = None
    intervalo_polling: int



class AtualizarDadosCheckoutRequest(BaseModel):
    """Campos do formulário de dados; só os enviados são alterados."""
    nome: Optional[str] = None
    telefone: Optional[str] = None
    tipo_entrega: Optional[TipoEntregaEnum] = None
    endereco: Optional[EnderecoCliente] = None
    embalagem: Optional[bool] = None
    forma_pagamento: Optional[str] = None
    troco_para: Optional[str] = None


class PreencherDadosRequest(BaseModel):
    nome: str

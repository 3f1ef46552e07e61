from .schema_pedido import (
    AtualizarDadosCheckoutRequest,
    PreencherDadosRequest,
    ORDEM_STATUS,
    ROTULOS_STATUS,
    STATUS_TERMINAIS,
    EnderecoCliente,
    IntencaoPix,
    NovoPedido,
    PainelPedidosOut,
    Pedido,
    PedidoAcompanhado,
    PedidoStatusEnum,
    TipoEntregaEnum,
)

__all__ = [
    "AtualizarDadosCheckoutRequest",
    "PreencherDadosRequest",
    "ORDEM_STATUS",
    "ROTULOS_STATUS",
    "STATUS_TERMINAIS",
    "EnderecoCliente",
    "IntencaoPix",
    "NovoPedido",
    "PainelPedidosOut",
    "Pedido",
    "PedidoAcompanhado",
    "PedidoStatusEnum",
    "TipoEntregaEnum",
]

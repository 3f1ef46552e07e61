from __future__ import annotations

from typing import Any, Dict, Iterable, List

from guarafood.api.armazenamento.services.service_armazenamento import (
    CHAVE_HISTORICO_PEDIDOS,
    CHAVE_PEDIDOS_ATIVOS,
    ArmazenamentoLocal,
)
from guarafood.config.settings import ORDER_HISTORY_LIMIT


def _lista(valor: Any) -> list:
    return valor if isinstance(valor, list) else []


class HistoricoPedidosService:
    """
    Pedidos guardados no armazenamento local:
    - ids acompanhados pelo painel (`guarafood-active-orders`)
    - histórico com os últimos pedidos finalizados
    """

    def __init__(self, armazenamento: ArmazenamentoLocal, limite: int = ORDER_HISTORY_LIMIT):
        self.armazenamento = armazenamento
        self.limite = limite

    # ---------------- IDS ACOMPANHADOS ----------------
    def ids_acompanhados(self) -> List[str]:
        return [str(i) for i in _lista(self.armazenamento.get_json(CHAVE_PEDIDOS_ATIVOS, []))]

    def acompanhar(self, pedido_id: str) -> None:
        def _add(atual: Any) -> List[str]:
            ids = [str(i) for i in _lista(atual)]
            if str(pedido_id) not in ids:
                ids.append(str(pedido_id))
            return ids

        self.armazenamento.atualizar_json(CHAVE_PEDIDOS_ATIVOS, [], _add)

    def deixar_de_acompanhar(self, pedido_ids: Iterable[str]) -> List[str]:
        remover = {str(i) for i in pedido_ids}
        return self.armazenamento.atualizar_json(
            CHAVE_PEDIDOS_ATIVOS,
            [],
            lambda atual: [str(i) for i in _lista(atual) if str(i) not in remover],
        )

    # ---------------- HISTÓRICO ----------------
    def historico(self) -> List[Dict[str, Any]]:
        return [p for p in _lista(self.armazenamento.get_json(CHAVE_HISTORICO_PEDIDOS, [])) if isinstance(p, dict)]

    def registrar(self, pedido: Dict[str, Any]) -> None:
        """Acrescenta o pedido (sem duplicar pelo id), mantendo só os mais recentes."""

        def _add(atual: Any) -> List[Dict[str, Any]]:
            pedidos = [p for p in _lista(atual) if isinstance(p, dict)]
            if any(str(p.get("id")) == str(pedido.get("id")) for p in pedidos):
                return pedidos
            pedidos.append(pedido)
            return pedidos[-self.limite:]

        self.armazenamento.atualizar_json(CHAVE_HISTORICO_PEDIDOS, [], _add)

from __future__ import annotations

import json
from typing import Any, Callable

from sqlalchemy.orm import Session, sessionmaker

from guarafood.api.armazenamento.repositories.repo_armazenamento import ArmazenamentoRepository
from guarafood.utils.logger import logger

# Chaves fixas do armazenamento local
CHAVE_CARRINHO = "guara-food-cart-v2"
CHAVE_PEDIDOS_ATIVOS = "guarafood-active-orders"
CHAVE_HISTORICO_PEDIDOS = "guarafood-order-history"
CHAVE_FAVORITOS = "guarafood-favorites"
PREFIXO_PERFIL_CLIENTE = "customerData-"


class ArmazenamentoLocal:
    """
    Armazenamento chave/valor durável para dados do cliente.

    Cada operação abre sua própria sessão, então um ler-modificar-gravar via
    `atualizar_json` é persistido como um único passo. Valores corrompidos ou
    ilegíveis são tratados como ausentes.
    """

    def __init__(self, session_factory: sessionmaker | Callable[[], Session]):
        self._session_factory = session_factory

    def get_json(self, chave: str, default: Any = None) -> Any:
        with self._session_factory() as db:
            entrada = ArmazenamentoRepository(db).get(chave)
            if entrada is None:
                return default
            bruto = entrada.valor
        try:
            return json.loads(bruto)
        except (TypeError, ValueError) as e:
            logger.warning(f"[Armazenamento] Valor ilegível em '{chave}', usando padrão: {e}")
            return default

    def set_json(self, chave: str, valor: Any) -> None:
        serializado = json.dumps(valor, ensure_ascii=False, default=str)
        with self._session_factory() as db:
            ArmazenamentoRepository(db).upsert(chave, serializado)

    def atualizar_json(self, chave: str, default: Any, fn: Callable[[Any], Any]) -> Any:
        """Lê, aplica `fn` e grava o resultado; retorna o novo valor."""
        novo = fn(self.get_json(chave, default))
        self.set_json(chave, novo)
        return novo

    def remover(self, chave: str) -> None:
        with self._session_factory() as db:
            ArmazenamentoRepository(db).delete(chave)

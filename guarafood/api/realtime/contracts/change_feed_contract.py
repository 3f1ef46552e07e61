from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional

# Recebe o registro atualizado (linha completa da tabela)
CallbackAlteracao = Callable[[Dict[str, Any]], Awaitable[None]]


class Assinatura:
    """Handle de uma inscrição no feed; precisa ser cancelado explicitamente."""

    def __init__(self, tabela: str, filtro_id: Optional[str], ao_cancelar: Callable[["Assinatura"], None]):
        self.tabela = tabela
        self.filtro_id = filtro_id
        self._ao_cancelar = ao_cancelar
        self._ativa = True

    @property
    def ativa(self) -> bool:
        return self._ativa

    def aceita(self, registro: Dict[str, Any]) -> bool:
        return self.filtro_id is None or str(registro.get("id")) == self.filtro_id

    def cancelar(self) -> None:
        if not self._ativa:
            return
        self._ativa = False
        self._ao_cancelar(self)

    def __repr__(self) -> str:
        return f"Assinatura(tabela={self.tabela!r}, filtro_id={self.filtro_id!r}, ativa={self._ativa})"


class IChangeFeed(ABC):
    @abstractmethod
    def assinar(
        self,
        tabela: str,
        callback: CallbackAlteracao,
        *,
        filtro_id: Optional[str] = None,
    ) -> Assinatura:
        """Inscreve `callback` nas atualizações da tabela (opcionalmente de um único id)."""
        raise NotImplementedError

    async def fechar(self) -> None:
        return None

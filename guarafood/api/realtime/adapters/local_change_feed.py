from __future__ import annotations

from typing import Any, Dict, List, Tuple

from guarafood.api.realtime.contracts.change_feed_contract import (
    Assinatura,
    CallbackAlteracao,
    IChangeFeed,
)
from guarafood.utils.logger import logger


class LocalChangeFeed(IChangeFeed):
    """Feed em processo: quem altera o registro chama `publicar`."""

    def __init__(self) -> None:
        self._assinaturas: List[Tuple[Assinatura, CallbackAlteracao]] = []

    def assinar(self, tabela, callback, *, filtro_id=None) -> Assinatura:
        assinatura = Assinatura(tabela, str(filtro_id) if filtro_id is not None else None, self._remover)
        self._assinaturas.append((assinatura, callback))
        logger.info(f"[Realtime] Inscrito em {tabela} (id={filtro_id or '*'})")
        return assinatura

    def _remover(self, assinatura: Assinatura) -> None:
        self._assinaturas = [(a, cb) for a, cb in self._assinaturas if a is not assinatura]
        logger.info(f"[Realtime] Inscrição cancelada em {assinatura.tabela} (id={assinatura.filtro_id or '*'})")

    @property
    def total_assinaturas(self) -> int:
        return len(self._assinaturas)

    async def publicar(self, tabela: str, registro: Dict[str, Any]) -> None:
        alvos = [
            (a, cb) for a, cb in list(self._assinaturas)
            if a.tabela == tabela and a.aceita(registro)
        ]
        for assinatura, callback in alvos:
            # Uma entrega anterior pode ter cancelado esta inscrição
            if not assinatura.ativa:
                continue
            try:
                await callback(registro)
            except Exception as e:
                logger.error(f"[Realtime] Erro no callback de {tabela}: {e}")

    async def fechar(self) -> None:
        for assinatura, _ in list(self._assinaturas):
            assinatura.cancelar()

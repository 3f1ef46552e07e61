from __future__ import annotations

from collections import deque
from typing import Callable, Deque, List, Optional

from guarafood.api.notifications.schemas.schema_notificacao import Toast, TipoToastEnum
from guarafood.utils.database_utils import now_trimmed
from guarafood.utils.logger import logger


class Notificador:
    """
    Fila de toasts e aviso sonoro da loja.

    A interface consome os toasts pendentes; o som é contado e, se houver,
    repassado ao `ao_tocar` (ex.: tocador de áudio da interface).
    """

    def __init__(self, *, ao_tocar: Optional[Callable[[], None]] = None, limite: int = 50):
        self._toasts: Deque[Toast] = deque(maxlen=limite)
        self._ao_tocar = ao_tocar
        self.sons_tocados = 0

    def toast(self, mensagem: str, tipo: TipoToastEnum = TipoToastEnum.INFO, duracao: int = 3000) -> Toast:
        toast = Toast(message=mensagem, type=tipo, duration=duracao, created_at=now_trimmed())
        self._toasts.append(toast)
        logger.info(f"[Toast] ({tipo.value}) {mensagem}")
        return toast

    def sucesso(self, mensagem: str) -> Toast:
        return self.toast(mensagem, TipoToastEnum.SUCESSO)

    def erro(self, mensagem: str) -> Toast:
        return self.toast(mensagem, TipoToastEnum.ERRO)

    def info(self, mensagem: str, duracao: int = 3000) -> Toast:
        return self.toast(mensagem, TipoToastEnum.INFO, duracao)

    def tocar_som(self) -> None:
        self.sons_tocados += 1
        if self._ao_tocar is not None:
            self._ao_tocar()

    @property
    def pendentes(self) -> List[Toast]:
        return list(self._toasts)

    def consumir(self) -> List[Toast]:
        toasts = list(self._toasts)
        self._toasts.clear()
        return toasts

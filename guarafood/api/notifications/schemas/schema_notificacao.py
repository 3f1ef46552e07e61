from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class TipoToastEnum(str, Enum):
    SUCESSO = "success"
    ERRO = "error"
    INFO = "info"


class Toast(BaseModel):
    message: str
    type: TipoToastEnum = TipoToastEnum.INFO
    duration: int = 3000
    created_at: datetime


class NotificacoesOut(BaseModel):
    toasts: List[Toast] = Field(default_factory=list)
    sons_tocados: int = 0

from datetime import datetime
from zoneinfo import ZoneInfo

from guarafood.config.settings import TIMEZONE


def now_trimmed():
    """Retorna datetime atual no fuso da loja, sem microsegundos"""
    return datetime.now(ZoneInfo(TIMEZONE)).replace(microsecond=0)

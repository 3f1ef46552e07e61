from __future__ import annotations

from datetime import datetime, time
from typing import Any, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from guarafood.config.settings import TIMEZONE
from guarafood.utils.logger import logger


def _parse_hhmm(value: Any) -> Optional[time]:
    """
    Aceita 'HH:MM' (00-23 / 00-59). Retorna None se inválido.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if len(value) != 5 or value[2] != ":":
        return None
    hh, mm = value.split(":")
    if not (hh.isdigit() and mm.isdigit()):
        return None
    h, m = int(hh), int(mm)
    if h > 23 or m > 59:
        return None
    return time(hour=h, minute=m)


def _exigir_hhmm(value: Any) -> time:
    t = _parse_hhmm(value)
    if t is None:
        raise ValueError(f"Horário inválido: {value!r}")
    return t


def _to_local(now: datetime, tz_name: str | None) -> datetime:
    """
    Converte datetime para o fuso da loja.
    Datetime naive é considerado já no horário local.
    """
    if not tz_name or now.tzinfo is None:
        return now
    try:
        return now.astimezone(ZoneInfo(tz_name))
    except ZoneInfoNotFoundError:
        return now


def _weekday_sun0(local_dt: datetime) -> int:
    """
    Converte datetime.weekday() (0=segunda..6=domingo) para 0=domingo..6=sábado.
    """
    return (local_dt.weekday() + 1) % 7


def _interval_contains(start: time, end: time, t: time) -> bool:
    """
    - Intervalo normal: start <= t < end
    - Overnight (end < start): t >= start OR t < end
    """
    t_hm = (t.hour, t.minute)
    start_hm = (start.hour, start.minute)
    end_hm = (end.hour, end.minute)
    if end_hm < start_hm:
        return t_hm >= start_hm or t_hm < end_hm
    return start_hm <= t_hm < end_hm


def _turno_contem(opens: Any, closes: Any, t: time) -> bool:
    if not opens or not closes:
        return False
    return _interval_contains(_exigir_hhmm(opens), _exigir_hhmm(closes), t)


def _campo(obj: Any, nome: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(nome, default)
    return getattr(obj, nome, default)


def _transbordo_dia_anterior(dia: Any, t: time) -> bool:
    """Turno overnight de ontem que ainda não fechou hoje de madrugada."""
    if not dia or not _campo(dia, "is_open", True):
        return False
    for abre_key, fecha_key in (("opens", "closes"), ("opens2", "closes2")):
        abre = _parse_hhmm(_campo(dia, abre_key))
        fecha = _parse_hhmm(_campo(dia, fecha_key))
        if abre and fecha and fecha < abre and (t.hour, t.minute) < (fecha.hour, fecha.minute):
            return True
    return False


def esta_aberto(
    *,
    operating_hours: Optional[Sequence[Any]] = None,
    opening_hours: Optional[str] = None,
    closing_hours: Optional[str] = None,
    now: datetime | None = None,
    timezone: str | None = TIMEZONE,
    nome: str = "",
) -> bool:
    """
    Avalia se a loja está aberta no horário informado.

    `operating_hours` é a grade semanal com 7 entradas indexadas por dia
    (0=domingo), cada uma com até dois turnos (`opens`/`closes` e
    `opens2`/`closes2`) e a flag `is_open`. Sem a grade, usa o par simples
    `opening_hours`/`closing_hours`.

    Sem nenhum dado de horário, ou com horário ilegível, considera a loja aberta.
    """
    local_dt = _to_local(now or datetime.now(), timezone)
    dow = _weekday_sun0(local_dt)
    t = local_dt.time()

    if operating_hours and len(operating_hours) == 7:
        # 1) Turnos overnight de ontem avançando sobre hoje
        if _transbordo_dia_anterior(operating_hours[(dow - 1) % 7], t):
            return True

        # 2) Turnos de hoje
        hoje = operating_hours[dow]
        if not hoje or not _campo(hoje, "is_open", True):
            return False
        try:
            return _turno_contem(_campo(hoje, "opens"), _campo(hoje, "closes"), t) or _turno_contem(
                _campo(hoje, "opens2"), _campo(hoje, "closes2"), t
            )
        except ValueError as e:
            logger.error(f"[Horarios] Erro ao interpretar grade de horários de {nome}: {e}")
            return True

    if not opening_hours or not closing_hours:
        return True
    try:
        return _turno_contem(opening_hours, closing_hours, t)
    except ValueError as e:
        logger.error(f"[Horarios] Erro ao interpretar horário simples de {nome}: {e}")
        return True


def restaurante_esta_aberto(restaurante: Any, *, now: datetime | None = None, timezone: str | None = TIMEZONE) -> bool:
    return esta_aberto(
        operating_hours=_campo(restaurante, "operating_hours"),
        opening_hours=_campo(restaurante, "opening_hours"),
        closing_hours=_campo(restaurante, "closing_hours"),
        now=now,
        timezone=timezone,
        nome=_campo(restaurante, "name", "") or "",
    )

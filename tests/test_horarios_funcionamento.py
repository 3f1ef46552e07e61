from datetime import datetime, timezone

from guarafood.api.cardapio.schemas.schema_cardapio import HorarioFuncionamento, Restaurante
from guarafood.utils.horarios_funcionamento import (
    _weekday_sun0,
    esta_aberto,
    restaurante_esta_aberto,
)

# 2026-10-14 é quarta-feira (3), 2026-10-15 quinta (4), 2026-10-18 domingo (0)
QUARTA = 14
QUINTA = 15


def _semana(**turno):
    return [HorarioFuncionamento(day_of_week=d, **turno) for d in range(7)]


def _em(dia, hora, minuto=0):
    return datetime(2026, 10, dia, hora, minuto)


def test_weekday_comeca_no_domingo():
    assert _weekday_sun0(datetime(2026, 10, 18)) == 0
    assert _weekday_sun0(_em(QUARTA, 12)) == 3


def test_turno_overnight_antes_e_depois_da_meia_noite():
    semana = _semana(opens="22:00", closes="02:00")
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 23, 30)) is True
    assert esta_aberto(operating_hours=semana, now=_em(QUINTA, 1, 0)) is True
    assert esta_aberto(operating_hours=semana, now=_em(QUINTA, 3, 0)) is False


def test_madrugada_usa_turno_do_dia_anterior_mesmo_com_hoje_fechado():
    semana = _semana(is_open=False)
    semana[3] = HorarioFuncionamento(day_of_week=3, opens="22:00", closes="02:00")
    assert esta_aberto(operating_hours=semana, now=_em(QUINTA, 1, 0)) is True
    assert esta_aberto(operating_hours=semana, now=_em(QUINTA, 23, 0)) is False


def test_dois_turnos_no_mesmo_dia():
    semana = _semana(opens="11:00", closes="14:00", opens2="18:00", closes2="23:00")
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 12)) is True
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 15)) is False
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 19)) is True
    # fechamento é exclusivo
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 23)) is False


def test_grade_em_dicionarios():
    semana = [{"day_of_week": d, "opens": "08:00", "closes": "18:00", "is_open": True} for d in range(7)]
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 9)) is True
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 19)) is False


def test_horario_ilegivel_considera_aberto():
    semana = _semana(opens="25:99", closes="02:00")
    assert esta_aberto(operating_hours=semana, now=_em(QUARTA, 12)) is True
    assert esta_aberto(opening_hours="8h", closing_hours="18h", now=_em(QUARTA, 3)) is True


def test_par_simples_quando_nao_ha_grade():
    assert esta_aberto(opening_hours="08:00", closing_hours="18:00", now=_em(QUARTA, 7, 59)) is False
    assert esta_aberto(opening_hours="08:00", closing_hours="18:00", now=_em(QUARTA, 8, 0)) is True
    assert esta_aberto(opening_hours="08:00", closing_hours="18:00", now=_em(QUARTA, 18, 0)) is False


def test_grade_incompleta_cai_no_par_simples():
    parcial = _semana(is_open=False)[:3]
    assert esta_aberto(
        operating_hours=parcial, opening_hours="08:00", closing_hours="18:00", now=_em(QUARTA, 10)
    ) is True


def test_sem_dados_de_horario_considera_aberto():
    assert esta_aberto(now=_em(QUARTA, 4)) is True


def test_converte_para_o_fuso_da_loja():
    # 02:30 UTC de quinta = 23:30 de quarta em São Paulo
    agora = datetime(2026, 10, 15, 2, 30, tzinfo=timezone.utc)
    assert esta_aberto(
        opening_hours="22:00", closing_hours="23:59", now=agora, timezone="America/Sao_Paulo"
    ) is True


def test_restaurante_esta_aberto_usa_campos_do_restaurante():
    fechado = Restaurante(id=1, name="X", operating_hours=_semana(is_open=False))
    sem_horario = Restaurante(id=2, name="Y")
    assert restaurante_esta_aberto(fechado, now=_em(QUARTA, 12)) is False
    assert restaurante_esta_aberto(sem_horario, now=_em(QUARTA, 12)) is True

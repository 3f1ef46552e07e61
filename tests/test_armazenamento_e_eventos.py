import pytest

from guarafood.api.armazenamento.services.service_armazenamento import (
    CHAVE_HISTORICO_PEDIDOS,
    CHAVE_PEDIDOS_ATIVOS,
)
from guarafood.api.notifications.core.event_bus import EventBus, EventType
from guarafood.api.notifications.core.notificador import Notificador
from guarafood.api.notifications.schemas.schema_notificacao import TipoToastEnum
from guarafood.api.pedidos.services.service_historico import HistoricoPedidosService
from guarafood.api.realtime.adapters import LocalChangeFeed


# ---------------------------------------------------------------------------
# Armazenamento local
# ---------------------------------------------------------------------------
def test_get_set_e_remover(armazenamento):
    assert armazenamento.get_json("chave", default=[]) == []
    armazenamento.set_json("chave", {"nome": "Guará", "itens": [1, 2]})
    assert armazenamento.get_json("chave") == {"nome": "Guará", "itens": [1, 2]}

    armazenamento.set_json("chave", [3])
    assert armazenamento.get_json("chave") == [3]

    armazenamento.remover("chave")
    armazenamento.remover("chave")
    assert armazenamento.get_json("chave") is None


def test_atualizar_json(armazenamento):
    novo = armazenamento.atualizar_json("contador", 0, lambda atual: atual + 1)
    assert novo == 1
    assert armazenamento.atualizar_json("contador", 0, lambda atual: atual + 1) == 2


def test_historico_de_pedidos_sem_duplicar(armazenamento):
    historico = HistoricoPedidosService(armazenamento, limite=2)
    historico.acompanhar("a")
    historico.acompanhar("a")
    historico.acompanhar("b")
    assert historico.ids_acompanhados() == ["a", "b"]

    historico.registrar({"id": "a"})
    historico.registrar({"id": "a"})
    historico.registrar({"id": "b"})
    historico.registrar({"id": "c"})
    assert [p["id"] for p in historico.historico()] == ["b", "c"]

    assert historico.deixar_de_acompanhar(["a", "x"]) == ["b"]


def test_historico_corrompido_vira_vazio(armazenamento):
    armazenamento.set_json(CHAVE_PEDIDOS_ATIVOS, "não é lista")
    armazenamento.set_json(CHAVE_HISTORICO_PEDIDOS, [{"id": "a"}, 42])
    historico = HistoricoPedidosService(armazenamento)
    assert historico.ids_acompanhados() == []
    assert historico.historico() == [{"id": "a"}]


# ---------------------------------------------------------------------------
# Notificações
# ---------------------------------------------------------------------------
def test_notificador_fila_e_som():
    tocados = []
    notificador = Notificador(ao_tocar=lambda: tocados.append(1))
    notificador.sucesso("Cupom aplicado!")
    notificador.erro("Falhou")
    notificador.tocar_som()

    assert [t.type for t in notificador.pendentes] == [TipoToastEnum.SUCESSO, TipoToastEnum.ERRO]
    assert notificador.sons_tocados == 1
    assert tocados == [1]

    consumidos = notificador.consumir()
    assert len(consumidos) == 2
    assert notificador.pendentes == []


def test_notificador_respeita_limite():
    notificador = Notificador(limite=2)
    for i in range(3):
        notificador.info(f"aviso {i}")
    assert [t.message for t in notificador.pendentes] == ["aviso 1", "aviso 2"]


@pytest.mark.asyncio
async def test_event_bus_entrega_e_isola_erros():
    bus = EventBus()
    recebidos = []

    async def ok(event):
        recebidos.append(event.data["order_id"])

    async def quebra(event):
        raise RuntimeError("falhou")

    handler = bus.on(EventType.PEDIDOS_ATUALIZADOS, ok)
    bus.on(EventType.PEDIDOS_ATUALIZADOS, quebra)

    evento = await bus.publish(EventType.PEDIDOS_ATUALIZADOS, {"order_id": "a"})
    assert evento.event_type == EventType.PEDIDOS_ATUALIZADOS
    assert recebidos == ["a"]

    bus.unsubscribe(EventType.PEDIDOS_ATUALIZADOS, handler)
    await bus.publish(EventType.PEDIDOS_ATUALIZADOS, {"order_id": "b"})
    assert recebidos == ["a"]

    # tipo sem handler não falha
    await bus.publish(EventType.PIX_GERADO)


# ---------------------------------------------------------------------------
# Feed de alterações
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_feed_local_filtra_por_tabela_e_id():
    feed = LocalChangeFeed()
    todos, so_a = [], []

    async def _todos(registro):
        todos.append(registro["id"])

    async def _so_a(registro):
        so_a.append(registro["id"])

    feed.assinar("orders", _todos)
    assinatura = feed.assinar("orders", _so_a, filtro_id="a")

    await feed.publicar("orders", {"id": "a"})
    await feed.publicar("orders", {"id": "b"})
    await feed.publicar("coupons", {"id": "a"})
    assert todos == ["a", "b"]
    assert so_a == ["a"]

    assinatura.cancelar()
    assert feed.total_assinaturas == 1
    await feed.fechar()
    assert feed.total_assinaturas == 0

import asyncio

import pytest

from guarafood.api.notifications.core.event_bus import EventType
from guarafood.api.pedidos.schemas.schema_pedido import PedidoStatusEnum
from guarafood.integrations.supabase.client import SupabaseError


@pytest.fixture
def rastreador(contexto):
    return contexto.rastreador


def _acompanhar(contexto, pedidos_fake, pedido_id, status):
    pedidos_fake.definir(pedido_id, status)
    contexto.historico.acompanhar(pedido_id)


@pytest.mark.asyncio
async def test_primeira_carga_nao_toca_som(contexto, pedidos_fake, rastreador):
    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.NOVO)
    _acompanhar(contexto, pedidos_fake, "b", PedidoStatusEnum.PREPARANDO)

    pedidos = await rastreador.atualizar()

    assert {p.id for p in pedidos} == {"a", "b"}
    assert contexto.notificador.sons_tocados == 0
    assert contexto.notificador.pendentes == []


@pytest.mark.asyncio
async def test_mudanca_de_status_toca_som_e_avisa(contexto, pedidos_fake, rastreador):
    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.NOVO)
    await rastreador.atualizar()

    pedidos_fake.definir("a", PedidoStatusEnum.PREPARANDO)
    await rastreador.atualizar()

    assert contexto.notificador.sons_tocados == 1
    assert contexto.notificador.pendentes[-1].message == "Pizzaria Guará: Preparando"

    # sem mudança, sem som
    await rastreador.atualizar()
    assert contexto.notificador.sons_tocados == 1


@pytest.mark.asyncio
async def test_pedido_novo_acompanhado_toca_som(contexto, pedidos_fake, rastreador):
    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.NOVO)
    await rastreador.atualizar()

    _acompanhar(contexto, pedidos_fake, "b", PedidoStatusEnum.NOVO)
    await rastreador.atualizar()

    assert contexto.notificador.sons_tocados == 1
    assert contexto.notificador.pendentes == []


@pytest.mark.asyncio
async def test_pedido_entregue_sai_do_acompanhamento(contexto, pedidos_fake, rastreador):
    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.A_CAMINHO)
    _acompanhar(contexto, pedidos_fake, "b", PedidoStatusEnum.NOVO)
    await rastreador.atualizar()

    pedidos_fake.definir("a", PedidoStatusEnum.ENTREGUE)
    pedidos = await rastreador.atualizar()

    assert [p.id for p in pedidos] == ["b"]
    assert contexto.historico.ids_acompanhados() == ["b"]
    assert contexto.notificador.pendentes[-1].message == "Pizzaria Guará: Entregue"
    assert contexto.notificador.sons_tocados == 1


@pytest.mark.asyncio
async def test_intervalo_de_polling(contexto, pedidos_fake, rastreador):
    assert rastreador.intervalo_polling == 120

    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.AGUARDANDO_PAGAMENTO)
    await rastreador.atualizar()
    assert rastreador.intervalo_polling == 60
    assert rastreador.painel().intervalo_polling == 60


@pytest.mark.asyncio
async def test_painel_e_remocao(contexto, pedidos_fake, rastreador):
    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.PREPARANDO)
    await rastreador.atualizar()

    assert rastreador.alternar_expandido() is True
    painel = rastreador.painel()
    assert painel.etapa_principal == 2
    assert painel.progresso_principal == 50.0

    rastreador.remover("a")
    assert rastreador.pedidos == []
    assert rastreador.expandido is False
    assert contexto.historico.ids_acompanhados() == []
    assert rastreador.alternar_expandido() is False


@pytest.mark.asyncio
async def test_falha_na_busca_mantem_lista_atual(contexto, pedidos_fake, rastreador):
    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.NOVO)
    await rastreador.atualizar()

    pedidos_fake.falhar_listagem = SupabaseError("timeout")
    pedidos = await rastreador.atualizar()

    assert [p.id for p in pedidos] == ["a"]
    assert contexto.historico.ids_acompanhados() == ["a"]


@pytest.mark.asyncio
async def test_sem_ids_acompanhados_nao_consulta_backend(contexto, pedidos_fake, rastreador):
    pedidos_fake.falhar_listagem = SupabaseError("não deveria consultar")
    assert await rastreador.atualizar() == []


@pytest.mark.asyncio
async def test_gatilhos_de_evento_e_feed(contexto, pedidos_fake, feed, rastreador):
    await rastreador.iniciar()
    try:
        assert feed.total_assinaturas == 1

        _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.NOVO)
        await contexto.eventos.publish(EventType.PEDIDOS_ATUALIZADOS, {"order_id": "a"})
        assert [p.id for p in rastreador.pedidos] == ["a"]
        assert contexto.notificador.sons_tocados == 1

        pedidos_fake.definir("a", PedidoStatusEnum.PREPARANDO)
        # alteração de pedido não acompanhado é ignorada
        await feed.publicar("orders", {"id": "outro", "status": "Preparando"})
        assert rastreador.pedidos[0].status == PedidoStatusEnum.NOVO

        await feed.publicar("orders", {"id": "a", "status": "Preparando"})
        assert rastreador.pedidos[0].status == PedidoStatusEnum.PREPARANDO
    finally:
        await rastreador.parar()

    assert feed.total_assinaturas == 0
    assert rastreador._tarefa_polling is None


@pytest.mark.asyncio
async def test_polling_atualiza_periodicamente(contexto, pedidos_fake, rastreador):
    rastreador.intervalo_ocioso = 0.01
    rastreador.intervalo_pendente = 0.01
    _acompanhar(contexto, pedidos_fake, "a", PedidoStatusEnum.NOVO)

    await rastreador.iniciar()
    try:
        pedidos_fake.definir("a", PedidoStatusEnum.A_CAMINHO)
        for _ in range(50):
            if rastreador.pedidos[0].status == PedidoStatusEnum.A_CAMINHO:
                break
            await asyncio.sleep(0.01)
        assert rastreador.pedidos[0].status == PedidoStatusEnum.A_CAMINHO
    finally:
        await rastreador.parar()

from decimal import Decimal
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from guarafood.config.settings import LOG_DIR
from guarafood.core.contexto import get_contexto
from guarafood.main import app
from guarafood.utils.logger import PrometheusLogHandler, logger

RESTAURANTES = "/api/cardapio/public/restaurantes"
CARRINHO = "/api/carrinho/public"


@pytest.fixture
def client(contexto):
    app.dependency_overrides[get_contexto] = lambda: contexto
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_e_metricas(client):
    assert client.get("/health").json() == {"status": "healthy"}
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "guarafood_http_requests_total" in resp.text


def test_logger_grava_no_diretorio_configurado_e_conta_registros():
    arquivos = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(arquivos) == 1
    assert Path(arquivos[0].baseFilename).name == "app.log"
    assert Path(arquivos[0].baseFilename).parent.samefile(LOG_DIR)
    assert any(isinstance(h, PrometheusLogHandler) for h in logger.handlers)

    def contagem():
        return REGISTRY.get_sample_value("guarafood_log_messages_total", {"level": "WARNING"}) or 0

    antes = contagem()
    logger.warning("[Teste] registro contabilizado")
    assert contagem() == antes + 1


def test_lista_e_filtra_restaurantes(client):
    resp = client.get(RESTAURANTES)
    assert resp.status_code == 200
    assert len(resp.json()) == 4

    resp = client.get(RESTAURANTES, params={"categorias": ["Lanches"], "busca": "pix"})
    assert [r["name"] for r in resp.json()] == ["Lanchonete Só Pix"]

    assert client.get(f"{RESTAURANTES}/categorias").json()[:2] == ["Todos", "Favoritos"]


def test_favoritos(client):
    resp = client.post(f"{RESTAURANTES}/2/favorito")
    assert resp.json() == {"restaurante_id": 2, "favorito": True}
    assert client.get(f"{RESTAURANTES}/favoritos").json() == [2]

    resp = client.get(RESTAURANTES, params={"categorias": ["Favoritos"]})
    assert [r["name"] for r in resp.json()] == ["Açaí da Serra"]


def test_restaurante_inexistente(client):
    resp = client.get(f"{RESTAURANTES}/99")
    assert resp.status_code == 404
    assert resp.json()["status_code"] == 404

    resp = client.get("/api/pedidos/public/checkout/99")
    assert resp.status_code == 404


def test_cardapio_e_vitrine(client):
    cardapio = client.get(f"{RESTAURANTES}/1/cardapio").json()
    assert [c["name"] for c in cardapio] == ["Pizzas", "Bebidas"]

    vitrine = client.get(f"{RESTAURANTES}/1/vitrine").json()
    assert [i["name"] for i in vitrine["itens_em_promocao"]] == ["Refrigerante"]


def test_carrinho(client):
    resp = client.post(f"{CARRINHO}/itens", json={"restaurante_id": 1, "produto_id": 110, "observacao": "Gelado"})
    assert resp.status_code == 201
    linha = resp.json()
    assert linha["id"] == "item-110"
    assert Decimal(linha["price"]) == Decimal("6.00")
    assert linha["notes"] == "Gelado"

    resp = client.post(
        f"{CARRINHO}/itens",
        json={"restaurante_id": 1, "produto_id": 100, "tamanho": "Grande", "segunda_metade_id": 101},
    )
    assert resp.json()["id"] == "pizza-100-101_size-Grande_addons-"

    resumo = client.patch(f"{CARRINHO}/itens/item-110/quantidade", json={"quantidade": 2}).json()
    assert resumo["total_itens"] == 3
    assert Decimal(resumo["total_preco"]) == Decimal("70.00")

    resumo = client.delete(f"{CARRINHO}/itens/item-110").json()
    assert resumo["total_itens"] == 1

    assert client.delete(CARRINHO).json()["total_itens"] == 0


def test_observacao_nao_sobrescreve_linha_mesclada(client):
    client.post(f"{CARRINHO}/itens", json={"restaurante_id": 1, "produto_id": 110, "observacao": "Gelado"})

    resp = client.post(f"{CARRINHO}/itens", json={"restaurante_id": 1, "produto_id": 110, "observacao": "Sem gelo"})
    linha = resp.json()
    assert linha["quantity"] == 2
    assert linha["notes"] == "Gelado"

    itens = client.get(CARRINHO).json()["itens"]
    assert [(i["id"], i["notes"]) for i in itens] == [("item-110", "Gelado")]


def test_carrinho_erros(client):
    resp = client.post(f"{CARRINHO}/itens", json={"restaurante_id": 1, "produto_id": 999})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Item não encontrado"

    resp = client.post(f"{CARRINHO}/itens", json={"produto_id": 110})
    assert resp.status_code == 422
    body = resp.json()
    assert body["message"] == "Erro de validação nos dados fornecidos"
    assert body["detail"][0]["field"] == "body.restaurante_id"


def test_fluxo_de_pedido_em_dinheiro(client, pedidos_fake):
    checkout = "/api/pedidos/public/checkout/1"
    client.post(f"{CARRINHO}/itens", json={"restaurante_id": 1, "produto_id": 110})

    assert client.post(f"{checkout}/abrir").json()["etapa"] == "SUMMARY"
    assert client.post(f"{checkout}/avancar").json()["etapa"] == "DETAILS"

    estado = client.patch(
        f"{checkout}/dados",
        json={
            "nome": "Maria",
            "telefone": "(35) 98888-1111",
            "endereco": {"street": "Rua das Flores", "number": "12", "neighborhood": "Centro"},
            "forma_pagamento": "Dinheiro",
            "troco_para": "20",
        },
    ).json()
    assert Decimal(estado["totais"]["total"]) == Decimal("11.00")

    estado = client.post(f"{checkout}/enviar").json()
    assert estado["etapa"] == "SUCCESS"
    assert estado["pedido_id"] == "pedido-1"
    assert estado["link_whatsapp"].startswith("https://wa.me/5535999990000?text=")
    assert pedidos_fake.criados[0].payment_method == "Dinheiro (Troco para R$ 20.00)"
    assert client.get(CARRINHO).json()["total_itens"] == 0

    painel = client.post("/api/pedidos/public/acompanhamento/atualizar").json()
    assert [p["id"] for p in painel["pedidos"]] == ["pedido-1"]
    assert painel["etapa_principal"] == 1

    historico = client.get("/api/pedidos/public/acompanhamento/historico").json()
    assert historico[0]["id"] == "pedido-1"

    painel = client.delete("/api/pedidos/public/acompanhamento/pedido-1").json()
    assert painel["pedidos"] == []

    notificacoes = client.get("/api/notificacoes/public").json()
    assert "Pedido enviado com sucesso!" in [t["message"] for t in notificacoes["toasts"]]
    assert client.get("/api/notificacoes/public").json()["toasts"] == []


def test_checkout_com_erro_de_formulario(client):
    checkout = "/api/pedidos/public/checkout/1"
    client.post(f"{CARRINHO}/itens", json={"restaurante_id": 1, "produto_id": 110})
    client.post(f"{checkout}/abrir")
    client.post(f"{checkout}/avancar")

    estado = client.post(f"{checkout}/enviar").json()
    assert estado["etapa"] == "DETAILS"
    assert estado["erro_formulario"] == "Preencha todos os campos obrigatórios."

    estado = client.post(f"{checkout}/cupom", json={"codigo": "NADA"}).json()
    assert estado["erro_formulario"] == "Cupom inválido ou expirado."

    assert client.post(f"{checkout}/voltar").json()["etapa"] == "SUMMARY"

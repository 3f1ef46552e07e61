from decimal import Decimal

from guarafood.api.armazenamento.repositories.repo_armazenamento import ArmazenamentoRepository
from guarafood.api.armazenamento.services.service_armazenamento import CHAVE_CARRINHO
from guarafood.api.cardapio.schemas.schema_cardapio import (
    Adicional,
    Combo,
    ItemCardapio,
    Promocao,
    TipoAlvoPromocaoEnum,
    TipoDescontoEnum,
)
from guarafood.api.cardapio.services.service_cardapio import aplicar_promocao
from guarafood.api.cardapio.services.service_configurador import configurar_item
from guarafood.api.carrinho.services import CarrinhoService


def _refri():
    return ItemCardapio(id=110, name="Refrigerante", price=Decimal("7.50"))


def test_mesmo_item_incrementa_quantidade(armazenamento):
    carrinho = CarrinhoService(armazenamento)
    carrinho.adicionar(_refri())
    linha = carrinho.adicionar(_refri())

    assert linha.id == "item-110"
    assert linha.quantity == 2
    assert len(carrinho.itens) == 1
    assert carrinho.total_itens == 2
    assert carrinho.total_preco == Decimal("15.00")


def test_item_e_combo_com_mesmo_id_sao_linhas_diferentes(armazenamento):
    carrinho = CarrinhoService(armazenamento)
    carrinho.adicionar(_refri())
    carrinho.adicionar(Combo(id=110, name="Combo", price=Decimal("30.00")))
    assert [i.id for i in carrinho.itens] == ["item-110", "combo-110"]
    assert carrinho.total_preco == Decimal("37.50")


def test_quantidade_zero_remove_linha(armazenamento):
    carrinho = CarrinhoService(armazenamento)
    carrinho.adicionar(_refri())
    carrinho.definir_quantidade("item-110", 3)
    assert carrinho.total_itens == 3

    carrinho.definir_quantidade("item-110", 0)
    assert carrinho.vazio
    assert carrinho.total_preco == Decimal("0.00")


def test_observacao_e_remocao(armazenamento):
    carrinho = CarrinhoService(armazenamento)
    carrinho.adicionar(_refri())
    carrinho.definir_observacao("item-110", "Bem gelado")
    assert carrinho.itens[0].notes == "Bem gelado"

    carrinho.remover("item-110")
    carrinho.remover("nao-existe")
    assert carrinho.vazio


def test_carrinho_persiste_entre_instancias(armazenamento):
    CarrinhoService(armazenamento).adicionar(_refri())
    outro = CarrinhoService(armazenamento)
    assert outro.total_itens == 1
    assert outro.itens[0].price == Decimal("7.50")

    outro.limpar()
    assert CarrinhoService(armazenamento).vazio


def test_item_em_promocao_guarda_preco_original(armazenamento):
    promo = Promocao(
        id=1, name="Refri com desconto", discount_type=TipoDescontoEnum.PERCENTUAL,
        discount_value=Decimal("20"), target_type=TipoAlvoPromocaoEnum.ITEM, target_ids=[110],
    )
    carrinho = CarrinhoService(armazenamento)
    linha = carrinho.adicionar(aplicar_promocao(_refri(), [promo], TipoAlvoPromocaoEnum.ITEM))

    assert linha.price == Decimal("6.00")
    assert linha.original_price == Decimal("7.50")
    assert linha.promotion_name == "Refri com desconto"


def test_carrinho_salvo_invalido_vira_vazio(armazenamento):
    armazenamento.set_json(CHAVE_CARRINHO, [{"foo": "bar"}])
    assert CarrinhoService(armazenamento).vazio


def test_carrinho_salvo_ilegivel_vira_vazio(armazenamento):
    with armazenamento._session_factory() as db:
        ArmazenamentoRepository(db).upsert(CHAVE_CARRINHO, "{isto não é json")
    assert CarrinhoService(armazenamento).vazio


def test_quantidade_negativa_remove_linha(armazenamento):
    carrinho = CarrinhoService(armazenamento)
    carrinho.adicionar(_refri())
    carrinho.adicionar(Combo(id=200, name="Combo", price=Decimal("30.00")))

    carrinho.definir_quantidade("item-110", -1)

    assert [i.id for i in carrinho.itens] == ["combo-200"]
    assert CarrinhoService(armazenamento).total_itens == 1


def test_item_simples_e_configurado_sao_linhas_diferentes(armazenamento):
    batata = ItemCardapio(id=5, name="Batata", price=Decimal("12.00"), available_addon_ids=[1])
    cheddar = Adicional(id=1, name="Cheddar", price=Decimal("3.00"))
    carrinho = CarrinhoService(armazenamento)

    carrinho.adicionar(batata)
    carrinho.adicionar(configurar_item(batata, [cheddar], adicional_ids=[1]))

    assert [(i.id, i.quantity) for i in carrinho.itens] == [("item-5", 1), ("item-5_size-Único_addons-1", 1)]
    assert carrinho.total_preco == Decimal("27.00")


def test_acai_com_adicionais_diferentes_nao_se_mistura(armazenamento, catalogo):
    acai = next(i for i in catalogo.itens if i.id == 300)
    carrinho = CarrinhoService(armazenamento)

    carrinho.adicionar(configurar_item(acai, catalogo.adicionais, tamanho="300ml", adicional_ids=[901]))
    carrinho.adicionar(configurar_item(acai, catalogo.adicionais, tamanho="300ml", adicional_ids=[902]))
    repetido = carrinho.adicionar(configurar_item(acai, catalogo.adicionais, tamanho="300ml", adicional_ids=[901]))

    assert repetido.quantity == 2
    assert [(i.id, i.quantity) for i in carrinho.itens] == [
        ("acai-300_size-300ml_addons-901", 2),
        ("acai-300_size-300ml_addons-902", 1),
    ]

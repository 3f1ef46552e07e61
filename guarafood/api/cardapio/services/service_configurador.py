"""
Configuradores de item: transformam um item do cardápio mais as escolhas do
cliente (tamanho, adicionais, segundo sabor) em uma linha de carrinho com chave
própria. A estratégia é escolhida pelas flags do item.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, List, Optional

from fastapi import HTTPException, status

from guarafood.api.cardapio.schemas.schema_cardapio import Adicional, ItemCardapio, OpcaoTamanho
from guarafood.api.carrinho.schemas.schema_carrinho import ItemCarrinho, MetadePizza
from guarafood.api.pedidos.services.service_pedido_helpers import _dec

TAMANHO_UNICO = "Único"


def _tamanho_escolhido(item: ItemCardapio, tamanho: Optional[str]) -> OpcaoTamanho:
    """Sem tamanho informado usa o primeiro da lista; item sem tamanhos vira `Único`."""
    if not item.sizes:
        return OpcaoTamanho(name=TAMANHO_UNICO, price=item.price, free_addon_count=item.free_addon_count)
    if tamanho is None:
        return item.sizes[0]
    for opcao in item.sizes:
        if opcao.name == tamanho:
            return opcao
    raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Tamanho '{tamanho}' indisponível para {item.name}")


def _adicionais_escolhidos(
    item: ItemCardapio, adicionais: Iterable[Adicional], adicional_ids: Iterable[int]
) -> List[Adicional]:
    ids = set(adicional_ids)
    permitidos = set(item.available_addon_ids)
    invalidos = ids - permitidos
    if invalidos:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            f"Adicional indisponível para {item.name}: {', '.join(str(i) for i in sorted(invalidos))}",
        )
    return [a for a in adicionais if a.id in ids and a.id in permitidos]


def _ids_chave(ids: Iterable[int]) -> str:
    return "-".join(str(i) for i in sorted(set(ids)))


def _nome_com_adicionais(nome: str, escolhidos: List[Adicional], *, parenteses: bool) -> str:
    """`Açaí com Leite Ninho, Morango e mais 2` (ou entre parênteses)."""
    if not escolhidos:
        return nome
    primeiros = ", ".join(a.name for a in escolhidos[:2])
    restantes = len(escolhidos) - 2
    sufixo = f" e mais {restantes}" if restantes > 0 else ""
    if parenteses:
        return f"{nome} (com {primeiros}{sufixo})"
    return f"{nome} com {primeiros}{sufixo}"


class IConfiguradorItem(ABC):
    @abstractmethod
    def aceita(self, item: ItemCardapio) -> bool:
        raise NotImplementedError

    @abstractmethod
    def configurar(
        self,
        item: ItemCardapio,
        adicionais: List[Adicional],
        *,
        tamanho: Optional[str] = None,
        adicional_ids: Iterable[int] = (),
        segunda_metade: Optional[ItemCardapio] = None,
    ) -> ItemCarrinho:
        raise NotImplementedError


class ConfiguradorPizza(IConfiguradorItem):
    """Pizza inteira ou meio a meio; o preço é o da metade mais cara no tamanho escolhido."""

    def aceita(self, item: ItemCardapio) -> bool:
        return item.is_pizza

    @staticmethod
    def _preco_no_tamanho(pizza: ItemCardapio, tamanho: str) -> Decimal:
        for opcao in pizza.sizes:
            if opcao.name == tamanho:
                return opcao.price
        return pizza.price

    def configurar(self, item, adicionais, *, tamanho=None, adicional_ids=(), segunda_metade=None):
        if segunda_metade is not None and not segunda_metade.is_pizza:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "O segundo sabor precisa ser uma pizza")

        opcao = _tamanho_escolhido(item, tamanho)
        escolhidos = _adicionais_escolhidos(item, adicionais, adicional_ids)

        preco_pizza = self._preco_no_tamanho(item, opcao.name)
        if segunda_metade is not None:
            preco_pizza = max(preco_pizza, self._preco_no_tamanho(segunda_metade, opcao.name))
        preco_adicionais = sum((a.price for a in escolhidos), Decimal("0"))

        if segunda_metade is not None:
            metades = [
                MetadePizza(name=item.name, price=item.price),
                MetadePizza(name=segunda_metade.name, price=segunda_metade.price),
            ]
            nome = f"Pizza Meia {item.name} / Meia {segunda_metade.name}"
            descricao = "Pizza com dois sabores"
            ids_sabores = [item.id, segunda_metade.id]
        else:
            metades = [MetadePizza(name=item.name, price=item.price)]
            nome = f"Pizza {item.name}"
            descricao = item.description
            ids_sabores = [item.id]

        return ItemCarrinho(
            id=f"pizza-{_ids_chave(ids_sabores)}_size-{opcao.name}_addons-{_ids_chave(a.id for a in escolhidos)}",
            name=nome,
            price=_dec(preco_pizza + preco_adicionais),
            base_price=_dec(preco_pizza),
            image_url=item.image_url,
            quantity=1,
            description=descricao,
            halves=metades,
            selected_addons=escolhidos,
            size_name=opcao.name,
        )


class ConfiguradorAcai(IConfiguradorItem):
    """Os N adicionais mais caros saem de graça, N vindo do tamanho escolhido."""

    def aceita(self, item: ItemCardapio) -> bool:
        return item.is_acai

    def configurar(self, item, adicionais, *, tamanho=None, adicional_ids=(), segunda_metade=None):
        opcao = _tamanho_escolhido(item, tamanho)
        escolhidos = _adicionais_escolhidos(item, adicionais, adicional_ids)

        gratis_qtd = opcao.free_addon_count or 0
        if gratis_qtd > 0:
            ordenados = sorted(escolhidos, key=lambda a: a.price, reverse=True)
            gratis, pagos = ordenados[:gratis_qtd], ordenados[gratis_qtd:]
        else:
            gratis, pagos = [], escolhidos
        selecionados = [*gratis, *pagos]

        return ItemCarrinho(
            id=f"acai-{item.id}_size-{opcao.name}_addons-{_ids_chave(a.id for a in escolhidos)}",
            name=_nome_com_adicionais(item.name, selecionados, parenteses=False),
            price=_dec(opcao.price + sum((a.price for a in pagos), Decimal("0"))),
            base_price=_dec(opcao.price),
            image_url=item.image_url,
            quantity=1,
            description=f"{len(selecionados)} adicionais selecionados",
            selected_addons=selecionados,
            size_name=opcao.name,
        )


class ConfiguradorGenerico(IConfiguradorItem):
    """Itens com tamanhos e/ou adicionais."""

    def aceita(self, item: ItemCardapio) -> bool:
        return bool(item.available_addon_ids) or bool(item.sizes)

    def configurar(self, item, adicionais, *, tamanho=None, adicional_ids=(), segunda_metade=None):
        opcao = _tamanho_escolhido(item, tamanho)
        escolhidos = _adicionais_escolhidos(item, adicionais, adicional_ids)

        return ItemCarrinho(
            id=f"item-{item.id}_size-{opcao.name}_addons-{_ids_chave(a.id for a in escolhidos)}",
            name=_nome_com_adicionais(item.name, escolhidos, parenteses=True),
            price=_dec(opcao.price + sum((a.price for a in escolhidos), Decimal("0"))),
            base_price=_dec(opcao.price),
            image_url=item.image_url,
            quantity=1,
            description=f"{len(escolhidos)} adicionais selecionados",
            selected_addons=escolhidos,
            size_name=opcao.name if opcao.name != TAMANHO_UNICO else None,
        )


# Ordem importa: pizza e açaí antes do genérico
CONFIGURADORES: List[IConfiguradorItem] = [ConfiguradorPizza(), ConfiguradorAcai(), ConfiguradorGenerico()]


def configurador_para(item: ItemCardapio) -> Optional[IConfiguradorItem]:
    """None quando o item vai direto para o carrinho (marmitas e itens simples)."""
    return next((c for c in CONFIGURADORES if c.aceita(item)), None)


def configurar_item(
    item: ItemCardapio,
    adicionais: List[Adicional],
    *,
    tamanho: Optional[str] = None,
    adicional_ids: Iterable[int] = (),
    segunda_metade: Optional[ItemCardapio] = None,
) -> ItemCarrinho:
    configurador = configurador_para(item)
    if configurador is None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"{item.name} não possui opções de personalização")
    return configurador.configurar(
        item,
        adicionais,
        tamanho=tamanho,
        adicional_ids=adicional_ids,
        segunda_metade=segunda_metade,
    )

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from typing import Iterable, List, Optional, TypeVar, Union

from fastapi import HTTPException, status

from guarafood.api.cardapio.contracts.catalogo_contract import ICatalogoContract
from guarafood.api.cardapio.schemas.schema_cardapio import (
    Adicional,
    Banner,
    CategoriaCardapio,
    Combo,
    ItemCardapio,
    Promocao,
    Restaurante,
    TipoAlvoPromocaoEnum,
    TipoDescontoEnum,
    VitrineRestaurante,
)
from guarafood.api.pedidos.services.service_pedido_helpers import _dec
from guarafood.config.settings import LUNCH_CUTOFF
from guarafood.utils.database_utils import now_trimmed
from guarafood.utils.horarios_funcionamento import _parse_hhmm, _weekday_sun0
from guarafood.utils.logger import logger

T = TypeVar("T", ItemCardapio, Combo)


def preco_promocional(preco: Decimal, promocao: Promocao) -> Decimal:
    if promocao.discount_type == TipoDescontoEnum.PERCENTUAL:
        return _dec(preco * (Decimal(1) - promocao.discount_value / Decimal(100)))
    return _dec(max(Decimal(0), preco - promocao.discount_value))


def aplicar_promocao(produto: T, promocoes: Iterable[Promocao], alvo: TipoAlvoPromocaoEnum) -> T:
    """Aplica a primeira promoção que mira o produto; preço original fica em `original_price`."""
    for promo in promocoes:
        if promo.target_type != alvo:
            continue
        if produto.id in promo.target_ids or str(produto.id) in {str(t) for t in promo.target_ids}:
            return produto.model_copy(
                update={
                    "price": preco_promocional(produto.price, promo),
                    "original_price": produto.price,
                    "active_promotion": promo,
                }
            )
    return produto


def disponivel_no_dia(item: ItemCardapio, dia_semana: int) -> bool:
    """Sem `available_days` o item vale para todos os dias (0=domingo)."""
    return not item.available_days or dia_semana in item.available_days


def montar_cardapio(
    categorias: List[CategoriaCardapio],
    itens: List[ItemCardapio],
    combos: List[Combo],
    promocoes: List[Promocao],
    *,
    dia_semana: Optional[int] = None,
) -> List[CategoriaCardapio]:
    """
    Agrupa itens e combos nas categorias, na ordem das categorias.
    Com `dia_semana`, itens indisponíveis naquele dia ficam de fora.
    """
    cardapio: List[CategoriaCardapio] = []
    for categoria in categorias:
        itens_categoria = [i for i in itens if i.category_id == categoria.id]
        if dia_semana is not None:
            itens_categoria = [i for i in itens_categoria if disponivel_no_dia(i, dia_semana)]
        itens_categoria = [aplicar_promocao(i, promocoes, TipoAlvoPromocaoEnum.ITEM) for i in itens_categoria]

        combos_categoria = [
            aplicar_promocao(c, promocoes, TipoAlvoPromocaoEnum.COMBO)
            for c in combos
            if c.category_id == categoria.id
        ]
        cardapio.append(categoria.model_copy(update={"items": itens_categoria, "combos": combos_categoria}))
    return cardapio


def horario_de_almoco(agora: datetime, limite: str = LUNCH_CUTOFF) -> bool:
    """Marmitas ficam à venda até o horário limite, inclusive."""
    corte = _parse_hhmm(limite) or time(15, 30)
    return (agora.hour, agora.minute) <= (corte.hour, corte.minute)


def montar_vitrine(cardapio: List[CategoriaCardapio], agora: datetime) -> VitrineRestaurante:
    """
    Separa as seções especiais da loja:
    - marmitas (só no horário de almoço)
    - destaques do dia e promoções da semana (fora das marmitas)
    - itens e combos com promoção ativa
    - todas as pizzas, para a montagem meio a meio
    O cardápio principal fica sem especiais e sem marmitas; categorias vazias somem.
    """
    todos = [item for categoria in cardapio for item in categoria.items]

    principal = []
    for categoria in cardapio:
        itens = [
            i for i in categoria.items
            if not i.is_daily_special and not i.is_weekly_special and not i.is_marmita
        ]
        if itens or categoria.combos:
            principal.append(categoria.model_copy(update={"items": itens}))

    promovidos: List[Union[ItemCardapio, Combo]] = [
        produto
        for categoria in cardapio
        for produto in [*categoria.items, *categoria.combos]
        if produto.active_promotion is not None and not getattr(produto, "is_marmita", False)
    ]

    return VitrineRestaurante(
        cardapio=principal,
        marmitas=[i for i in todos if i.is_marmita] if horario_de_almoco(agora) else [],
        destaques_do_dia=[i for i in todos if i.is_daily_special and not i.is_marmita],
        promocoes_da_semana=[i for i in todos if i.is_weekly_special and not i.is_marmita],
        itens_em_promocao=promovidos,
        pizzas=[i for i in todos if i.is_pizza],
    )


class CardapioService:
    def __init__(self, catalogo: ICatalogoContract):
        self.catalogo = catalogo

    async def listar_restaurantes(self) -> List[Restaurante]:
        return await self.catalogo.listar_restaurantes()

    async def obter_restaurante(self, restaurante_id: int) -> Restaurante:
        restaurante = await self.catalogo.obter_restaurante(restaurante_id)
        if not restaurante:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Restaurante não encontrado")
        return restaurante

    async def obter_cardapio(
        self,
        restaurante_id: int,
        *,
        incluir_ocultos: bool = False,
        agora: Optional[datetime] = None,
    ) -> List[CategoriaCardapio]:
        """
        Cardápio categorizado com promoções vigentes aplicadas.
        Sem `incluir_ocultos`, só entram os itens disponíveis no dia de hoje.
        """
        agora = agora or now_trimmed()
        categorias = await self.catalogo.listar_categorias(restaurante_id)
        itens = await self.catalogo.listar_itens(restaurante_id)
        combos = await self.catalogo.listar_combos(restaurante_id)
        promocoes = await self.catalogo.listar_promocoes_vigentes(restaurante_id, agora)

        logger.info(
            f"[Cardapio] restaurante={restaurante_id} categorias={len(categorias)} "
            f"itens={len(itens)} combos={len(combos)} promocoes={len(promocoes)}"
        )
        return montar_cardapio(
            categorias,
            itens,
            combos,
            promocoes,
            dia_semana=None if incluir_ocultos else _weekday_sun0(agora),
        )

    async def obter_vitrine(self, restaurante_id: int, *, agora: Optional[datetime] = None) -> VitrineRestaurante:
        agora = agora or now_trimmed()
        cardapio = await self.obter_cardapio(restaurante_id, incluir_ocultos=True, agora=agora)
        return montar_vitrine(cardapio, agora)

    async def listar_adicionais(self, restaurante_id: int) -> List[Adicional]:
        return await self.catalogo.listar_adicionais(restaurante_id)

    async def listar_banners(self) -> List[Banner]:
        return await self.catalogo.listar_banners_ativos()

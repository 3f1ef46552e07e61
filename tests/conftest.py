"""
Fixtures compartilhadas: armazenamento local em SQLite em memória e
implementações em memória dos contratos do backend hospedado.
"""
import itertools
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from guarafood.api.armazenamento.services import ArmazenamentoLocal
from guarafood.api.cardapio.contracts import ICatalogoContract
from guarafood.api.cardapio.schemas.schema_cardapio import (
    Adicional,
    Banner,
    CategoriaCardapio,
    Combo,
    HorarioFuncionamento,
    ItemCardapio,
    OpcaoTamanho,
    Promocao,
    Restaurante,
    TipoAlvoPromocaoEnum,
    TipoDescontoEnum,
)
from guarafood.api.cupons.contracts import ICupomContract
from guarafood.api.cupons.schemas.schema_cupom import Cupom
from guarafood.api.pagamentos.contracts import IPagamentoContract
from guarafood.api.pedidos.contracts import IPedidosContract
from guarafood.api.pedidos.schemas.schema_pedido import (
    IntencaoPix,
    NovoPedido,
    Pedido,
    PedidoAcompanhado,
    PedidoStatusEnum,
)
from guarafood.api.realtime.adapters import LocalChangeFeed
from guarafood.core.contexto import StorefrontContext
from guarafood.database.db_connection import Base, inicializar_banco

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


# ---------------------------------------------------------------------------
# Catálogo
# ---------------------------------------------------------------------------
def _restaurantes() -> List[Restaurante]:
    return [
        Restaurante(
            id=1,
            name="Pizzaria Guará",
            category="Pizza, Lanches",
            payment_gateways=["Pix", "Dinheiro", "Cartão de Crédito"],
            address="Rua Principal, 10",
            phone="(35) 99999-0000",
            delivery_fee=Decimal("5.00"),
            has_auto_pix=True,
            manual_pix_key="pix@pizzariaguara.com",
        ),
        Restaurante(
            id=2,
            name="Açaí da Serra",
            category="Açaí",
            payment_gateways=["Pix", "Dinheiro"],
            phone="35988887777",
            delivery_fee=Decimal("3.00"),
            manual_pix_key="chave-acai",
        ),
        Restaurante(
            id=3,
            name="Marmitaria Fechada",
            category="Marmitas",
            operating_hours=[HorarioFuncionamento(day_of_week=d, is_open=False) for d in range(7)],
        ),
        Restaurante(
            id=4,
            name="Lanchonete Só Pix",
            category="Lanches",
            payment_gateways=["Pix"],
            has_auto_pix=True,
        ),
    ]


class FakeCatalogo(ICatalogoContract):
    def __init__(self):
        self.restaurantes = _restaurantes()
        self.categorias = [
            CategoriaCardapio(id=10, name="Pizzas", restaurant_id=1, display_order=1),
            CategoriaCardapio(id=11, name="Bebidas", restaurant_id=1, display_order=2),
            CategoriaCardapio(id=30, name="Açaí", restaurant_id=2, display_order=1),
        ]
        self.itens = [
            ItemCardapio(
                id=100, name="Calabresa", price=Decimal("40.00"), restaurant_id=1, category_id=10,
                is_pizza=True, available_addon_ids=[900],
                sizes=[OpcaoTamanho(name="Média", price=Decimal("40.00")), OpcaoTamanho(name="Grande", price=Decimal("50.00"))],
            ),
            ItemCardapio(
                id=101, name="Quatro Queijos", price=Decimal("45.00"), restaurant_id=1, category_id=10,
                is_pizza=True,
                sizes=[OpcaoTamanho(name="Média", price=Decimal("45.00")), OpcaoTamanho(name="Grande", price=Decimal("58.00"))],
            ),
            ItemCardapio(id=110, name="Refrigerante", price=Decimal("7.50"), restaurant_id=1, category_id=11),
            ItemCardapio(
                id=111, name="Suco do Dia", price=Decimal("8.00"), restaurant_id=1, category_id=11,
                available_days=[1],
            ),
            ItemCardapio(
                id=300, name="Açaí", price=Decimal("15.00"), restaurant_id=2, category_id=30,
                is_acai=True, available_addon_ids=[901, 902, 903, 904],
                sizes=[
                    OpcaoTamanho(name="300ml", price=Decimal("15.00"), free_addon_count=2),
                    OpcaoTamanho(name="500ml", price=Decimal("20.00"), free_addon_count=3),
                ],
            ),
        ]
        self.combos = [
            Combo(id=200, name="Combo Família", price=Decimal("80.00"), restaurant_id=1, category_id=10,
                  menu_item_ids=[100, 110]),
        ]
        self.promocoes = [
            Promocao(
                id=1, name="Refri com desconto", discount_type=TipoDescontoEnum.PERCENTUAL,
                discount_value=Decimal("20"), target_type=TipoAlvoPromocaoEnum.ITEM,
                target_ids=[110], restaurant_id=1,
            ),
        ]
        self.adicionais = [
            Adicional(id=900, name="Borda Catupiry", price=Decimal("8.00"), restaurant_id=1),
            Adicional(id=901, name="Granola", price=Decimal("2.00"), restaurant_id=2),
            Adicional(id=902, name="Leite Ninho", price=Decimal("4.00"), restaurant_id=2),
            Adicional(id=903, name="Morango", price=Decimal("3.00"), restaurant_id=2),
            Adicional(id=904, name="Nutella", price=Decimal("6.00"), restaurant_id=2),
        ]
        self.banners = [Banner(id=1, title="Semana da Pizza", target_value="1")]

    async def listar_restaurantes(self):
        return list(self.restaurantes)

    async def obter_restaurante(self, restaurante_id):
        return next((r for r in self.restaurantes if r.id == restaurante_id), None)

    async def listar_categorias(self, restaurante_id):
        return [c for c in self.categorias if c.restaurant_id == restaurante_id]

    async def listar_itens(self, restaurante_id):
        return [i for i in self.itens if i.restaurant_id == restaurante_id]

    async def listar_combos(self, restaurante_id):
        return [c for c in self.combos if c.restaurant_id == restaurante_id]

    async def listar_promocoes_vigentes(self, restaurante_id, agora):
        return [p for p in self.promocoes if p.restaurant_id == restaurante_id]

    async def listar_adicionais(self, restaurante_id):
        return [a for a in self.adicionais if a.restaurant_id == restaurante_id]

    async def listar_banners_ativos(self):
        return [b for b in self.banners if b.active]


# ---------------------------------------------------------------------------
# Cupons, pedidos e pagamentos
# ---------------------------------------------------------------------------
class FakeCupons(ICupomContract):
    def __init__(self):
        self.cupons: Dict[str, Cupom] = {}

    def adicionar(self, cupom: Cupom) -> Cupom:
        self.cupons[cupom.code.upper()] = cupom
        return cupom

    async def buscar_por_codigo(self, codigo, restaurante_id):
        cupom = self.cupons.get(codigo)
        if cupom is None or cupom.restaurant_id not in (None, restaurante_id):
            return None
        return cupom


class FakePedidos(IPedidosContract):
    def __init__(self):
        self._seq = itertools.count(1)
        self.criados: List[NovoPedido] = []
        self.acompanhados: Dict[str, PedidoAcompanhado] = {}
        self.falhar: Optional[Exception] = None
        self.falhar_listagem: Optional[Exception] = None

    def definir(self, pedido_id: str, status: PedidoStatusEnum, restaurante: str = "Pizzaria Guará") -> None:
        self.acompanhados[pedido_id] = PedidoAcompanhado(
            id=pedido_id,
            status=status,
            restaurant_name=restaurante,
            total_price=Decimal("50.00"),
            timestamp=datetime(2026, 10, 14, 12, 0).isoformat(),
        )

    async def criar_pedido(self, payload):
        if self.falhar is not None:
            raise self.falhar
        numero = next(self._seq)
        pedido_id = f"pedido-{numero}"
        self.criados.append(payload)
        self.definir(pedido_id, PedidoStatusEnum.NOVO, payload.restaurant_name)
        return Pedido(
            **payload.model_dump(),
            id=pedido_id,
            order_number=numero,
            status=PedidoStatusEnum.NOVO,
            timestamp=datetime(2026, 10, 14, 12, 0).isoformat(),
        )

    async def listar_por_ids(self, ids):
        if self.falhar_listagem is not None:
            raise self.falhar_listagem
        encontrados = [self.acompanhados[i] for i in ids if i in self.acompanhados]
        return list(reversed(encontrados))


class FakePagamentos(IPagamentoContract):
    def __init__(self, pedidos: FakePedidos):
        self.pedidos = pedidos
        self._seq = itertools.count(1)
        self.chamadas: List[int] = []
        self.falhar: Optional[Exception] = None

    async def criar_intencao_pix(self, restaurante_id, payload):
        self.chamadas.append(restaurante_id)
        if self.falhar is not None:
            raise self.falhar
        pedido_id = f"pix-{next(self._seq)}"
        self.pedidos.definir(pedido_id, PedidoStatusEnum.AGUARDANDO_PAGAMENTO, payload.restaurant_name)
        return IntencaoPix(order_id=pedido_id, qr_code="00020126580014br.gov.bcb.pix", qr_code_base64="aW1hZ2Vt")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture(scope="function")
def armazenamento():
    """Armazenamento local novo por teste (SQLite em memória)."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    inicializar_banco(bind=engine)
    yield ArmazenamentoLocal(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def catalogo():
    return FakeCatalogo()


@pytest.fixture
def cupons_fake():
    return FakeCupons()


@pytest.fixture
def pedidos_fake():
    return FakePedidos()


@pytest.fixture
def pagamentos_fake(pedidos_fake):
    return FakePagamentos(pedidos_fake)


@pytest.fixture
def feed():
    return LocalChangeFeed()


@pytest.fixture
def contexto(armazenamento, catalogo, cupons_fake, pedidos_fake, pagamentos_fake, feed):
    return StorefrontContext(
        armazenamento=armazenamento,
        catalogo=catalogo,
        cupons=cupons_fake,
        pedidos=pedidos_fake,
        pagamentos=pagamentos_fake,
        feed=feed,
        checkout_kwargs={"segundos_pix": 3, "intervalo_contagem": 0.01},
        rastreador_kwargs={"intervalo_pendente": 60, "intervalo_ocioso": 120},
    )


@pytest.fixture
def restaurantes():
    return {r.id: r for r in _restaurantes()}

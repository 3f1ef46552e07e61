"""
Sessão de checkout: SUMMARY -> DETAILS -> PIX_PAYMENT -> SUCCESS.

Erros de formulário, de cupom e de envio ficam no estado da sessão (ou viram
toast); nenhum deles é uma etapa própria. A contagem regressiva do Pix e a
inscrição no status do pedido são canceladas em toda saída da etapa de
pagamento: confirmação, tempo esgotado, voltar, reabrir ou fechar a sessão.
"""
from __future__ import annotations

import asyncio
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx
from fastapi import HTTPException
from pydantic import BaseModel, Field

from guarafood.api.cardapio.schemas.schema_cardapio import Restaurante
from guarafood.api.carrinho.schemas.schema_carrinho import ItemCarrinho
from guarafood.api.carrinho.services.service_carrinho import CarrinhoService
from guarafood.api.clientes.services.service_cliente import PerfilClienteService
from guarafood.api.cupons.schemas.schema_cupom import Cupom
from guarafood.api.cupons.services.service_cupom import CupomService, calcular_desconto
from guarafood.api.notifications.core.event_bus import EventBus, EventType
from guarafood.api.notifications.core.notificador import Notificador
from guarafood.api.pagamentos.contracts.pagamento_contract import (
    IPagamentoContract,
    PagamentoIndisponivelError,
)
from guarafood.api.pedidos.contracts.pedidos_contract import IPedidosContract
from guarafood.api.pedidos.schemas.schema_pedido import (
    EnderecoCliente,
    IntencaoPix,
    NovoPedido,
    PedidoStatusEnum,
    TipoEntregaEnum,
)
from guarafood.api.pedidos.services.service_historico import HistoricoPedidosService
from guarafood.api.pedidos.services.service_pedido_helpers import (
    TotaisPedido,
    calcular_totais,
    rotulo_forma_pagamento,
)
from guarafood.api.realtime.contracts.change_feed_contract import Assinatura, IChangeFeed
from guarafood.config.settings import DEFAULT_PAYMENT_METHODS, DEFAULT_ZIP_CODE, PIX_COUNTDOWN_SECONDS
from guarafood.integrations.supabase.client import SupabaseError
from guarafood.utils.database_utils import now_trimmed
from guarafood.utils.horarios_funcionamento import restaurante_esta_aberto
from guarafood.utils.logger import logger
from guarafood.utils.prometheus_metrics import (
    pedidos_enviados_total,
    pix_confirmados_total,
    pix_expirados_total,
)
from guarafood.utils.whatsapp import mensagem_confirmacao_pedido, montar_link_whatsapp, telefone_valido

FORMA_PIX = "Pix"
FORMA_PIX_MANUAL = "Pix (Comprovante via WhatsApp)"
TABELA_PEDIDOS = "orders"

ERROS_ENVIO = (SupabaseError, httpx.HTTPError, HTTPException)


class EtapaCheckoutEnum(str, Enum):
    SUMMARY = "SUMMARY"
    DETAILS = "DETAILS"
    PIX_PAYMENT = "PIX_PAYMENT"
    SUCCESS = "SUCCESS"


class DadosCliente(BaseModel):
    nome: str = ""
    telefone: str = ""
    tipo_entrega: TipoEntregaEnum = TipoEntregaEnum.DELIVERY
    endereco: EnderecoCliente = Field(default_factory=lambda: EnderecoCliente(zip_code=DEFAULT_ZIP_CODE))
    embalagem: bool = False
    forma_pagamento: str = ""
    troco_para: Optional[str] = None


class TotaisOut(BaseModel):
    subtotal: Decimal
    desconto: Decimal
    taxa_entrega: Decimal
    total: Decimal


class EstadoCheckoutOut(BaseModel):
    etapa: EtapaCheckoutEnum
    restaurante_id: int
    restaurante_aberto: bool
    itens: List[ItemCarrinho]
    totais: TotaisOut
    dados: DadosCliente
    opcoes_pagamento: List[str]
    cupom: Optional[Cupom] = None
    codigo_cupom: str = ""
    erro_formulario: Optional[str] = None
    pix: Optional[IntencaoPix] = None
    pix_manual: bool = False
    chave_pix_manual: Optional[str] = None
    erro_pix: Optional[str] = None
    contagem_regressiva: int
    enviando: bool = False
    pedido_id: Optional[str] = None
    link_whatsapp: Optional[str] = None


class CheckoutSession:
    def __init__(
        self,
        *,
        restaurante: Restaurante,
        carrinho: CarrinhoService,
        pedidos: IPedidosContract,
        pagamentos: IPagamentoContract,
        cupons: CupomService,
        feed: IChangeFeed,
        historico: HistoricoPedidosService,
        perfis: PerfilClienteService,
        notificador: Notificador,
        eventos: EventBus,
        relogio: Callable[[], datetime] = now_trimmed,
        segundos_pix: int = PIX_COUNTDOWN_SECONDS,
        intervalo_contagem: float = 1.0,
    ) -> None:
        self.restaurante = restaurante
        self.carrinho = carrinho
        self.pedidos = pedidos
        self.pagamentos = pagamentos
        self.cupons = cupons
        self.feed = feed
        self.historico = historico
        self.perfis = perfis
        self.notificador = notificador
        self.eventos = eventos
        self.relogio = relogio
        self.segundos_pix = segundos_pix
        self.intervalo_contagem = intervalo_contagem

        self._tarefa_contagem: Optional[asyncio.Task] = None
        self._assinatura_pix: Optional[Assinatura] = None
        self._resetar()

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------
    def _resetar(self) -> None:
        self._encerrar_pix()
        self.etapa = EtapaCheckoutEnum.SUMMARY
        self.dados = DadosCliente(forma_pagamento=(self.opcoes_pagamento or [FORMA_PIX])[0])
        self.cupom: Optional[Cupom] = None
        self.codigo_cupom = ""
        self.erro_formulario: Optional[str] = None
        self.pix: Optional[IntencaoPix] = None
        self.pix_manual = False
        self.erro_pix: Optional[str] = None
        self.contagem_regressiva = self.segundos_pix
        self.enviando = False
        self.pedido_id: Optional[str] = None
        self.link_whatsapp: Optional[str] = None
        self._payload_pix: Optional[NovoPedido] = None

    def abrir(self, restaurante: Optional[Restaurante] = None) -> None:
        """Toda abertura começa do zero no resumo."""
        if restaurante is not None:
            self.restaurante = restaurante
        self._resetar()
        logger.info(f"[Checkout] Aberto para restaurante {self.restaurante.id}")

    def fechar(self) -> None:
        self._encerrar_pix()

    @property
    def opcoes_pagamento(self) -> List[str]:
        return list(self.restaurante.payment_gateways or DEFAULT_PAYMENT_METHODS)

    @property
    def aguardando_pix(self) -> bool:
        return self._tarefa_contagem is not None or self._assinatura_pix is not None

    def restaurante_aberto(self) -> bool:
        return restaurante_esta_aberto(self.restaurante, now=self.relogio())

    def totais(self) -> TotaisPedido:
        subtotal = self.carrinho.total_preco
        taxa = self.restaurante.delivery_fee if self.dados.tipo_entrega == TipoEntregaEnum.DELIVERY else Decimal(0)
        return calcular_totais(
            subtotal=subtotal,
            desconto=calcular_desconto(self.cupom, subtotal),
            taxa_entrega=taxa or Decimal(0),
        )

    def estado(self) -> EstadoCheckoutOut:
        t = self.totais()
        return EstadoCheckoutOut(
            etapa=self.etapa,
            restaurante_id=self.restaurante.id,
            restaurante_aberto=self.restaurante_aberto(),
            itens=self.carrinho.itens,
            totais=TotaisOut(subtotal=t.subtotal, desconto=t.desconto, taxa_entrega=t.taxa_entrega, total=t.total),
            dados=self.dados,
            opcoes_pagamento=self.opcoes_pagamento,
            cupom=self.cupom,
            codigo_cupom=self.codigo_cupom,
            erro_formulario=self.erro_formulario,
            pix=self.pix,
            pix_manual=self.pix_manual,
            chave_pix_manual=self.restaurante.manual_pix_key if self.pix_manual else None,
            erro_pix=self.erro_pix,
            contagem_regressiva=self.contagem_regressiva,
            enviando=self.enviando,
            pedido_id=self.pedido_id,
            link_whatsapp=self.link_whatsapp,
        )

    # ------------------------------------------------------------------
    # Navegação
    # ------------------------------------------------------------------
    def avancar(self) -> bool:
        """SUMMARY -> DETAILS, exige carrinho com itens e restaurante aberto."""
        self.erro_formulario = None
        if self.etapa != EtapaCheckoutEnum.SUMMARY:
            return False
        if self.carrinho.vazio:
            self.notificador.erro("Seu carrinho está vazio. Adicione itens antes de prosseguir.")
            return False
        if not self.restaurante_aberto():
            self.notificador.erro("Restaurante Fechado. Não é possível prosseguir.")
            return False
        self.etapa = EtapaCheckoutEnum.DETAILS
        return True

    def voltar(self) -> None:
        self.erro_formulario = None
        if self.etapa == EtapaCheckoutEnum.DETAILS:
            self.etapa = EtapaCheckoutEnum.SUMMARY
        elif self.etapa == EtapaCheckoutEnum.PIX_PAYMENT:
            self._encerrar_pix()
            self.etapa = EtapaCheckoutEnum.DETAILS
            self.pix = None
            self.erro_pix = None
            self.pix_manual = False
            self._payload_pix = None
            self.contagem_regressiva = self.segundos_pix
            self.notificador.info("Pagamento Pix cancelado.")

    # ------------------------------------------------------------------
    # Dados do cliente
    # ------------------------------------------------------------------
    def atualizar_dados(self, **campos: Any) -> DadosCliente:
        self.dados = DadosCliente.model_validate({**self.dados.model_dump(), **campos})
        return self.dados

    def preencher_por_nome(self, nome: Optional[str] = None) -> bool:
        """Preenche telefone e endereço a partir do perfil salvo com o mesmo nome."""
        nome = nome if nome is not None else self.dados.nome
        if nome != self.dados.nome:
            self.dados = self.dados.model_copy(update={"nome": nome})
        perfil = self.perfis.buscar(nome)
        if perfil is None:
            return False

        endereco = (perfil.address or EnderecoCliente()).model_copy(update={"zip_code": DEFAULT_ZIP_CODE})
        self.dados = self.dados.model_copy(update={"telefone": perfil.phone, "endereco": endereco})
        self.notificador.info("Seus dados foram preenchidos. Verifique se estão corretos!")
        return True

    # ------------------------------------------------------------------
    # Cupom
    # ------------------------------------------------------------------
    async def aplicar_cupom(self, codigo: str) -> bool:
        self.codigo_cupom = codigo
        self.erro_formulario = None
        try:
            cupom = await self.cupons.validar(
                codigo,
                restaurante_id=self.restaurante.id,
                subtotal=self.carrinho.total_preco,
                agora=self.relogio(),
            )
        except HTTPException as e:
            self.erro_formulario = str(e.detail)
            return False
        except (SupabaseError, httpx.HTTPError) as e:
            logger.error(f"[Checkout] Falha ao validar cupom: {e}")
            self.erro_formulario = "Não foi possível validar o cupom agora."
            return False

        self.cupom = cupom
        self.notificador.sucesso("Cupom aplicado!")
        return True

    def remover_cupom(self) -> None:
        self.cupom = None
        self.codigo_cupom = ""
        self.erro_formulario = None

    # ------------------------------------------------------------------
    # Envio
    # ------------------------------------------------------------------
    def _validar_dados(self) -> Optional[str]:
        d = self.dados
        if not d.nome.strip() or not d.telefone.strip() or not d.forma_pagamento:
            return "Preencha todos os campos obrigatórios."
        if d.tipo_entrega == TipoEntregaEnum.DELIVERY and not d.endereco.completo:
            return "Preencha todos os campos obrigatórios, incluindo o endereço completo."
        if not telefone_valido(d.telefone):
            return "Por favor, insira um número de telefone válido com DDD (10 ou 11 dígitos)."
        if d.forma_pagamento not in self.opcoes_pagamento:
            return "Forma de pagamento indisponível neste restaurante."
        return None

    def _montar_payload(self, forma_pagamento: str) -> NovoPedido:
        t = self.totais()
        d = self.dados
        return NovoPedido(
            customer_name=d.nome.strip(),
            customer_phone=d.telefone.strip(),
            customer_address=d.endereco if d.tipo_entrega == TipoEntregaEnum.DELIVERY else None,
            delivery_method=d.tipo_entrega,
            needs_packaging=d.embalagem,
            items=self.carrinho.itens,
            subtotal=t.subtotal,
            discount_amount=t.desconto,
            coupon_code=self.cupom.code if self.cupom else None,
            delivery_fee=t.taxa_entrega,
            total_price=t.total,
            restaurant_id=self.restaurante.id,
            restaurant_name=self.restaurante.name,
            restaurant_address=self.restaurante.address,
            restaurant_phone=self.restaurante.phone,
            payment_method=forma_pagamento,
        )

    async def enviar(self) -> bool:
        """Envia os dados da etapa DETAILS."""
        if self.etapa != EtapaCheckoutEnum.DETAILS or self.enviando:
            return False
        if not self.restaurante_aberto():
            self.notificador.erro("Restaurante Fechado. Não é possível enviar o pedido.")
            return False

        erro = self._validar_dados()
        if erro:
            self.erro_formulario = erro
            return False
        self.erro_formulario = None

        payload = self._montar_payload(rotulo_forma_pagamento(self.dados.forma_pagamento, self.dados.troco_para))
        if self.dados.forma_pagamento == FORMA_PIX:
            return await self._pagar_com_pix(payload)
        return await self._enviar_pedido(payload)

    async def _enviar_pedido(self, payload: NovoPedido) -> bool:
        self.enviando = True
        try:
            pedido = await self.pedidos.criar_pedido(payload)
        except ERROS_ENVIO as e:
            logger.error(f"[Checkout] Falha ao criar pedido: {e}")
            self.notificador.erro(f"Erro ao enviar pedido: {e}")
            return False
        finally:
            self.enviando = False

        pedidos_enviados_total.labels(forma_pagamento=payload.payment_method).inc()
        await self.eventos.publish(
            EventType.PEDIDO_ENVIADO,
            {"order_id": pedido.id, "forma_pagamento": payload.payment_method},
        )
        self.notificador.sucesso("Pedido enviado com sucesso!")
        await self._finalizar(pedido.id, pedido.model_dump(mode="json"), payload)
        return True

    # ------------------------------------------------------------------
    # Pix
    # ------------------------------------------------------------------
    async def _pagar_com_pix(self, payload: NovoPedido) -> bool:
        tem_manual = bool(self.restaurante.manual_pix_key)

        # Sem cobrança automática configurada vai direto para a chave manual
        if not self.restaurante.has_auto_pix and tem_manual:
            self._entrar_pix_manual(payload)
            return True

        self.enviando = True
        self.erro_pix = None
        try:
            intencao = await self.pagamentos.criar_intencao_pix(self.restaurante.id, payload)
        except PagamentoIndisponivelError as e:
            logger.error(f"[Checkout] Pix automático indisponível: {e}")
            if tem_manual:
                self.notificador.info("Geração automática indisponível. Usando chave Pix manual.", duracao=5000)
                self._entrar_pix_manual(payload)
                return True
            self.erro_pix = f"Erro ao gerar Pix: {e}. Tente outra forma de pagamento."
            return False
        finally:
            self.enviando = False

        self.pix = intencao
        self._payload_pix = payload
        self.etapa = EtapaCheckoutEnum.PIX_PAYMENT
        self.contagem_regressiva = self.segundos_pix
        self._tarefa_contagem = asyncio.create_task(self._contar())
        self._assinatura_pix = self.feed.assinar(
            TABELA_PEDIDOS, self._ao_atualizar_pedido, filtro_id=intencao.order_id
        )
        await self.eventos.publish(EventType.PIX_GERADO, {"order_id": intencao.order_id})
        return True

    def _entrar_pix_manual(self, payload: NovoPedido) -> None:
        self.pix_manual = True
        self._payload_pix = payload
        self.etapa = EtapaCheckoutEnum.PIX_PAYMENT

    async def confirmar_pix_manual(self) -> bool:
        """Cliente informa que pagou na chave manual; o pedido segue sem verificação."""
        if self.etapa != EtapaCheckoutEnum.PIX_PAYMENT or not self.restaurante.manual_pix_key:
            return False
        if self.enviando:
            return False
        payload = (self._payload_pix or self._montar_payload(FORMA_PIX_MANUAL)).model_copy(
            update={"payment_method": FORMA_PIX_MANUAL}
        )
        return await self._enviar_pedido(payload)

    async def _contar(self) -> None:
        while self.contagem_regressiva > 0:
            await asyncio.sleep(self.intervalo_contagem)
            self.contagem_regressiva -= 1
        self._tarefa_contagem = None
        self.erro_pix = "Tempo esgotado. Por favor, inicie um novo pedido."
        self._cancelar_assinatura()
        pix_expirados_total.inc()
        logger.warning(f"[Checkout] Pix expirado (pedido {self.pix.order_id if self.pix else '-'})")
        await self.eventos.publish(EventType.PIX_EXPIRADO, {"order_id": self.pix.order_id if self.pix else None})

    async def _ao_atualizar_pedido(self, registro: Dict[str, Any]) -> None:
        if self.etapa != EtapaCheckoutEnum.PIX_PAYMENT or self.pix is None:
            return
        # Quadro já em trânsito quando o Pix expirou ou foi cancelado
        if self._assinatura_pix is None:
            return
        if registro.get("status") != PedidoStatusEnum.NOVO.value:
            return

        pedido_id = str(registro.get("id") or self.pix.order_id)
        self._encerrar_pix()
        pix_confirmados_total.inc()
        logger.info(f"[Checkout] Pagamento Pix confirmado para pedido {pedido_id}")
        await self._finalizar(pedido_id, registro, self._payload_pix)
        await self.eventos.publish(EventType.PIX_CONFIRMADO, {"order_id": pedido_id})

    # ------------------------------------------------------------------
    # Encerramento
    # ------------------------------------------------------------------
    def _cancelar_assinatura(self) -> None:
        if self._assinatura_pix is not None:
            self._assinatura_pix.cancelar()
            self._assinatura_pix = None

    def _encerrar_pix(self) -> None:
        tarefa = self._tarefa_contagem
        if tarefa is not None and not tarefa.done():
            tarefa.cancel()
        self._tarefa_contagem = None
        self._cancelar_assinatura()

    async def _finalizar(self, pedido_id: str, pedido: Dict[str, Any], payload: Optional[NovoPedido]) -> None:
        self._encerrar_pix()
        self.historico.acompanhar(pedido_id)
        self.historico.registrar(pedido)
        self.perfis.salvar(self.dados.nome, self.dados.telefone, self.dados.endereco)

        if payload is not None:
            self.link_whatsapp = montar_link_whatsapp(
                self.restaurante.phone,
                mensagem_confirmacao_pedido(
                    restaurante=self.restaurante.name,
                    cliente=payload.customer_name,
                    itens=[f"{i.quantity}x {i.name}" for i in payload.items],
                    total=payload.total_price,
                    forma_pagamento=payload.payment_method,
                    numero_pedido=str(pedido.get("order_number") or pedido_id[:6]),
                ),
            )

        self.carrinho.limpar()
        self.pedido_id = pedido_id
        self.etapa = EtapaCheckoutEnum.SUCCESS
        await self.eventos.publish(EventType.PEDIDOS_ATUALIZADOS, {"order_id": pedido_id})
        logger.info(f"[Checkout] Pedido {pedido_id} finalizado")

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Optional, Tuple

import aiohttp

from guarafood.api.realtime.contracts.change_feed_contract import (
    Assinatura,
    CallbackAlteracao,
    IChangeFeed,
)
from guarafood.config.settings import SUPABASE_REALTIME_HEARTBEAT_SECONDS
from guarafood.utils.logger import logger

RECONEXAO_SEGUNDOS = 5


class SupabaseRealtimeFeed(IChangeFeed):
    """
    Feed de alterações do Supabase Realtime (protocolo de canais Phoenix sobre websocket).

    Uma única conexão é aberta na primeira inscrição. Cada inscrição vira um
    tópico com `phx_join` filtrando `UPDATE` na tabela (e no id, se informado).
    Mensagens `postgres_changes` são entregues ao callback do tópico. A conexão
    envia heartbeat periódico e é refeita, com os tópicos, se cair.
    """

    def __init__(
        self,
        *,
        url: str,
        access_token: str,
        heartbeat_segundos: int = SUPABASE_REALTIME_HEARTBEAT_SECONDS,
        schema: str = "public",
    ) -> None:
        self.url = url
        self.access_token = access_token
        self.heartbeat_segundos = heartbeat_segundos
        self.schema = schema

        self._topicos: Dict[str, Tuple[Assinatura, CallbackAlteracao]] = {}
        self._seq = 0
        self._ref = 0
        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._conectado = asyncio.Event()
        self._leitor: Optional[asyncio.Task] = None
        self._heartbeat: Optional[asyncio.Task] = None
        self._fechando = False

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------
    def assinar(self, tabela, callback, *, filtro_id=None) -> Assinatura:
        self._seq += 1
        topico = f"realtime:{tabela}:{filtro_id or 'all'}:{self._seq}"
        assinatura = Assinatura(
            tabela,
            str(filtro_id) if filtro_id is not None else None,
            lambda a: self._sair(topico),
        )
        self._topicos[topico] = (assinatura, callback)
        self._garantir_conexao()
        asyncio.get_running_loop().create_task(self._entrar(topico))
        logger.info(f"[Realtime] Inscrito em {tabela} (id={filtro_id or '*'}) topico={topico}")
        return assinatura

    async def fechar(self) -> None:
        self._fechando = True
        for assinatura, _ in list(self._topicos.values()):
            assinatura.cancelar()
        for tarefa in (self._heartbeat, self._leitor):
            if tarefa and not tarefa.done():
                tarefa.cancel()
                try:
                    await tarefa
                except asyncio.CancelledError:
                    pass
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        if self._session is not None and not self._session.closed:
            await self._session.close()
        logger.info("[Realtime] Conexão encerrada")

    # ------------------------------------------------------------------
    # Protocolo
    # ------------------------------------------------------------------
    def _proximo_ref(self) -> str:
        self._ref += 1
        return str(self._ref)

    def _mensagem_join(self, topico: str) -> Dict[str, Any]:
        assinatura, _ = self._topicos[topico]
        mudanca: Dict[str, Any] = {"event": "UPDATE", "schema": self.schema, "table": assinatura.tabela}
        if assinatura.filtro_id is not None:
            mudanca["filter"] = f"id=eq.{assinatura.filtro_id}"
        return {
            "topic": topico,
            "event": "phx_join",
            "payload": {
                "config": {
                    "broadcast": {"self": False},
                    "presence": {"key": ""},
                    "postgres_changes": [mudanca],
                },
                "access_token": self.access_token,
            },
            "ref": self._proximo_ref(),
        }

    async def _enviar(self, mensagem: Dict[str, Any]) -> None:
        await self._conectado.wait()
        if self._ws is None or self._ws.closed:
            return
        await self._ws.send_str(json.dumps(mensagem))

    async def _entrar(self, topico: str) -> None:
        if topico not in self._topicos:
            return
        try:
            await self._enviar(self._mensagem_join(topico))
        except (aiohttp.ClientError, ConnectionError) as e:
            logger.error(f"[Realtime] Falha ao entrar em {topico}: {e}")

    def _sair(self, topico: str) -> None:
        if self._topicos.pop(topico, None) is None:
            return
        if self._ws is None or self._ws.closed or self._fechando:
            return
        mensagem = {"topic": topico, "event": "phx_leave", "payload": {}, "ref": self._proximo_ref()}
        asyncio.get_running_loop().create_task(self._enviar(mensagem))
        logger.info(f"[Realtime] Saindo de {topico}")

    async def _despachar(self, bruto: str) -> None:
        try:
            mensagem = json.loads(bruto)
        except ValueError:
            logger.warning("[Realtime] Mensagem ilegível descartada")
            return

        if mensagem.get("event") != "postgres_changes":
            if mensagem.get("event") == "phx_reply" and (mensagem.get("payload") or {}).get("status") == "error":
                logger.error(f"[Realtime] Erro no tópico {mensagem.get('topic')}: {mensagem.get('payload')}")
            return

        entrada = self._topicos.get(mensagem.get("topic"))
        if entrada is None:
            return
        assinatura, callback = entrada
        dados = (mensagem.get("payload") or {}).get("data") or {}
        registro = dados.get("record") or {}
        if not assinatura.ativa or not assinatura.aceita(registro):
            return
        try:
            await callback(registro)
        except Exception as e:
            logger.error(f"[Realtime] Erro no callback de {assinatura.tabela}: {e}")

    # ------------------------------------------------------------------
    # Conexão
    # ------------------------------------------------------------------
    def _garantir_conexao(self) -> None:
        if self._leitor is None or self._leitor.done():
            self._fechando = False
            self._leitor = asyncio.get_running_loop().create_task(self._loop_conexao())

    async def _conectar(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        self._ws = await self._session.ws_connect(self.url, heartbeat=None)
        self._conectado.set()
        logger.info("[Realtime] Conectado")
        for topico in list(self._topicos):
            await self._entrar(topico)
        if self._heartbeat is None or self._heartbeat.done():
            self._heartbeat = asyncio.get_running_loop().create_task(self._loop_heartbeat())

    async def _loop_heartbeat(self) -> None:
        while not self._fechando:
            await asyncio.sleep(self.heartbeat_segundos)
            try:
                await self._enviar({"topic": "phoenix", "event": "heartbeat", "payload": {}, "ref": self._proximo_ref()})
            except (aiohttp.ClientError, ConnectionError) as e:
                logger.warning(f"[Realtime] Falha no heartbeat: {e}")

    async def _loop_conexao(self) -> None:
        while not self._fechando:
            try:
                await self._conectar()
                async for msg in self._ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        await self._despachar(msg.data)
                    elif msg.type in (aiohttp.WSMsgType.CLOSED, aiohttp.WSMsgType.ERROR):
                        break
            except (aiohttp.ClientError, ConnectionError, asyncio.TimeoutError) as e:
                logger.error(f"[Realtime] Conexão falhou: {e}")
            finally:
                self._conectado.clear()

            if self._fechando or not self._topicos:
                break
            logger.warning(f"[Realtime] Reconectando em {RECONEXAO_SEGUNDOS}s")
            await asyncio.sleep(RECONEXAO_SEGUNDOS)

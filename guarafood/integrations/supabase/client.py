from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic.alias_generators import to_camel, to_snake

from guarafood.utils.logger import logger


class SupabaseError(Exception):
    """Erro retornado pelo backend hospedado (PostgREST ou Edge Function)."""

    def __init__(self, mensagem: str, *, status_code: int | None = None, detalhes: Any = None):
        super().__init__(mensagem)
        self.status_code = status_code
        self.detalhes = detalhes


def _extrair_mensagem(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(data, dict):
        return (
            data.get("message")
            or data.get("error_description")
            or data.get("error")
            or data.get("details")
            or data.get("hint")
            or str(data)
        )
    return str(data)


def chaves_camel(valor: Any) -> Any:
    """Converte as chaves de um payload (dicts e listas aninhados) para camelCase."""
    if isinstance(valor, dict):
        return {to_camel(k): chaves_camel(v) for k, v in valor.items()}
    if isinstance(valor, list):
        return [chaves_camel(v) for v in valor]
    return valor


def chaves_snake(valor: Any) -> Any:
    if isinstance(valor, dict):
        return {to_snake(k): chaves_snake(v) for k, v in valor.items()}
    if isinstance(valor, list):
        return [chaves_snake(v) for v in valor]
    return valor


class SupabaseClient:
    """Cliente HTTP simples para o REST (PostgREST) e as Edge Functions do Supabase."""

    def __init__(
        self,
        *,
        base_url: str,
        anon_key: str,
        timeout: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("SUPABASE_URL é obrigatório")
        if not anon_key:
            raise ValueError("SUPABASE_ANON_KEY é obrigatório")

        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "apikey": anon_key,
                "Authorization": f"Bearer {anon_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def select(
        self,
        tabela: str,
        *,
        filtros: Dict[str, str] | None = None,
        colunas: str = "*",
        ordem: str | None = None,
    ) -> List[Dict[str, Any]]:
        """
        Consulta uma tabela. `filtros` usa a sintaxe do PostgREST,
        ex.: {"restaurant_id": "eq.3", "id": "in.(a,b)"}.
        """
        params: Dict[str, str] = {"select": colunas}
        params.update(filtros or {})
        if ordem:
            params["order"] = ordem

        resp = await self._client.get(f"/rest/v1/{tabela}", params=params)
        self._verificar(resp, f"Falha ao consultar '{tabela}'")
        data = resp.json()
        return data if isinstance(data, list) else []

    async def insert(self, tabela: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = await self._client.post(
            f"/rest/v1/{tabela}",
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        self._verificar(resp, f"Falha ao inserir em '{tabela}'")
        data = resp.json()
        if isinstance(data, list):
            if not data:
                raise SupabaseError(f"Inserção em '{tabela}' não retornou registro")
            return data[0]
        return data

    async def invoke_function(self, nome: str, body: Dict[str, Any]) -> Dict[str, Any]:
        resp = await self._client.post(f"/functions/v1/{nome}", json=body)
        self._verificar(resp, f"Falha na função '{nome}'")
        data = resp.json()
        if isinstance(data, dict) and data.get("error"):
            raise SupabaseError(str(data["error"]), status_code=resp.status_code, detalhes=data)
        return data

    def _verificar(self, resp: httpx.Response, contexto: str) -> None:
        if resp.is_success:
            return
        mensagem = _extrair_mensagem(resp)
        logger.error(f"[Supabase] {contexto}: HTTP {resp.status_code} - {mensagem}")
        raise SupabaseError(f"{contexto}: {mensagem}", status_code=resp.status_code)

    @property
    def realtime_url(self) -> str:
        ws_base = self.base_url.replace("https://", "wss://").replace("http://", "ws://")
        return f"{ws_base}/realtime/v1/websocket?apikey={self.anon_key}&vsn=1.0.0"

"""
Métricas Prometheus da vitrine: requisições HTTP do shell, logs e eventos de checkout.
"""
import re
from time import time
from typing import Callable

from prometheus_client import Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Métricas de requisições HTTP
http_requests_total = Counter(
    'guarafood_http_requests_total',
    'Total de requisições HTTP',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'guarafood_http_request_duration_seconds',
    'Duração das requisições HTTP em segundos',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0]
)

http_errors_total = Counter(
    'guarafood_http_errors_total',
    'Total de erros HTTP',
    ['method', 'endpoint', 'status_code']
)

# Métricas de logs
log_messages_total = Counter(
    'guarafood_log_messages_total',
    'Total de mensagens de log',
    ['level']
)

# Métricas de checkout
pedidos_enviados_total = Counter(
    'guarafood_pedidos_enviados_total',
    'Pedidos enviados com sucesso, por forma de pagamento',
    ['forma_pagamento']
)

pix_confirmados_total = Counter(
    'guarafood_pix_confirmados_total',
    'Pagamentos Pix automáticos confirmados pelo feed de status'
)

pix_expirados_total = Counter(
    'guarafood_pix_expirados_total',
    'Contagens regressivas de Pix que chegaram a zero sem confirmação'
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware para coletar métricas Prometheus das requisições HTTP."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Ignora o endpoint de métricas para evitar loop
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = self._normalize_endpoint(request.url.path)
        start_time = time()

        try:
            response = await call_next(request)
        except Exception:
            http_requests_total.labels(method=method, endpoint=endpoint, status_code=500).inc()
            http_errors_total.labels(method=method, endpoint=endpoint, status_code=500).inc()
            raise

        status_code = response.status_code
        http_requests_total.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(time() - start_time)
        if status_code >= 400:
            http_errors_total.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
        return response

    def _normalize_endpoint(self, endpoint: str) -> str:
        """
        Normaliza endpoints removendo IDs para evitar alta cardinalidade.
        Ex: /api/pedidos/acompanhamento/3f2a... -> /api/pedidos/acompanhamento/{uuid}
        """
        endpoint = re.sub(r'/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', '/{uuid}', endpoint)
        endpoint = re.sub(r'/\d+', '/{id}', endpoint)
        return endpoint


def get_metrics():
    """Retorna as métricas no formato Prometheus."""
    return generate_latest()


def record_log(level: str):
    """Registra uma mensagem de log nas métricas."""
    log_messages_total.labels(level=level).inc()

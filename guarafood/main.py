from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST

from guarafood.api.cardapio.router.router import api_cardapio
from guarafood.api.carrinho.router.router import api_carrinho
from guarafood.api.notifications.router.router import router as notifications_router
from guarafood.api.pedidos.router.router import api_pedidos
from guarafood.config.settings import CORS_ALLOW_ALL, CORS_ORIGINS, ENABLE_DOCS
from guarafood.core.contexto import criar_contexto, definir_contexto, get_contexto
from guarafood.core.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    supabase_exception_handler,
    validation_exception_handler,
)
from guarafood.integrations.supabase.client import SupabaseError
from guarafood.utils.logger import logger
from guarafood.utils.prometheus_metrics import PrometheusMiddleware, get_metrics

# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="GuaraFood - Loja",
    version="1.0.0",
    description="Vitrine, carrinho, checkout com Pix e acompanhamento de pedidos",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    redirect_slashes=False,
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(SupabaseError, supabase_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# Middlewares (último adicionado = primeiro executado)
# ───────────────────────────
app.add_middleware(PrometheusMiddleware)

if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────────────────
# Startup / Shutdown
# ───────────────────────────
@app.on_event("startup")
async def startup():
    from guarafood.database.db_connection import inicializar_banco

    logger.info("Iniciando loja e armazenamento local...")
    inicializar_banco()

    contexto = criar_contexto()
    definir_contexto(contexto)
    await contexto.iniciar()
    logger.info("Loja iniciada com sucesso.")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Encerrando loja...")
    try:
        contexto = get_contexto()
    except RuntimeError:
        return
    await contexto.encerrar()
    definir_contexto(None)
    logger.info("Loja encerrada.")


# ───────────────────────────
# Rotas
# ───────────────────────────
@app.get("/")
async def root():
    return {"status": "ok", "message": "API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/metrics")
async def metrics():
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)


app.include_router(api_cardapio)
app.include_router(api_carrinho)
app.include_router(api_pedidos)
app.include_router(notifications_router)

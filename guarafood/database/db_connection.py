# guarafood/database/db_connection.py

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from guarafood.config.settings import LOCAL_DB_URL

# Base única para todos os models
Base = declarative_base()

logger = logging.getLogger(__name__)


def criar_engine(url: str = LOCAL_DB_URL):
    """
    Cria o engine do armazenamento local.
    SQLite em memória precisa de StaticPool para compartilhar a mesma conexão.
    """
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = criar_engine()

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def inicializar_banco(bind=None):
    """Cria as tabelas locais que ainda não existem."""
    # Importa os models para registrá-los no metadata
    from guarafood.api.armazenamento.models import model_armazenamento  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Armazenamento local inicializado.")



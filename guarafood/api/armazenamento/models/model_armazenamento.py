from sqlalchemy import Column, String, Text, DateTime

from guarafood.database.db_connection import Base
from guarafood.utils.database_utils import now_trimmed


class ArmazenamentoLocalModel(Base):
    """Entrada chave/valor do armazenamento local (valor em JSON serializado)."""

    __tablename__ = "armazenamento_local"

    chave = Column(String(200), primary_key=True)
    valor = Column(Text, nullable=False)
    atualizado_em = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)

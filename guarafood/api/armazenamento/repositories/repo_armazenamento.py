from sqlalchemy.orm import Session

from guarafood.api.armazenamento.models.model_armazenamento import ArmazenamentoLocalModel


class ArmazenamentoRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, chave: str):
        return self.db.get(ArmazenamentoLocalModel, chave)

    def upsert(self, chave: str, valor: str) -> ArmazenamentoLocalModel:
        obj = self.get(chave)
        if obj is None:
            obj = ArmazenamentoLocalModel(chave=chave, valor=valor)
            self.db.add(obj)
        else:
            obj.valor = valor
        self.db.commit()
        return obj

    def delete(self, chave: str) -> None:
        obj = self.get(chave)
        if obj is not None:
            self.db.delete(obj)
            self.db.commit()

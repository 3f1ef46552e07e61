from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from guarafood.api.armazenamento.services.service_armazenamento import (
    CHAVE_FAVORITOS,
    PREFIXO_PERFIL_CLIENTE,
    ArmazenamentoLocal,
)
from guarafood.api.cardapio.schemas.schema_cardapio import Restaurante
from guarafood.api.clientes.schemas.schema_cliente import FiltroRestaurantes, PerfilCliente
from guarafood.api.pedidos.schemas.schema_pedido import EnderecoCliente
from guarafood.utils.horarios_funcionamento import restaurante_esta_aberto
from guarafood.utils.logger import logger

CATEGORIA_TODOS = "Todos"
CATEGORIA_FAVORITOS = "Favoritos"


def _categorias_do_restaurante(restaurante: Restaurante) -> List[str]:
    if not restaurante.category:
        return []
    return [c.strip() for c in restaurante.category.split(",") if c.strip()]


class PerfilClienteService:
    def __init__(self, armazenamento: ArmazenamentoLocal):
        self.armazenamento = armazenamento

    @staticmethod
    def _chave(nome: str) -> str:
        return f"{PREFIXO_PERFIL_CLIENTE}{nome.strip().lower()}"

    def buscar(self, nome: str) -> Optional[PerfilCliente]:
        if not nome or not nome.strip():
            return None
        bruto = self.armazenamento.get_json(self._chave(nome))
        if not bruto:
            return None
        try:
            return PerfilCliente.model_validate(bruto)
        except ValidationError:
            logger.warning(f"[Clientes] Perfil salvo inválido para '{nome}', ignorando")
            return None

    def salvar(self, nome: str, telefone: str, endereco: Optional[EnderecoCliente]) -> None:
        perfil = PerfilCliente(phone=telefone, address=endereco)
        self.armazenamento.set_json(self._chave(nome), perfil.model_dump(mode="json"))


class FavoritosService:
    def __init__(self, armazenamento: ArmazenamentoLocal):
        self.armazenamento = armazenamento

    def listar(self) -> List[int]:
        bruto = self.armazenamento.get_json(CHAVE_FAVORITOS, [])
        if not isinstance(bruto, list):
            return []
        return [int(i) for i in bruto if isinstance(i, (int, str)) and str(i).isdigit()]

    def alternar(self, restaurante_id: int) -> bool:
        """Retorna True se o restaurante passou a ser favorito."""
        favoritos = self.listar()
        if restaurante_id in favoritos:
            favoritos.remove(restaurante_id)
            agora_favorito = False
        else:
            favoritos.append(restaurante_id)
            agora_favorito = True
        self.armazenamento.set_json(CHAVE_FAVORITOS, favoritos)
        return agora_favorito


def categorias_disponiveis(restaurantes: List[Restaurante]) -> List[str]:
    vistas: List[str] = []
    for r in restaurantes:
        for c in _categorias_do_restaurante(r):
            if c not in vistas:
                vistas.append(c)
    return [CATEGORIA_TODOS, CATEGORIA_FAVORITOS, *vistas]


def filtrar_restaurantes(
    restaurantes: List[Restaurante],
    filtro: FiltroRestaurantes,
    *,
    favoritos: List[int],
    agora: Optional[datetime] = None,
) -> List[Restaurante]:
    """
    - `Todos` (ou nenhuma categoria) não restringe por categoria
    - `Favoritos` exige que o restaurante esteja nos favoritos
    - demais categorias: basta casar uma
    """
    selecionadas = filtro.categorias
    todos = CATEGORIA_TODOS in selecionadas or not selecionadas
    quer_favoritos = CATEGORIA_FAVORITOS in selecionadas
    padrao = [c for c in selecionadas if c not in (CATEGORIA_TODOS, CATEGORIA_FAVORITOS)]
    busca = filtro.busca.strip().lower()

    resultado = []
    for r in restaurantes:
        cats = _categorias_do_restaurante(r)
        casa_padrao = not padrao or any(c in cats for c in padrao)
        casa_favoritos = not quer_favoritos or r.id in favoritos
        if not ((todos or casa_padrao) and casa_favoritos):
            continue
        if busca and busca not in r.name.lower():
            continue
        if filtro.apenas_abertos and not restaurante_esta_aberto(r, now=agora):
            continue
        resultado.append(r)
    return resultado

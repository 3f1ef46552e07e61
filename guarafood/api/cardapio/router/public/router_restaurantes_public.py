from typing import List

from fastapi import APIRouter, Depends, Path, Query

from guarafood.api.cardapio.schemas.schema_cardapio import (
    Adicional,
    Banner,
    CategoriaCardapio,
    Restaurante,
    VitrineRestaurante,
)
from guarafood.api.cardapio.services.service_cardapio import CardapioService
from guarafood.api.clientes.schemas.schema_cliente import FiltroRestaurantes
from guarafood.api.clientes.services import FavoritosService, filtrar_restaurantes
from guarafood.api.clientes.services.service_cliente import categorias_disponiveis
from guarafood.core.dependencies import get_cardapio_service, get_favoritos_service
from guarafood.utils.logger import logger

router = APIRouter(prefix="/api/cardapio/public/restaurantes", tags=["Public - Cardápio"])


@router.get("", response_model=List[Restaurante])
async def listar_restaurantes(
    busca: str = Query("", description="Trecho do nome do restaurante"),
    categorias: List[str] = Query([], description="Categorias selecionadas (Todos, Favoritos, ...)"),
    apenas_abertos: bool = Query(False),
    svc: CardapioService = Depends(get_cardapio_service),
    favoritos: FavoritosService = Depends(get_favoritos_service),
):
    restaurantes = await svc.listar_restaurantes()
    filtro = FiltroRestaurantes(busca=busca, categorias=categorias, apenas_abertos=apenas_abertos)
    logger.info(f"[Restaurantes] busca={busca!r} categorias={categorias} apenas_abertos={apenas_abertos}")
    return filtrar_restaurantes(restaurantes, filtro, favoritos=favoritos.listar())


@router.get("/categorias", response_model=List[str])
async def listar_categorias(svc: CardapioService = Depends(get_cardapio_service)):
    return categorias_disponiveis(await svc.listar_restaurantes())


@router.get("/banners", response_model=List[Banner])
async def listar_banners(svc: CardapioService = Depends(get_cardapio_service)):
    return await svc.listar_banners()


@router.get("/favoritos", response_model=List[int])
def listar_favoritos(favoritos: FavoritosService = Depends(get_favoritos_service)):
    return favoritos.listar()


@router.post("/{restaurante_id}/favorito")
def alternar_favorito(
    restaurante_id: int = Path(...),
    favoritos: FavoritosService = Depends(get_favoritos_service),
):
    return {"restaurante_id": restaurante_id, "favorito": favoritos.alternar(restaurante_id)}


@router.get("/{restaurante_id}", response_model=Restaurante)
async def obter_restaurante(
    restaurante_id: int = Path(...),
    svc: CardapioService = Depends(get_cardapio_service),
):
    return await svc.obter_restaurante(restaurante_id)


@router.get("/{restaurante_id}/cardapio", response_model=List[CategoriaCardapio])
async def obter_cardapio(
    restaurante_id: int = Path(...),
    incluir_ocultos: bool = Query(False, description="Inclui itens fora do dia da semana"),
    svc: CardapioService = Depends(get_cardapio_service),
):
    await svc.obter_restaurante(restaurante_id)
    return await svc.obter_cardapio(restaurante_id, incluir_ocultos=incluir_ocultos)


@router.get("/{restaurante_id}/vitrine", response_model=VitrineRestaurante)
async def obter_vitrine(
    restaurante_id: int = Path(...),
    svc: CardapioService = Depends(get_cardapio_service),
):
    await svc.obter_restaurante(restaurante_id)
    return await svc.obter_vitrine(restaurante_id)


@router.get("/{restaurante_id}/adicionais", response_model=List[Adicional])
async def listar_adicionais(
    restaurante_id: int = Path(...),
    svc: CardapioService = Depends(get_cardapio_service),
):
    return await svc.listar_adicionais(restaurante_id)

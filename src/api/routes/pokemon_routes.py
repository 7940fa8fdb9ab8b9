"""Pokemon Routes (Engine Layer)

HTTP Layer는 요청 검증 후 SearchOrchestrator로 위임하는 Translator 역할만 수행합니다.
모든 엔드포인트는 캐시 채우기 외의 부수 효과가 없는 읽기 전용 쿼리입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.clients import PokeApiClient
from src.core.config import settings
from src.core.logging import logger, sanitize_for_log
from src.engine import ConcurrencyPool, SearchOrchestrator
from src.schemas.pokemon_schema import (
    ExpandRequest,
    ExpandResponse,
    GenerationInfo,
    HydrateRequest,
    IndexItem,
    PokemonCard,
    PokemonDetailResponse,
    SearchResponse,
)
from src.services.impl.cache_service import CacheService

router = APIRouter(prefix="/api/v1/pokemon", tags=["pokemon"])

# 싱글톤 서비스 (프로세스당 하나)
_cache_service: Optional[CacheService] = None
_pool: Optional[ConcurrencyPool] = None
_orchestrator: Optional[SearchOrchestrator] = None


def get_cache_service() -> CacheService:
    """CacheService 싱글톤"""
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService(max_entries=settings.cache_max_entries)
    return _cache_service


def get_pool() -> ConcurrencyPool:
    """ConcurrencyPool 싱글톤"""
    global _pool
    if _pool is None:
        _pool = ConcurrencyPool(settings.pool_max_concurrent)
    return _pool


def get_orchestrator(
    cache_service: CacheService = Depends(get_cache_service),
    pool: ConcurrencyPool = Depends(get_pool),
) -> SearchOrchestrator:
    """SearchOrchestrator 싱글톤

    Engine Layer의 진입점을 제공합니다.
    """
    global _orchestrator
    if _orchestrator is None:
        client = PokeApiClient(cache=cache_service)
        _orchestrator = SearchOrchestrator(client=client, pool=pool)
    return _orchestrator


@router.get("/index", response_model=List[IndexItem])
async def index_all(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """전체 포켓몬 인덱스 (id 오름차순)"""
    entries = await orchestrator.index_all()
    return [IndexItem.model_validate(e, from_attributes=True) for e in entries]


@router.get("/generations/index", response_model=dict[str, GenerationInfo])
async def generation_index(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """종 이름 → 세대 매핑"""
    mapping = await orchestrator.generation_index()
    return {
        name: GenerationInfo.model_validate(ref, from_attributes=True)
        for name, ref in mapping.items()
    }


@router.get("/generations", response_model=List[GenerationInfo])
async def generations_list(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """세대 필터 선택지"""
    refs = await orchestrator.generations_list()
    return [GenerationInfo.model_validate(r, from_attributes=True) for r in refs]


@router.get("/types", response_model=List[str])
async def types_list(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """타입 필터 선택지"""
    return await orchestrator.types_list()


@router.post("/hydrate", response_model=List[PokemonCard])
async def hydrate(
    request: HydrateRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """이름 목록 → 카드 (id 오름차순)"""
    logger.info(f"[API] Hydrate request: {len(request.names)} names")
    items = await orchestrator.hydrate(request.names)
    return [PokemonCard.model_validate(i, from_attributes=True) for i in items]


@router.post("/expand", response_model=ExpandResponse)
async def expand_related(
    request: ExpandRequest,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """이름 목록 → 진화 계열 전체"""
    logger.info(f"[API] Expand request: {len(request.names)} names")
    names = await orchestrator.expand_related(request.names)
    return ExpandResponse(names=names)


@router.get("/search", response_model=SearchResponse)
async def search(
    q: Optional[str] = Query(None, max_length=100, description="이름 부분 문자열 또는 id (#25)"),
    type_name: Optional[str] = Query(None, alias="type", max_length=50, description="타입 필터"),
    generation: Optional[str] = Query(None, max_length=50, description="세대 필터 (이름 또는 id)"),
    cursor: int = Query(0, ge=0, description="오프셋"),
    limit: int = Query(settings.search_max_limit, ge=1, le=settings.search_max_limit),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """검색 API

    Flow:
        1. 세대 필터
        2. 이름/id 검색 + 진화 계열 확장
        3. 타입 필터
        4. 페이지네이션 + 현재 페이지 하이드레이트
    """
    logger.info(f"[API] Search request: q='{sanitize_for_log(q or '')}', cursor={cursor}")
    result = await orchestrator.search(
        q=q,
        type_name=type_name,
        generation=generation,
        cursor=cursor,
        limit=limit,
    )
    return SearchResponse.model_validate(result, from_attributes=True)


# NOTE: 고정 경로(/index, /types, /search ...) 뒤에 등록해야 매칭이 가려지지 않음
@router.get("/{name}", response_model=PokemonDetailResponse)
async def detail(name: str, orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """포켓몬 상세 (존재하지 않으면 404 NOT_FOUND)"""
    logger.info(f"[API] Detail request: name='{sanitize_for_log(name)}'")
    pokemon = await orchestrator.detail(name)
    return PokemonDetailResponse.model_validate(pokemon, from_attributes=True)

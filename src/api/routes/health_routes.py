"""헬스 체크 엔드포인트"""
from fastapi import APIRouter, Depends
from datetime import datetime

from src.schemas.pokemon_schema import HealthResponse
from src.services.impl.cache_service import CacheService
from src.api.routes.pokemon_routes import get_cache_service, get_pool
from src.engine import ConcurrencyPool
from src.core.config import settings
from src import __version__

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    cache_service: CacheService = Depends(get_cache_service),
    pool: ConcurrencyPool = Depends(get_pool),
):
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - 캐시 사용 현황
    - 동시성 풀 상태 (실행/대기 작업 수)
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        version=__version__,
        cache=cache_service.stats(),
        pool={
            "max_concurrent": pool.max_concurrent,
            "active": pool.active,
            "pending": pool.pending,
        },
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": settings.api_title,
        "version": __version__,
        "docs": "/docs"
    }

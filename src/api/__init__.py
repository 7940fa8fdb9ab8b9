"""API 엔드포인트 패키지 - export only."""

from .routes import health_router, pokemon_router, get_cache_service, get_pool, get_orchestrator

__all__ = ["health_router", "pokemon_router", "get_cache_service", "get_pool", "get_orchestrator"]

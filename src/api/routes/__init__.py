"""API routes package."""

from .pokemon_routes import router as pokemon_router, get_cache_service, get_pool, get_orchestrator
from .health_routes import router as health_router

__all__ = ["health_router", "pokemon_router", "get_cache_service", "get_pool", "get_orchestrator"]

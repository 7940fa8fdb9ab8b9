"""Services implementation package."""

from .cache_service import CacheEntry, CacheService

__all__ = ["CacheEntry", "CacheService"]

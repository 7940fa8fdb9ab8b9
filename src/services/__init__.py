"""비즈니스 로직 서비스 - export only."""

from .impl import CacheEntry, CacheService

__all__ = ["CacheEntry", "CacheService"]

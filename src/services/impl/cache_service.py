"""인메모리 TTL 캐시 서비스 - 캐싱 로직만 담당

- 만료 항목은 조회 시점에 제거합니다 (주기적 sweep 없음).
- LRU 상한(max_entries)을 넘으면 가장 오래 사용되지 않은 항목을 제거합니다.
- 단일 이벤트 루프에서만 사용하므로 락을 두지 않습니다.
"""
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from src.core.config import settings
from src.core.logging import logger


@dataclass
class CacheEntry:
    """캐시 항목

    Attributes:
        value: 저장된 값
        expires_at: 만료 시각 (clock 기준 절대값, 초)
    """

    value: Any
    expires_at: float


class CacheService:
    """프로세스 단위 인메모리 캐시"""

    def __init__(
        self,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_entries: LRU 상한 (없으면 settings.cache_max_entries)
            clock: 현재 시각(초)을 반환하는 함수 (테스트에서 주입)
        """
        self.max_entries = settings.cache_max_entries if max_entries is None else max_entries
        if self.max_entries <= 0:
            raise ValueError("max_entries must be positive")

        self._clock = clock
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: str) -> Optional[Any]:
        """
        캐시 조회

        Args:
            key: 캐시 키

        Returns:
            저장된 값. 없거나 만료되었으면 None (만료 항목은 즉시 제거)
        """
        entry = self._store.get(key)
        if entry is None:
            self.misses += 1
            return None

        if self._clock() > entry.expires_at:
            del self._store[key]
            self.misses += 1
            logger.debug(f"Cache expired for key: {key}")
            return None

        self._store.move_to_end(key)
        self.hits += 1
        return entry.value

    def set(self, key: str, value: Any, ttl_ms: int) -> None:
        """
        값 저장 (last-write-wins)

        Args:
            key: 캐시 키
            value: 저장할 값
            ttl_ms: 유효 시간 (ms). 0 이하는 "캐시하지 않음"이므로 호출자가 우회해야 함

        Raises:
            ValueError: ttl_ms <= 0
        """
        if ttl_ms <= 0:
            raise ValueError(f"ttl_ms must be positive (got {ttl_ms}); bypass the cache instead")

        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl_ms / 1000.0)
        self._store.move_to_end(key)

        while len(self._store) > self.max_entries:
            evicted_key, _ = self._store.popitem(last=False)
            self.evictions += 1
            logger.debug(f"Cache evicted (LRU) key: {evicted_key}")

    def delete(self, key: str) -> bool:
        """캐시 삭제"""
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """전체 삭제 (통계 포함)"""
        self._store.clear()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def stats(self) -> dict:
        """캐시 사용 현황"""
        return {
            "size": len(self._store),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }

    def __len__(self) -> int:
        return len(self._store)

"""PokeAPI Fetch Client - cache-aware, timeout-bound, single-retry JSON fetcher

PokeAPI와 통신하는 단일 진입점입니다.

1. TTL 캐시로 반복 호출/레이트 리밋 최소화
2. 하드 타임아웃으로 매달린 요청 차단
3. 일시적 실패(네트워크/5xx/429)에 대해 즉시 1회 재시도 (backoff/jitter 없음)
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional, Protocol

from src.core.config import settings
from src.core.exceptions import (
    UpstreamException,
    UpstreamNotFoundException,
    UpstreamParseException,
    UpstreamStatusException,
    UpstreamTimeoutException,
)
from src.core.logging import logger
from src.services.impl.cache_service import CacheService

from .http_client import get_shared_http_client

CACHE_KEY_PREFIX = "poke:"
BODY_SNIPPET_LENGTH = 200


class HttpTransport(Protocol):
    """fetch client가 기대하는 HTTP 전송 인터페이스"""

    async def get_text(self, url: str, *, timeout_s: float) -> tuple[int, str]:
        ...


class PokeApiClient:
    """PokeAPI JSON 클라이언트

    cache와 http transport는 생성자로 주입합니다 (테스트 격리 / 다중 인스턴스).
    """

    def __init__(
        self,
        cache: CacheService,
        http_client: Optional[HttpTransport] = None,
        base_url: Optional[str] = None,
    ):
        """
        Args:
            cache: 공유 캐시
            http_client: HTTP 전송 (없으면 프로세스 공유 curl_cffi 클라이언트)
            base_url: 상대 경로에 붙일 업스트림 베이스 URL
        """
        if cache is None:
            raise ValueError("cache must not be None")

        self.cache = cache
        self.http = http_client or get_shared_http_client()
        self.base_url = (base_url or settings.poke_api_base_url).rstrip("/")

    def resolve_url(self, path_or_url: str) -> str:
        """상대 경로("/pokemon/1")를 절대 URL로 변환 (절대 URL은 그대로)"""
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        if not path_or_url.startswith("/"):
            path_or_url = f"/{path_or_url}"
        return f"{self.base_url}{path_or_url}"

    async def fetch_json(
        self,
        path_or_url: str,
        *,
        ttl_ms: int = 0,
        timeout_ms: Optional[int] = None,
        retry_once: Optional[bool] = None,
    ) -> Any:
        """PokeAPI JSON 조회

        Args:
            path_or_url: "/pokemon/ditto" 같은 경로 또는 완전한 URL
            ttl_ms: 캐시 TTL (ms). 0이면 캐시를 읽지도 쓰지도 않음
            timeout_ms: 요청 타임아웃 (기본 settings.upstream_timeout_ms = 8000)
            retry_once: 실패 시 1회 재시도 여부 (기본 True)

        Returns:
            파싱된 JSON

        Raises:
            UpstreamException: 재시도 후에도 실패한 경우 (마지막 예외)
        """
        url = self.resolve_url(path_or_url)
        cache_key = f"{CACHE_KEY_PREFIX}{url}"
        timeout_ms = timeout_ms if timeout_ms is not None else settings.upstream_timeout_ms
        retry_once = settings.upstream_retry_once if retry_once is None else retry_once

        if ttl_ms > 0:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        try:
            data = await self._do_fetch(url, timeout_ms)
        except UpstreamException as e:
            if not retry_once:
                raise
            logger.info(f"[FETCH] Retrying once: {url} ({e.error_code})")
            data = await self._do_fetch(url, timeout_ms)

        if ttl_ms > 0:
            self.cache.set(cache_key, data, ttl_ms)
        return data

    async def _do_fetch(self, url: str, timeout_ms: int) -> Any:
        """단일 요청 (타임아웃 경과 시 요청 취소)"""
        timeout_s = timeout_ms / 1000.0
        try:
            status, text = await asyncio.wait_for(
                self.http.get_text(url, timeout_s=timeout_s),
                timeout=timeout_s,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"[FETCH] Timeout after {timeout_ms}ms: {url}")
            raise UpstreamTimeoutException(url, timeout_ms) from e

        if not 200 <= status < 300:
            body = (text or "")[:BODY_SNIPPET_LENGTH]
            logger.info(f"[FETCH] Non-2xx status: {status} {url}")
            if status == 404:
                raise UpstreamNotFoundException(url, body)
            raise UpstreamStatusException(url, status, body)

        try:
            return json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"[FETCH] Invalid JSON from {url}: {e}")
            raise UpstreamParseException(url, str(e)) from e

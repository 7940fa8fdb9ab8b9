"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (PokeAPI 전송, 시계)
- 전역 상태 초기화

금지:
- 실제 네트워크 호출
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from collections import Counter, defaultdict, deque
from pathlib import Path
from typing import Any

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.clients.poke_api_client import PokeApiClient  # noqa: E402
from src.engine import ConcurrencyPool, SearchOrchestrator  # noqa: E402
from src.services.impl.cache_service import CacheService  # noqa: E402
from tests.fixtures import BASE_URL, build_routes  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


class FakeClock:
    """수동으로 진행시키는 시계 (초 단위)"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePokeApi:
    """인메모리 PokeAPI 전송 (HttpTransport 구현)

    - routes: 절대 URL -> JSON dict (없는 URL은 404)
    - failures: URL별로 순서대로 소비되는 실패 (상태 코드 int 또는 예외)
    - delays: URL별 응답 지연 (초)
    - calls: URL별 호출 횟수
    """

    def __init__(self, routes: dict[str, Any]):
        self.routes = routes
        self.failures: dict[str, deque] = defaultdict(deque)
        self.delays: dict[str, float] = {}
        self.calls: Counter = Counter()

    def fail(self, path: str, *outcomes: Any) -> None:
        self.failures[self.url(path)].extend(outcomes)

    @staticmethod
    def url(path: str) -> str:
        return path if path.startswith("http") else f"{BASE_URL}{path}"

    def calls_to(self, path: str) -> int:
        return self.calls[self.url(path)]

    async def get_text(self, url: str, *, timeout_s: float) -> tuple[int, str]:
        _ = timeout_s
        self.calls[url] += 1

        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        else:
            await asyncio.sleep(0)

        queued = self.failures.get(url)
        if queued:
            outcome = queued.popleft()
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome, "upstream error"

        payload = self.routes.get(url)
        if payload is None:
            return 404, "Not Found"
        return 200, json.dumps(payload)


@pytest.fixture
def fake_api() -> FakePokeApi:
    return FakePokeApi(build_routes())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> CacheService:
    return CacheService(max_entries=1000, clock=clock)


@pytest.fixture
def pool() -> ConcurrencyPool:
    return ConcurrencyPool(4)


@pytest.fixture
def client(cache: CacheService, fake_api: FakePokeApi) -> PokeApiClient:
    return PokeApiClient(cache=cache, http_client=fake_api, base_url=BASE_URL)


@pytest.fixture
def orchestrator(client: PokeApiClient, pool: ConcurrencyPool) -> SearchOrchestrator:
    return SearchOrchestrator(client=client, pool=pool)

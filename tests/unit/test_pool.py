"""ConcurrencyPool / best_effort_map 유닛 테스트"""

from __future__ import annotations

import asyncio

import pytest

from src.core.exceptions import PokedexException, PoolJobException, UpstreamTimeoutException
from src.engine.pool import ConcurrencyPool, best_effort_map


class TestConcurrencyPoolInit:
    @pytest.mark.parametrize("value", [0, -1, 1.5, "3", True, None])
    def test_invalid_max_concurrent(self, value):
        """양의 정수가 아니면 생성 실패"""
        with pytest.raises(ValueError):
            ConcurrencyPool(value)

    def test_valid(self):
        pool = ConcurrencyPool(3)
        assert pool.max_concurrent == 3
        assert pool.active == 0
        assert pool.pending == 0


class TestConcurrencyPoolRun:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        pool = ConcurrencyPool(2)

        async def job():
            return 42

        assert await pool.run(job) == 42

    @pytest.mark.asyncio
    async def test_never_exceeds_limit(self):
        """동시 실행 수가 max_concurrent를 넘지 않음"""
        pool = ConcurrencyPool(3)
        in_flight = 0
        peak = 0

        async def job(i):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return i

        results = await asyncio.gather(*(pool.run(lambda i=i: job(i)) for i in range(20)))

        assert results == list(range(20))
        assert peak == 3
        assert pool.active == 0
        assert pool.pending == 0

    @pytest.mark.asyncio
    async def test_fifo_dispatch(self):
        """대기 작업은 제출 순서대로 시작"""
        pool = ConcurrencyPool(1)
        gate = asyncio.Event()
        started: list[int] = []

        async def job(i):
            started.append(i)
            if i == 0:
                await gate.wait()
            return i

        tasks = [asyncio.ensure_future(pool.run(lambda i=i: job(i))) for i in range(4)]
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert started == [0]
        assert pool.active == 1
        assert pool.pending == 3

        gate.set()
        await asyncio.gather(*tasks)
        assert started == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_failure_releases_slot(self):
        """실패한 작업도 슬롯을 반환하고 다른 작업에 영향 없음"""
        pool = ConcurrencyPool(1)

        async def boom():
            raise UpstreamTimeoutException("https://x/1", 10)

        async def ok():
            return "ok"

        failing = asyncio.ensure_future(pool.run(boom))
        succeeding = asyncio.ensure_future(pool.run(ok))

        with pytest.raises(UpstreamTimeoutException):
            await failing
        assert await succeeding == "ok"
        assert pool.active == 0

    @pytest.mark.asyncio
    async def test_foreign_exception_wrapped(self):
        """비표준 예외는 PoolJobException으로 감싸고 원인 보존"""
        pool = ConcurrencyPool(1)

        async def boom():
            raise KeyError("species")

        with pytest.raises(PoolJobException) as exc_info:
            await pool.run(boom)

        assert isinstance(exc_info.value, PokedexException)
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestBestEffortMap:
    @pytest.mark.asyncio
    async def test_failures_replaced_by_fallback(self):
        """실패 항목만 fallback, 순서 유지, 실패 상세 노출"""
        pool = ConcurrencyPool(2)

        async def fn(item):
            if item == "bad":
                raise UpstreamTimeoutException(f"https://x/{item}", 10)
            return item.upper()

        outcome = await best_effort_map(
            pool, ["a", "bad", "c"], fn, fallback=lambda item, exc: f"<{item}>"
        )

        assert outcome.results == ["A", "<bad>", "C"]
        assert outcome.failure_count == 1
        item, error = outcome.failures[0]
        assert item == "bad"
        assert isinstance(error, UpstreamTimeoutException)

    @pytest.mark.asyncio
    async def test_empty_items(self):
        pool = ConcurrencyPool(2)

        async def fn(item):
            return item

        outcome = await best_effort_map(pool, [], fn, fallback=lambda item, exc: None)
        assert outcome.results == []
        assert outcome.failure_count == 0

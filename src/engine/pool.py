"""Concurrency Pool - Bounded-parallelism job queue

asyncio.gather로 수백 개의 PokeAPI 요청을 동시에 보내면 429/타임아웃이
간헐적으로 발생합니다. ConcurrencyPool은 동시에 실행되는 작업 수를
max_concurrent 이하로 제한합니다.

- 디스패치 순서: FIFO (완료 순서는 보장하지 않음)
- 작업 실패는 해당 슬롯만 해제하며 다른 작업에 영향 없음
- 취소/풀 단위 타임아웃 없음 (타임아웃은 fetch client 책임)
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Iterable, TypeVar

from src.core.exceptions import PokedexException, PoolJobException
from src.core.logging import logger

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class PoolJob:
    """큐에 대기 중인 작업 (코루틴 팩토리 + 결과 future)"""

    fn: Callable[[], Awaitable[Any]]
    future: asyncio.Future


def _normalize_error(exc: Exception) -> PokedexException:
    """작업 예외를 PokedexException 계열로 통일"""
    if isinstance(exc, PokedexException):
        return exc
    wrapped = PoolJobException(f"{type(exc).__name__}: {exc}")
    wrapped.__cause__ = exc
    return wrapped


class ConcurrencyPool:
    """동시 실행 수 제한 작업 풀

    Usage:
        pool = ConcurrencyPool(10)
        data = await pool.run(lambda: client.fetch_json("/pokemon/25"))
    """

    def __init__(self, max_concurrent: int):
        """
        Args:
            max_concurrent: 동시에 실행 가능한 최대 작업 수 (양의 정수)

        Raises:
            ValueError: max_concurrent가 양의 정수가 아닌 경우
        """
        if not isinstance(max_concurrent, int) or isinstance(max_concurrent, bool) or max_concurrent <= 0:
            raise ValueError(f"max_concurrent must be a positive integer: {max_concurrent}")

        self.max_concurrent = max_concurrent
        self._active = 0
        self._queue: deque[PoolJob] = deque()
        self._tasks: set[asyncio.Task] = set()

    @property
    def active(self) -> int:
        """현재 실행 중인 작업 수"""
        return self._active

    @property
    def pending(self) -> int:
        """대기 중인 작업 수"""
        return len(self._queue)

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        """작업을 큐에 넣고 그 결과를 기다림

        Args:
            fn: 인자 없는 코루틴 팩토리

        Returns:
            fn의 결과

        Raises:
            PokedexException: fn이 던진 예외 (비표준 예외는 PoolJobException으로 감쌈)
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        self._queue.append(PoolJob(fn=fn, future=future))
        self._dispatch()
        return await future

    def _dispatch(self) -> None:
        """여유 슬롯이 있는 만큼 대기 작업을 순서대로 실행"""
        while self._active < self.max_concurrent and self._queue:
            job = self._queue.popleft()
            self._active += 1
            task = asyncio.ensure_future(self._execute(job))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _execute(self, job: PoolJob) -> None:
        try:
            result = await job.fn()
        except asyncio.CancelledError:
            if not job.future.done():
                job.future.cancel()
            raise
        except Exception as e:
            if not job.future.done():
                job.future.set_exception(_normalize_error(e))
        else:
            if not job.future.done():
                job.future.set_result(result)
        finally:
            self._active -= 1
            self._dispatch()


@dataclass
class BatchOutcome(Generic[R]):
    """best_effort_map 결과

    Attributes:
        results: 입력 순서대로의 결과 (실패 항목은 fallback 값)
        failures: (입력 항목, 예외) 목록
    """

    results: list[R] = field(default_factory=list)
    failures: list[tuple[Any, Exception]] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)


async def best_effort_map(
    pool: ConcurrencyPool,
    items: Iterable[T],
    fn: Callable[[T], Awaitable[R]],
    fallback: Callable[[T, Exception], R],
    label: str = "batch",
) -> BatchOutcome[R]:
    """배치의 각 항목에 fn을 적용하되, 실패한 항목은 fallback 값으로 대체

    한 항목의 실패가 배치 전체를 중단시키지 않습니다.

    Args:
        pool: 실행에 사용할 풀
        items: 입력 항목
        fn: 항목별 비동기 작업
        fallback: 실패 시 대체 값을 만드는 함수 (item, exc) -> R
        label: 로그용 배치 이름

    Returns:
        BatchOutcome: 결과 + 실패 상세
    """
    item_list = list(items)

    async def _attempt(item: T) -> tuple[R, Exception | None]:
        try:
            return await pool.run(lambda: fn(item)), None
        except PokedexException as e:
            return fallback(item, e), e

    pairs = await asyncio.gather(*(_attempt(item) for item in item_list))

    outcome: BatchOutcome[R] = BatchOutcome()
    for item, (value, error) in zip(item_list, pairs):
        outcome.results.append(value)
        if error is not None:
            outcome.failures.append((item, error))

    if outcome.failures:
        logger.warning(
            f"[POOL] {label}: {outcome.failure_count}/{len(item_list)} items degraded to fallback "
            f"({', '.join(f'{item}: {type(err).__name__}' for item, err in outcome.failures[:5])})"
        )
    return outcome

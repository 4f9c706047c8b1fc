"""Ordered, bounded concurrency for independent per-file/per-page work."""

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def map_ordered(
    fn: Callable[[T], Awaitable[R]],
    items: Sequence[T],
    max_workers: int = 1,
) -> list[R]:
    """
    Run ``fn`` over ``items`` with at most ``max_workers`` in flight.

    Results are returned by input index, never by completion order. The
    first failure propagates once every started task has settled.
    """
    if max_workers <= 1:
        results = []
        for item in items:
            results.append(await fn(item))
        return results

    semaphore = asyncio.Semaphore(max_workers)

    async def run(item: T) -> R:
        async with semaphore:
            return await fn(item)

    outcomes = await asyncio.gather(
        *(run(item) for item in items), return_exceptions=True
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)

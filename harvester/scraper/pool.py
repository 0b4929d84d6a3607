"""Bounded worker pool shared by every page fetch of a pipeline run.

At most ``capacity`` units run at once across the whole pool, however many
sections submit work. Results come back in submission order.

Example:
    >>> pool = WorkerPool(capacity=10)
    >>> pages = await pool.map(scrape_page, range(total_pages))
    >>> pool.shutdown()
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from harvester.utils.logger import get_logger

from .exceptions import PoolClosedError

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class WorkerPool:
    """
    Semaphore-bounded scheduler for coroutine units.

    Attributes:
        capacity: Maximum number of units executing concurrently.
        active: Units executing right now.
        peak: Highest value ``active`` has reached.
        completed: Units that have finished, successfully or not.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError(f"Pool capacity must be at least 1, got {capacity}")

        self.capacity = capacity
        self.active = 0
        self.peak = 0
        self.completed = 0
        self._closed = False
        self._semaphore: Optional[asyncio.Semaphore] = None

    @property
    def closed(self) -> bool:
        return self._closed

    def _get_semaphore(self) -> asyncio.Semaphore:
        # Created lazily so the pool can be built outside a running loop
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.capacity)
        return self._semaphore

    async def submit(self, func: Callable[..., Awaitable[R]], *args: Any) -> R:
        """
        Run one unit under the pool bound and return its result.

        Raises:
            PoolClosedError: If the pool has been shut down.
        """
        if self._closed:
            raise PoolClosedError("Cannot submit work to a pool that has been shut down")

        async with self._get_semaphore():
            self.active += 1
            self.peak = max(self.peak, self.active)
            try:
                return await func(*args)
            finally:
                self.active -= 1
                self.completed += 1

    async def map(self, func: Callable[[T], Awaitable[R]], items: Iterable[T]) -> list[R]:
        """
        Submit one unit per item and wait for all of them.

        The returned list follows the order of ``items``, not completion
        order. An exception raised by a unit propagates after every unit
        has finished; units that must not fail should return an error value.

        Raises:
            PoolClosedError: If the pool has been shut down.
        """
        if self._closed:
            raise PoolClosedError("Cannot submit work to a pool that has been shut down")

        units = [self.submit(func, item) for item in items]
        results = await asyncio.gather(*units, return_exceptions=True)

        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    def shutdown(self) -> None:
        """Refuse further submissions. Units already running are unaffected."""
        if not self._closed:
            self._closed = True
            logger.debug(
                f"Worker pool shut down after {self.completed} units (peak concurrency {self.peak}/{self.capacity})"
            )

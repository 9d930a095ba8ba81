"""Bounded concurrency over groups of awaitable calls."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclasses.dataclass
class Outcome(Generic[R]):
    """Result of one item: either ``value`` or ``error`` is set."""

    index: int
    value: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GroupedExecutor:
    """Run a worker over items, at most ``width`` calls in flight.

    Items are split into consecutive groups of ``width``. A group's calls run
    concurrently and the next group starts only once every call of the
    current group has settled. Failures stay attached to their item.
    """

    def __init__(self, width: int, timeout: Optional[float] = None, label: str = "items"):
        if width < 1:
            raise ValueError(f"width must be >= 1, got {width}")
        self.width = width
        self.timeout = timeout
        self.label = label

    async def _call(self, worker: Callable[[T], Awaitable[R]], item: T) -> R:
        if self.timeout:
            return await asyncio.wait_for(worker(item), timeout=self.timeout)
        return await worker(item)

    async def run(
        self,
        items: Sequence[T],
        worker: Callable[[T], Awaitable[R]],
    ) -> List[Outcome[R]]:
        outcomes: List[Outcome[R]] = []
        total_groups = (len(items) + self.width - 1) // self.width

        for start in range(0, len(items), self.width):
            group = items[start:start + self.width]
            results = await asyncio.gather(
                *(self._call(worker, item) for item in group),
                return_exceptions=True,
            )
            for offset, result in enumerate(results):
                # cancellation and interpreter exits are never item failures
                if isinstance(result, BaseException) and not isinstance(result, Exception):
                    raise result
                if isinstance(result, Exception):
                    outcomes.append(Outcome(index=start + offset, error=result))
                else:
                    outcomes.append(Outcome(index=start + offset, value=result))

            logger.debug(
                f"Settled {self.label} group {start // self.width + 1}/{total_groups} "
                f"({min(start + self.width, len(items))}/{len(items)})"
            )

        return outcomes

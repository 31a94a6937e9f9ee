"""
Hit scheduling strategies using Strategy Pattern.

A redirect must not wait for its click counter to be written. The registry
hands the increment to a HitScheduler, which decides when it runs:

- BackgroundHitScheduler: detached asyncio task (production)
- InlineHitScheduler: awaited on the spot (tests, deterministic counters)

Either way the increment is best effort. Failures are logged, never raised
to the caller that scheduled it.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Set


logger = logging.getLogger(__name__)

HitJob = Callable[[], Awaitable[None]]


class HitScheduler(ABC):
    """
    Abstract base class for hit schedulers.

    Callers get no ordering or completion guarantee from schedule().
    """

    @abstractmethod
    async def schedule(self, slug: str, job: HitJob) -> None:
        """
        Run job at some point, without surfacing its errors.

        Args:
            slug: Slug the hit belongs to (used for logging only)
            job: Zero-argument coroutine function performing the increment
        """
        pass

    @abstractmethod
    async def drain(self, timeout: Optional[float] = None) -> int:
        """
        Wait for pending jobs, cancelling whatever is left after timeout.

        Returns:
            Number of jobs abandoned (cancelled)
        """
        pass

    @staticmethod
    async def _run(slug: str, job: HitJob) -> None:
        try:
            await job()
        except asyncio.CancelledError:
            logger.warning("Click increment for %s abandoned", slug)
            raise
        except Exception:
            logger.exception("Failed to increment click counter for %s", slug)


class BackgroundHitScheduler(HitScheduler):
    """
    Fire-and-forget scheduler backed by asyncio tasks.

    Pending tasks are kept in a set so they are not garbage collected
    mid-flight, and so shutdown can drain them.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def schedule(self, slug: str, job: HitJob) -> None:
        task = asyncio.create_task(self._run(slug, job), name=f"hit:{slug}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self, timeout: Optional[float] = None) -> int:
        if not self._tasks:
            return 0

        done, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning("Abandoned %d pending click increments", len(pending))
        return len(pending)


class InlineHitScheduler(HitScheduler):
    """
    Scheduler that runs the job before schedule() returns.

    Used in tests so a resolve is immediately visible in the counter.
    Also counts jobs, so tests can check whether an increment was attempted.
    """

    def __init__(self):
        self.scheduled = 0

    async def schedule(self, slug: str, job: HitJob) -> None:
        self.scheduled += 1
        await self._run(slug, job)

    async def drain(self, timeout: Optional[float] = None) -> int:
        return 0

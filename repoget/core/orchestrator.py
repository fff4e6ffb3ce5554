"""
Orchestrator driving a target stream through the getter, either one
target at a time or with bounded concurrency.
"""

import asyncio
from typing import List, Optional

from ..infrastructure.error_handler import FetchError, InputReadError
from ..infrastructure.logger import logger
from ..models import FetchResult, FetchSummary, PARALLEL_WIDTH
from .getter import Getter
from .input_stream import TargetStream



####
##      FETCH ORCHESTRATOR
#####
class FetchOrchestrator:
    """
    Runs the getter over every target of a stream.

    Sequential mode stops at the first failure and raises it. Parallel mode
    keeps at most ``max_concurrent`` fetches in flight, logs failures and
    carries on; only a broken input stream fails a parallel run.
    """

    def __init__(
        self,
        getter: Getter,
        parallel: bool = False,
        max_concurrent: int = PARALLEL_WIDTH
    ):
        if max_concurrent <= 0:
            raise ValueError("max_concurrent must be positive")

        self.getter = getter
        self.parallel = parallel
        self.max_concurrent = max_concurrent
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._active_tasks: List[asyncio.Task] = []

    async def run(self, stream: TargetStream) -> FetchSummary:
        """
        Consume ``stream`` completely.

        Args:
            stream: Targets to fetch

        Returns:
            FetchSummary of the run

        Raises:
            FetchError: First failure, in sequential mode
            InputReadError: If the stream reported a read error
        """
        mode = "parallel" if self.parallel else "sequential"
        logger.debug(f"Starting {mode} fetch run")

        summary = FetchSummary()
        if self.parallel:
            await self._run_parallel(stream, summary)
        else:
            await self._run_sequential(stream, summary)

        if stream.error is not None:
            raise InputReadError("error occurred while reading input", stream.error)

        logger.debug(
            f"Fetch run finished: {summary.target_count} targets, "
            f"{len(summary.failures)} failed"
        )
        return summary

    async def _run_sequential(self, stream: TargetStream, summary: FetchSummary) -> None:
        while (target := await self._next_target(stream)) is not None:
            summary.record_target(target)
            summary.results.append(await self._fetch_one(target))

    async def _run_parallel(self, stream: TargetStream, summary: FetchSummary) -> None:
        try:
            while (target := await self._next_target(stream)) is not None:
                summary.record_target(target)
                # the slot is taken before launching, so reading waits for a free one
                await self._semaphore.acquire()
                self._active_tasks.append(asyncio.create_task(
                    self._fetch_and_release(target, summary)
                ))
        finally:
            # no task outlives the run, even when reading the stream blew up
            if self._active_tasks:
                await asyncio.gather(*self._active_tasks)
            self._active_tasks.clear()

    async def _fetch_and_release(
        self,
        target: str,
        summary: FetchSummary
    ) -> Optional[FetchResult]:
        try:
            result = await self._fetch_one(target)
        except FetchError as e:
            logger.error(str(e))
            summary.failures[target] = str(e)
            return None
        finally:
            self._semaphore.release()

        summary.results.append(result)
        return result

    @staticmethod
    async def _next_target(stream: TargetStream) -> Optional[str]:
        """Read the next target in a worker thread; stdin reads block."""

        return await asyncio.to_thread(stream.advance)

    async def _fetch_one(self, target: str) -> FetchResult:
        """Fetch a single target in a worker thread."""

        return await asyncio.to_thread(self.getter.get, target)


__all__ = [
    "FetchOrchestrator",
]

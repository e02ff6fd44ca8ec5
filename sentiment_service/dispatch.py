"""
Runs blocking inference jobs on a worker pool so the event loop stays free.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from concurrent.futures import BrokenExecutor, ThreadPoolExecutor
from typing import TYPE_CHECKING, TypeVar

from sentiment_service.errors import AnalysisError, DispatchError

if TYPE_CHECKING:
    from sentiment_service.monitoring.metrics import MetricsCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlockingTaskDispatcher:
    """
    Bridges synchronous, CPU-bound jobs into async request handlers.

    Jobs run on a bounded ``ThreadPoolExecutor``. Once a job has started it
    runs to completion even if the awaiting coroutine is cancelled; the
    result is then discarded.
    """

    def __init__(self, max_workers: int = 4, metrics: "MetricsCollector | None" = None):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="inference"
        )
        self._metrics = metrics
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def submit(self, job: Callable[[], T]) -> T:
        """
        Run ``job`` on a worker thread and wait for its result.

        Raises:
            AnalysisError: Raised by the job itself, passed through unchanged
            DispatchError: If the pool is unavailable or the job fails unexpectedly
        """
        loop = asyncio.get_running_loop()
        try:
            future = loop.run_in_executor(self._executor, self._run, job)
        except RuntimeError as e:
            raise DispatchError(f"Worker pool unavailable: {str(e)}") from e

        try:
            return await future
        except BrokenExecutor as e:
            raise DispatchError(f"Worker pool broken: {str(e)}") from e

    def _run(self, job: Callable[[], T]) -> T:
        if self._metrics:
            self._metrics.job_started()
        start_time = time.perf_counter()
        try:
            return job()
        except AnalysisError:
            raise
        except Exception as e:
            logger.exception(f"Worker job failed: {str(e)}")
            raise DispatchError(f"Worker job failed: {str(e)}") from e
        finally:
            if self._metrics:
                self._metrics.job_finished(time.perf_counter() - start_time)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting jobs. With ``wait`` set, block until running jobs finish."""
        self._closed = True
        self._executor.shutdown(wait=wait)
        logger.info("Worker pool shut down")

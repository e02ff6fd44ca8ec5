"""
Exclusive-access guard for models that are not safe to share between threads.
"""

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from sentiment_service.monitoring.metrics import MetricsCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ModelHandle(Generic[T]):
    """
    Wraps one loaded model so that only one thread uses it at a time.

    The model is only reachable through ``acquire()``. Acquisition has no
    timeout: under contention callers wait until the holder releases it.
    When several handles are needed they must always be acquired in the
    same order (tokenizer before classifier).
    """

    def __init__(
        self, name: str, model: T, metrics: "MetricsCollector | None" = None
    ):
        self.name = name
        self._model = model
        self._lock = threading.Lock()
        self._metrics = metrics

    @contextmanager
    def acquire(self) -> Iterator[T]:
        """Block until the model is free and yield it for the duration of the block."""
        start_time = time.perf_counter()
        self._lock.acquire()
        try:
            wait = time.perf_counter() - start_time
            logger.debug(f"Acquired {self.name} after {wait:.4f}s")
            if self._metrics:
                self._metrics.record_lock_wait(self.name, wait)
            yield self._model
        finally:
            self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()

    def __repr__(self) -> str:
        return f"ModelHandle(name={self.name!r}, locked={self.locked()})"

"""
Unit tests for the exclusive model access guard.
"""

import threading
import time
from unittest.mock import Mock

import pytest

from sentiment_service.model.handle import ModelHandle


class TestModelHandle:
    """Test cases for ModelHandle."""

    def test_acquire_yields_model(self):
        model = object()
        handle = ModelHandle("tokenizer", model)

        with handle.acquire() as acquired:
            assert acquired is model
            assert handle.locked()

        assert not handle.locked()

    def test_released_on_exception(self):
        handle = ModelHandle("classifier", object())

        with pytest.raises(RuntimeError):
            with handle.acquire():
                raise RuntimeError("boom")

        assert not handle.locked()

    def test_released_on_early_return(self):
        handle = ModelHandle("classifier", [1, 2, 3])

        def first(items_handle):
            with items_handle.acquire() as items:
                for item in items:
                    return item

        assert first(handle) == 1
        assert not handle.locked()

    def test_access_is_exclusive(self):
        """Only one thread is inside the acquisition scope at a time."""
        handle = ModelHandle("classifier", object())
        active = 0
        max_active = 0
        counter_lock = threading.Lock()

        def worker():
            nonlocal active, max_active
            with handle.acquire():
                with counter_lock:
                    active += 1
                    max_active = max(max_active, active)
                time.sleep(0.005)
                with counter_lock:
                    active -= 1

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert max_active == 1

    def test_waiter_blocks_until_release(self):
        handle = ModelHandle("tokenizer", object())
        acquired = threading.Event()

        def waiter():
            with handle.acquire():
                acquired.set()

        with handle.acquire():
            thread = threading.Thread(target=waiter)
            thread.start()
            assert not acquired.wait(timeout=0.05)

        thread.join(timeout=1)
        assert acquired.is_set()

    def test_lock_wait_reported_to_metrics(self):
        metrics = Mock()
        handle = ModelHandle("tokenizer", object(), metrics)

        with handle.acquire():
            pass

        metrics.record_lock_wait.assert_called_once()
        name, wait = metrics.record_lock_wait.call_args.args
        assert name == "tokenizer"
        assert wait >= 0.0

    def test_repr(self):
        handle = ModelHandle("tokenizer", object())
        assert repr(handle) == "ModelHandle(name='tokenizer', locked=False)"

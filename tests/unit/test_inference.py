"""Test the latest-wins background inference worker."""

import threading
from typing import List

import pytest

from activitypy.processing import inference


def test_inference_worker_handles_items() -> None:
    """Test that a submitted item reaches the handler."""
    handled: List[int] = []
    worker = inference.InferenceWorker(handled.append)

    worker.submit(1)
    assert worker.drain(timeout=5)
    worker.submit(2)
    assert worker.drain(timeout=5)
    worker.close(timeout=5)

    assert handled == [1, 2]


def test_inference_worker_latest_wins() -> None:
    """Test that pending items are replaced while the handler is busy."""
    started = threading.Event()
    release = threading.Event()
    handled: List[int] = []

    def slow_handler(item: int) -> None:
        started.set()
        release.wait(timeout=5)
        handled.append(item)

    worker = inference.InferenceWorker(slow_handler)
    worker.submit(0)
    assert started.wait(timeout=5)
    for item in range(1, 6):
        worker.submit(item)
    release.set()

    assert worker.drain(timeout=5)
    worker.close(timeout=5)

    assert handled == [0, 5]
    assert worker.dropped == 4


def test_inference_worker_survives_handler_errors() -> None:
    """Test that a failing handler does not stop the worker."""
    handled: List[int] = []

    def flaky_handler(item: int) -> None:
        if item == 1:
            raise RuntimeError("inference failed")
        handled.append(item)

    worker = inference.InferenceWorker(flaky_handler)
    worker.submit(1)
    assert worker.drain(timeout=5)
    worker.submit(2)
    assert worker.drain(timeout=5)
    worker.close(timeout=5)

    assert handled == [2]


def test_inference_worker_submit_after_close() -> None:
    """Test error when submitting to a closed worker."""
    worker = inference.InferenceWorker(lambda item: None)
    worker.close(timeout=5)

    with pytest.raises(RuntimeError, match="closed inference worker"):
        worker.submit(1)

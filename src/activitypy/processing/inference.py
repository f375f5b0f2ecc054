"""Background inference with a single latest-wins slot."""

import threading
from typing import Callable, Generic, Optional, TypeVar

from activitypy.core import config

logger = config.get_logger()

T = TypeVar("T")


class InferenceWorker(Generic[T]):
    """Runs a handler on a background thread, always on the newest submitted item.

    The worker holds at most one pending item. Submitting while an item is pending
    replaces it, so a slow handler never backs up the producer; stale items are
    dropped instead of queued. An item that is already being handled runs to
    completion.
    """

    def __init__(self, handler: Callable[[T], None], name: str = "inference") -> None:
        """Start the worker thread.

        Args:
            handler: Called with each item taken from the slot. Exceptions are
                logged and do not stop the worker.
            name: Name of the worker thread.
        """
        self._handler = handler
        self._condition = threading.Condition()
        self._pending: Optional[T] = None
        self._has_pending = False
        self._busy = False
        self._closed = False
        self.dropped = 0
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def submit(self, item: T) -> None:
        """Place an item in the slot, replacing any item not yet started.

        Raises:
            RuntimeError: If the worker has been closed.
        """
        with self._condition:
            if self._closed:
                raise RuntimeError("Cannot submit to a closed inference worker.")
            if self._has_pending:
                self.dropped += 1
            self._pending = item
            self._has_pending = True
            self._condition.notify_all()

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait until no item is pending or being handled.

        Args:
            timeout: Maximum number of seconds to wait, None waits indefinitely.

        Returns:
            True if the worker is idle, False if the timeout expired first.
        """
        with self._condition:
            return self._condition.wait_for(
                lambda: not self._has_pending and not self._busy, timeout=timeout
            )

    def close(self, timeout: Optional[float] = None) -> None:
        """Stop the worker once the current item, if any, is handled.

        A pending item that has not started is discarded.
        """
        with self._condition:
            self._closed = True
            self._pending = None
            self._has_pending = False
            self._condition.notify_all()
        self._thread.join(timeout)

    def _run(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._has_pending or self._closed)
                if self._closed:
                    return
                item = self._pending
                self._pending = None
                self._has_pending = False
                self._busy = True
            try:
                self._handler(item)  # type: ignore[arg-type]
            except Exception:
                logger.exception("Inference handler failed.")
            finally:
                with self._condition:
                    self._busy = False
                    self._condition.notify_all()

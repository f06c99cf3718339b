"""Completion callbacks and the contexts they are delivered on.

A submission's network call runs on a worker thread; its outcome is handed
to a Notifier, which decides where the callback actually runs:

- InlineNotifier: on the worker thread itself.
- ThreadNotifier: on one dedicated notification thread, serially.
- QueueNotifier: on whichever thread calls run_pending().
"""

import logging
import queue
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Callback:
    """Receives the outcome of one submission. Override either method."""

    def success(self):
        pass

    def failure(self, error: str):
        pass


class FunctionCallback(Callback):
    """Adapts plain functions to the Callback interface."""

    def __init__(
        self,
        on_success: Optional[Callable[[], None]] = None,
        on_failure: Optional[Callable[[str], None]] = None,
    ):
        self._on_success = on_success
        self._on_failure = on_failure

    def success(self):
        if self._on_success:
            self._on_success()

    def failure(self, error: str):
        if self._on_failure:
            self._on_failure(error)


def run_safely(fn: Callable[[], None]):
    """Run a notification, logging instead of propagating caller exceptions."""
    try:
        fn()
    except Exception:
        logger.exception("Log callback raised")


class Notifier:
    """A context that completion callbacks are posted to."""

    def post(self, fn: Callable[[], None]):
        raise NotImplementedError

    def close(self):
        pass


class InlineNotifier(Notifier):
    def post(self, fn: Callable[[], None]):
        run_safely(fn)


class ThreadNotifier(Notifier):
    """Runs callbacks one at a time on a single daemon thread."""

    def __init__(self, name: str = "loggly-notifier"):
        self._queue: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    @property
    def thread(self) -> threading.Thread:
        return self._thread

    def post(self, fn: Callable[[], None]):
        with self._lock:
            closed = self._closed
            if not closed:
                self._queue.put(fn)
        if closed:
            # Late completions still get delivered, outside the lock
            run_safely(fn)

    def close(self, timeout: float | None = 5.0):
        """Deliver everything already posted, then stop the thread."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            # Poison pill
            self._queue.put(None)
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout=timeout)

    def _run(self):
        while True:
            fn = self._queue.get()
            if fn is None:
                return
            run_safely(fn)


class QueueNotifier(Notifier):
    """Holds callbacks until the host thread pumps them with run_pending()."""

    def __init__(self):
        self._queue: queue.Queue = queue.Queue()

    def post(self, fn: Callable[[], None]):
        self._queue.put(fn)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self, timeout: float | None = None) -> int:
        """Run queued callbacks on the calling thread. Returns how many ran.

        With a timeout, waits up to that long for the first callback.
        """
        ran = 0
        block = timeout is not None
        while True:
            try:
                fn = self._queue.get(block=block, timeout=timeout)
            except queue.Empty:
                return ran
            block = False
            run_safely(fn)
            ran += 1

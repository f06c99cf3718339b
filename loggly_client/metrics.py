"""Thread-safe submission metrics and periodic reporting."""

import logging
import threading

logger = logging.getLogger(__name__)


class Metrics:
    """Counts submission outcomes per reporting window.

    Latency is kept as a running sum and maximum, so memory use does not
    grow with the number of events when nobody reads the window.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._reset_window()
        self._total_sent = 0
        self._total_failed = 0

    def _reset_window(self):
        self._sent = 0
        self._failed = 0
        self._dropped = 0
        self._latency_sum = 0.0
        self._latency_max = 0.0

    def record_sent(self, latency_ms: float):
        """Record a successful submission with its latency in milliseconds."""
        with self._lock:
            self._sent += 1
            self._total_sent += 1
            self._latency_sum += latency_ms
            if latency_ms > self._latency_max:
                self._latency_max = latency_ms

    def record_failed(self):
        with self._lock:
            self._failed += 1
            self._total_failed += 1

    def record_dropped(self):
        """Record input that was discarded before dispatch."""
        with self._lock:
            self._dropped += 1

    @property
    def total_sent(self) -> int:
        with self._lock:
            return self._total_sent

    @property
    def total_failed(self) -> int:
        with self._lock:
            return self._total_failed

    def _window(self) -> dict:
        return {
            "sent": self._sent,
            "failed": self._failed,
            "dropped": self._dropped,
            "avg_latency_ms": self._latency_sum / self._sent if self._sent else 0.0,
            "max_latency_ms": self._latency_max,
        }

    def snapshot(self) -> dict:
        """Read the current window without resetting it."""
        with self._lock:
            return self._window()

    def snapshot_and_reset(self) -> dict:
        """Atomically read the current window and start a new one."""
        with self._lock:
            snapshot = self._window()
            self._reset_window()
            return snapshot


class MetricsReporter:
    """Background thread that periodically logs metrics summaries."""

    def __init__(
        self,
        metrics: Metrics,
        interval: float,
        shutdown_event: threading.Event,
    ):
        self._metrics = metrics
        self._interval = interval
        self._shutdown = shutdown_event
        self._thread: threading.Thread | None = None

    def start(self):
        self._thread = threading.Thread(target=self._report_loop, daemon=True)
        self._thread.start()

    def stop(self):
        """Signal the reporter to stop and wait for it."""
        self._shutdown.set()
        if self._thread:
            self._thread.join(timeout=5)

    def _report_loop(self):
        while not self._shutdown.is_set():
            self._shutdown.wait(self._interval)
            if self._shutdown.is_set():
                break

            snapshot = self._metrics.snapshot_and_reset()
            logger.info(
                "[metrics] sent=%d failed=%d dropped=%d "
                "avg_latency=%.1fms max_latency=%.1fms",
                snapshot["sent"],
                snapshot["failed"],
                snapshot["dropped"],
                snapshot["avg_latency_ms"],
                snapshot["max_latency_ms"],
            )

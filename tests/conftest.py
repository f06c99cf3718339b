import threading

import pytest

from loggly_client.callbacks import Callback, InlineNotifier
from loggly_client.client import LogglyClient
from loggly_client.response import LogglyResponse
from loggly_client.server import IngestServer
from loggly_client.transport import TransportError


class FakeTransport:
    """Records posts instead of sending them; fails when told to."""

    def __init__(self, error: Exception | None = None, delay: float = 0.0):
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str, str]] = []
        self.closed = False
        self._lock = threading.Lock()

    def post(self, token, tags, message):
        with self._lock:
            self.calls.append((token, tags, message))
        if self.delay:
            threading.Event().wait(self.delay)
        if self.error is not None:
            raise self.error
        return LogglyResponse("ok")

    def close(self):
        self.closed = True


class RecordingCallback(Callback):
    """Counts outcomes and remembers the thread each one ran on."""

    def __init__(self):
        self._lock = threading.Lock()
        self.successes = 0
        self.failures: list[str] = []
        self.threads: list[threading.Thread] = []
        self.done = threading.Event()

    def success(self):
        with self._lock:
            self.successes += 1
            self.threads.append(threading.current_thread())
        self.done.set()

    def failure(self, error: str):
        with self._lock:
            self.failures.append(error)
            self.threads.append(threading.current_thread())
        self.done.set()

    @property
    def calls(self) -> int:
        with self._lock:
            return self.successes + len(self.failures)


@pytest.fixture(autouse=True)
def reset_client():
    """Each test starts without a process-wide client."""
    LogglyClient.close_instance()
    yield
    LogglyClient.close_instance()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def failing_transport():
    return FakeTransport(error=TransportError("HTTP 503: unavailable", status_code=503))


@pytest.fixture
def recorder():
    return RecordingCallback()


@pytest.fixture
def inline_notifier():
    return InlineNotifier()


@pytest.fixture
def ingest_server():
    """Real HTTP ingestion endpoint on an ephemeral port."""
    server = IngestServer("127.0.0.1", 0)
    server.start()
    yield server
    server.stop()

"""Loggly client: process-wide instance, tags, and asynchronous submission."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, Optional

from loggly_client.callbacks import Callback, Notifier, ThreadNotifier
from loggly_client.config import ClientConfig
from loggly_client.joiner import join_messages
from loggly_client.metrics import Metrics
from loggly_client.response import LogglyResponse
from loggly_client.tags import TagStore
from loggly_client.transport import HttpTransport, TransportError

logger = logging.getLogger(__name__)


class LogglyClient:
    """Sends log events to Loggly without blocking the caller.

    Obtain the instance with get_instance(token). Each log()/log_bulk() call
    is one request on a worker thread; its callback is delivered exactly once
    on the notifier, which defaults to a dedicated notification thread.
    """

    _instance: Optional["LogglyClient"] = None
    _instance_lock = threading.Lock()

    @classmethod
    def get_instance(
        cls,
        token: str,
        config: ClientConfig | None = None,
        transport=None,
        notifier: Notifier | None = None,
    ) -> "LogglyClient":
        """Return the client for *token*, replacing any client for another token.

        Asking again with the same token returns the existing client and its
        tags; the other arguments are only used when a client is created.
        """
        if not token:
            raise ValueError("token cannot be empty")

        with cls._instance_lock:
            previous = cls._instance
            if previous is not None and previous.token == token:
                return previous
            instance = cls(token, config, transport, notifier)
            cls._instance = instance

        if previous is not None:
            logger.info("Token changed, replacing Loggly client")
            previous._retire()
        return instance

    @classmethod
    def close_instance(cls):
        """Close and forget the current instance, if any."""
        with cls._instance_lock:
            instance = cls._instance
            cls._instance = None
        if instance is not None:
            instance.close()

    def __init__(
        self,
        token: str,
        config: ClientConfig | None = None,
        transport=None,
        notifier: Notifier | None = None,
    ):
        if not token:
            raise ValueError("token cannot be empty")
        config = config or ClientConfig()

        self._token = token
        self._tags = TagStore()
        self._tags.add_tags(config.tags)
        self._metrics = Metrics()

        self._owns_transport = transport is None
        self._transport = transport or HttpTransport(config.endpoint, config.timeout)
        self._owns_notifier = notifier is None
        self._notifier = notifier or ThreadNotifier()
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_workers, thread_name_prefix="loggly"
        )
        self._close_lock = threading.Lock()
        self._closed = False

    @property
    def token(self) -> str:
        return self._token

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def add_tag(self, name: str, value: str):
        self._tags.add_tag(name, value)

    def add_tags(self, tags: dict):
        self._tags.add_tags(tags)

    def remove_tag(self, name: str):
        self._tags.remove_tag(name)

    @property
    def tags(self) -> str:
        """Tags as sent on the wire."""
        return self._tags.render()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def log(self, message: Optional[str], callback: Callback | None = None) -> Future | None:
        """Post one message asynchronously.

        A None message is dropped: no request and no callback. Otherwise
        returns a Future that resolves to the LogglyResponse or raises
        TransportError; the callback gets success() or failure(error).
        """
        if message is None:
            logger.debug("Dropping None message")
            self._metrics.record_dropped()
            return None

        tags = self._tags.render()
        try:
            return self._executor.submit(self._send, tags, message, callback)
        except RuntimeError:
            # Executor refuses work after shutdown
            logger.warning("Client for token %s... is closed, dropping message", self._token[:4])
            self._metrics.record_dropped()
            return None

    def log_bulk(
        self, messages: Optional[Iterable[Optional[str]]], callback: Callback | None = None
    ) -> Future | None:
        """Post several messages in a single request.

        Line breaks inside each message are kept within its event. A None
        collection, or one with no non-empty messages, is dropped silently.
        """
        if messages is None:
            logger.debug("Dropping None message collection")
            self._metrics.record_dropped()
            return None
        if isinstance(messages, str):
            # A bare string is one message, not a sequence of characters
            messages = [messages]

        parcel = join_messages(messages)
        if not parcel:
            logger.debug("Dropping empty bulk payload")
            self._metrics.record_dropped()
            return None

        return self.log(parcel, callback)

    def _send(self, tags: str, message: str, callback: Callback | None) -> LogglyResponse:
        """Worker-thread half of a submission."""
        t0 = time.monotonic()
        try:
            response = self._transport.post(self._token, tags, message)
        except Exception as e:
            error = str(e) or e.__class__.__name__
            self._metrics.record_failed()
            logger.warning("Log submission failed: %s", error)
            if callback is not None:
                self._notifier.post(lambda: callback.failure(error))
            if isinstance(e, TransportError):
                raise
            raise TransportError(error) from e

        self._metrics.record_sent((time.monotonic() - t0) * 1000)
        if callback is not None:
            self._notifier.post(callback.success)
        return response

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self):
        """Wait for in-flight submissions and their callbacks, then release resources."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        self._executor.shutdown(wait=True)
        if self._owns_notifier:
            self._notifier.close()
        if self._owns_transport:
            self._transport.close()

    def _retire(self):
        """Stop accepting work; finish in-flight submissions in the background."""
        self._executor.shutdown(wait=False)
        threading.Thread(target=self.close, name="loggly-retire", daemon=True).start()

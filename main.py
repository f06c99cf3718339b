"""Entry point for the Loggly client CLI."""

import logging
import os
import sys
import threading
from concurrent.futures import wait

from loggly_client.callbacks import FunctionCallback
from loggly_client.client import LogglyClient
from loggly_client.config import load_config
from loggly_client.metrics import MetricsReporter

logger = logging.getLogger(__name__)


def read_messages(path: str) -> list[str]:
    """Read all non-empty lines from a file, trailing newlines removed."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\r\n") for line in f if line.strip()]


class Outcome:
    """Counts callback results across submissions."""

    def __init__(self):
        self._lock = threading.Lock()
        self.succeeded = 0
        self.failed = 0

    def on_success(self):
        with self._lock:
            self.succeeded += 1

    def on_failure(self, error: str):
        logger.error("Submission failed: %s", error)
        with self._lock:
            self.failed += 1


def run(argv: list[str] | None = None) -> int:
    try:
        config, options = load_config(argv)
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if not config.token:
        logger.error("A token is required (--token or LOGGLY_TOKEN)")
        return 2

    if options.file:
        try:
            messages = read_messages(options.file)
        except OSError as e:
            logger.error("Cannot read %s: %s", options.file, e)
            return 2
    elif options.messages:
        messages = list(options.messages)
    else:
        messages = [line.rstrip("\r\n") for line in sys.stdin if line.strip()]

    client = LogglyClient.get_instance(config.token, config=config)
    outcome = Outcome()
    callback = FunctionCallback(outcome.on_success, outcome.on_failure)

    reporter = None
    if config.metrics_interval > 0:
        reporter = MetricsReporter(client.metrics, config.metrics_interval, threading.Event())
        reporter.start()

    logger.info("Shipping %d message(s) to %s (mode=%s)",
                len(messages), config.endpoint, "bulk" if options.bulk else "single")

    if options.bulk:
        futures = [client.log_bulk(messages, callback)]
    else:
        futures = [client.log(message, callback) for message in messages]

    wait([f for f in futures if f is not None])
    # Closing drains pending callbacks
    LogglyClient.close_instance()
    if reporter:
        reporter.stop()

    logger.info("Done: succeeded=%d, failed=%d", outcome.succeeded, outcome.failed)
    return 1 if outcome.failed else 0


def main():
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )
    sys.exit(run())


if __name__ == "__main__":
    main()

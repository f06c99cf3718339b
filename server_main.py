"""Entry point for the local ingestion server."""

import logging
import os
import signal
import sys
import threading

from loggly_client.server import IngestServer, create_app


def main():
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )

    host = os.environ.get("SERVER_HOST", "0.0.0.0")
    port = int(os.environ.get("SERVER_PORT", "8080"))
    raw_tokens = os.environ.get("SERVER_TOKENS", "")
    tokens = {t.strip() for t in raw_tokens.split(",") if t.strip()} or None

    server = IngestServer(host, port, app=create_app(tokens=tokens))
    shutdown_event = threading.Event()

    def signal_handler(signum, frame):
        logging.getLogger(__name__).info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    server.start()
    try:
        shutdown_event.wait()
    finally:
        server.stop()


if __name__ == "__main__":
    main()

"""Local stand-in for the Loggly ingestion endpoint, for tests and development."""

import logging
import threading

from flask import Flask, jsonify, request
from werkzeug.serving import make_server

from loggly_client.transport import TAG_HEADER

logger = logging.getLogger(__name__)


class EventStore:
    """Thread-safe list of received events."""

    def __init__(self):
        self._lock = threading.Lock()
        self._events: list[dict] = []

    def add(self, event: dict):
        with self._lock:
            self._events.append(event)

    def all(self) -> list[dict]:
        with self._lock:
            return list(self._events)

    def clear(self):
        with self._lock:
            self._events.clear()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._events)


def split_events(body: str) -> list[str]:
    """Split a posted body into events on LF, turning escaped CRs back into LFs."""
    events = []
    for line in body.split("\n"):
        if not line:
            continue
        events.append(line.replace("\r", "\n"))
    return events


def create_app(tokens: set[str] | None = None, store: EventStore | None = None):
    """Flask application factory.

    When *tokens* is given, posts for any other token are rejected with 403.
    """
    app = Flask(__name__)
    store = store or EventStore()
    app.config["components"] = {"store": store}

    @app.route("/health")
    def health():
        return jsonify({"status": "healthy", "events": store.count})

    @app.route("/inputs/<token>", methods=["POST"])
    def inputs(token):
        if tokens is not None and token not in tokens:
            logger.warning("Rejected post for unknown token")
            return jsonify({"response": "invalid token"}), 403

        body = request.get_data(as_text=True)
        raw_tags = request.headers.get(TAG_HEADER, "")
        tags = [t for t in raw_tags.split(",") if t]

        events = split_events(body)
        for message in events:
            store.add({"token": token, "tags": tags, "message": message})
        logger.info("Received %d event(s) for token %s...", len(events), token[:4])
        return jsonify({"response": "ok"})

    @app.route("/events")
    def events():
        return jsonify(store.all())

    return app


class IngestServer:
    """Serves the ingestion app on a background thread.

    Binding to port 0 picks a free port; see server_address.
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 0, app=None):
        self.app = app or create_app()
        self._server = make_server(host, port, self.app, threaded=True)
        self._thread: threading.Thread | None = None

    @property
    def server_address(self) -> tuple:
        return self._server.server_address

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}/"

    @property
    def store(self) -> EventStore:
        return self.app.config["components"]["store"]

    def start(self):
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info("Ingest server listening on %s:%d", *self.server_address[:2])

    def stop(self):
        self._server.shutdown()
        self._server.server_close()
        if self._thread:
            self._thread.join(timeout=5)

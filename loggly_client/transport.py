"""HTTP transport for the Loggly ingestion endpoint."""

import logging

import requests

from loggly_client.config import DEFAULT_ENDPOINT
from loggly_client.response import LogglyResponse

logger = logging.getLogger(__name__)

TAG_HEADER = "X-LOGGLY-TAG"


class TransportError(Exception):
    """A submission did not reach the endpoint or was not accepted by it."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class HttpTransport:
    """Posts raw text events to ``{endpoint}inputs/{token}`` over a shared session."""

    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, timeout: float = 10.0,
                 session: requests.Session | None = None):
        if not endpoint.endswith("/"):
            endpoint += "/"
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def url_for(self, token: str) -> str:
        return f"{self._endpoint}inputs/{token}"

    def post(self, token: str, tags: str, message: str) -> LogglyResponse:
        """Send one payload. Returns the parsed response or raises TransportError."""
        headers = {"Content-Type": "text/plain; charset=utf-8"}
        if tags:
            headers[TAG_HEADER] = tags

        try:
            resp = self._session.post(
                self.url_for(token),
                data=message.encode("utf-8"),
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise TransportError(
                f"HTTP {resp.status_code}: {resp.text[:200] or resp.reason}",
                status_code=resp.status_code,
            )

        try:
            result = LogglyResponse.from_json(resp.json())
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON response: {resp.text[:200]}",
                status_code=resp.status_code,
            ) from e

        if not result.is_ok:
            raise TransportError(
                f"Unexpected response: {result.text!r}",
                status_code=resp.status_code,
            )

        logger.debug("Posted %d bytes to %s", len(message), self._endpoint)
        return result

    def close(self):
        self._session.close()

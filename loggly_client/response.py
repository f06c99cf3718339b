"""Response model for the ingestion endpoint."""

from dataclasses import dataclass
from typing import Optional

SUCCESS_VALUE = "ok"


@dataclass(frozen=True)
class LogglyResponse:
    """The JSON body returned by the endpoint: ``{"response": "ok"}`` on success."""

    response: Optional[str] = None

    @classmethod
    def from_json(cls, data) -> "LogglyResponse":
        if not isinstance(data, dict):
            return cls(None)
        value = data.get("response")
        return cls(None if value is None else str(value))

    @property
    def text(self) -> Optional[str]:
        return self.response

    @property
    def is_ok(self) -> bool:
        return self.response == SUCCESS_VALUE

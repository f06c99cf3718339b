"""Combine several log messages into one bulk payload."""

import re
from typing import Iterable, Optional

_LINE_BREAK = re.compile(r"[\r\n]")


def escape_line_breaks(message: str) -> str:
    """Replace every CR or LF in *message* with CR.

    The endpoint treats LF as the boundary between events and strips CR,
    so a multi-line message stays one event.
    """
    return _LINE_BREAK.sub("\r", message)


def join_messages(messages: Iterable[Optional[str]]) -> str:
    """Join messages into one payload, one event per LF-terminated line.

    ``None`` and empty messages are skipped. Returns ``""`` when nothing is left.

    >>> join_messages(["line1\\nline2", "", None, "msg2"])
    'line1\\rline2\\nmsg2\\n'
    """
    parts = []
    for message in messages:
        if not message:
            continue
        parts.append(escape_line_breaks(message))
        parts.append("\n")
    return "".join(parts)

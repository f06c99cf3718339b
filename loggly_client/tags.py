"""Thread-safe store for the tags attached to every log event."""

import threading


class TagStore:
    """Name -> value tags, rendered as ``name-value`` pairs joined by commas.

    All access goes through a lock so tags can be changed from any thread
    while submissions are rendering them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tags: dict[str, str] = {}

    def add_tag(self, name: str, value: str):
        """Insert or overwrite a tag. Empty name or value is ignored."""
        if not name or not value:
            return
        with self._lock:
            self._tags[name] = value

    def add_tags(self, tags: dict):
        """Merge a mapping of tags, overwriting existing names.

        Entries are not checked for emptiness, unlike add_tag().
        """
        if not tags:
            return
        with self._lock:
            self._tags.update(tags)

    def remove_tag(self, name: str):
        """Remove a tag. Empty or unknown names are ignored."""
        if not name:
            return
        with self._lock:
            self._tags.pop(name, None)

    def render(self) -> str:
        """Return the wire form, e.g. ``"env-prod,app-web"``; empty if no tags."""
        with self._lock:
            items = list(self._tags.items())
        return ",".join(f"{name}-{value}" for name, value in items)

    def snapshot(self) -> dict:
        with self._lock:
            return dict(self._tags)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tags)

    def __contains__(self, name) -> bool:
        with self._lock:
            return name in self._tags

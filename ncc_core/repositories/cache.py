from __future__ import annotations

import threading
from typing import Any

_MISSING = object()


class ResponseCache:
    """Endpoint-keyed memo of decoded responses, safe to share between threads."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()

    def set(self, endpoint: str, value: Any) -> None:
        with self._lock:
            self._entries[endpoint] = value

    def lookup(self, endpoint: str) -> tuple[bool, Any]:
        with self._lock:
            value = self._entries.get(endpoint, _MISSING)
        if value is _MISSING:
            return False, None
        return True, value

"""Pluggable persistence for the JWT used by client-side platforms."""

from __future__ import annotations

import threading
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class TokenStorage(Protocol):
    def get(self) -> Optional[str]:
        ...

    def set(self, token: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryTokenStorage:
    """Keeps the token in process memory. Lost when the process exits."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token

    def clear(self) -> None:
        with self._lock:
            self._token = None


__all__ = ["TokenStorage", "InMemoryTokenStorage"]

"""Mutable per-client session state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionState:
    """Identity resolved for one authenticated session.

    Written only by the connect/registration flows through the client's
    setters; read by every request. Single writer, no locking.
    """

    access_token: Optional[str] = None
    urn: Optional[str] = None
    origin: Optional[str] = None


__all__ = ["SessionState"]

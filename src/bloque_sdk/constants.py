"""Static values shared by the Bloque SDK transport."""

from __future__ import annotations

from typing import Dict, Tuple

API_BASE_URLS: Dict[str, str] = {
    "sandbox": "https://dev.bloque.app",
    "production": "https://api.bloque.app",
}

DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
}

# Reachable without credentials. "*" matches exactly one path segment.
PUBLIC_ROUTES: Tuple[str, ...] = (
    "/api/aliases",
    "/api/origins/*/assert",
)

REQUEST_ID_HEADERS: Tuple[str, ...] = ("x-request-id", "x-correlation-id")


__all__ = [
    "API_BASE_URLS",
    "DEFAULT_HEADERS",
    "PUBLIC_ROUTES",
    "REQUEST_ID_HEADERS",
]

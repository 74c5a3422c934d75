"""Authorization header synthesis."""

from __future__ import annotations

from typing import Dict

from .config import COOKIE_PLATFORMS, ApiKeyAuth, BloqueConfig
from .errors import BloqueConfigError
from .session import SessionState


def build_auth_headers(config: BloqueConfig, session: SessionState) -> Dict[str, str]:
    """Return the auth headers for a non-public route.

    API keys are sent verbatim until the session holds an access token, after
    which the token is sent as a bearer credential. JWT sessions on cookie
    platforms send nothing.
    """
    auth = config.auth
    if isinstance(auth, ApiKeyAuth):
        if session.access_token:
            return {"Authorization": f"Bearer {session.access_token}"}
        return {"Authorization": auth.api_key}

    if config.platform in COOKIE_PLATFORMS:
        return {}

    token = config.token_storage.get() if config.token_storage is not None else None
    if not token:
        raise BloqueConfigError("Authentication token is missing")
    return {"Authorization": f"Bearer {token}"}


__all__ = ["build_auth_headers"]

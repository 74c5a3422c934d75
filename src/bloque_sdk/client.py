"""Session entry point for the Bloque SDK."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import ApiKeyAuth, BloqueConfig, JwtAuth
from .errors import BloqueAPIError, BloqueConfigError, ErrorDetails
from .http_client import HttpClient

logger = logging.getLogger("bloque.sdk")


class BaseClient:
    """Base for resource clients that map parameters onto transport calls."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    @property
    def http(self) -> HttpClient:
        return self._http


@dataclass(frozen=True)
class Session:
    http: HttpClient
    urn: str
    access_token: str


class SDK:
    """Owns one transport and opens authenticated sessions on it."""

    def __init__(self, config: BloqueConfig, **http_options: Any) -> None:
        self._http = HttpClient(config, **http_options)

    async def __aenter__(self) -> "SDK":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def http(self) -> HttpClient:
        return self._http

    def build_urn(self, alias: str) -> str:
        origin = self._http.origin
        if not origin:
            raise BloqueConfigError("Origin is required to build a urn")
        return f"did:bloque:{origin}:{alias}"

    def _api_key(self) -> str:
        auth = self._http.auth
        return auth.api_key if isinstance(auth, ApiKeyAuth) else ""

    async def connect(self, alias: str, extra_context: Optional[Dict[str, Any]] = None) -> Session:
        """Exchange the API key for an access token scoped to ``alias``."""
        urn = self.build_urn(alias)
        response = await self._http.request(
            "POST",
            f"/api/origins/{self._http.origin}/connect",
            body={
                "assertion_result": {
                    "challengeType": "API_KEY",
                    "value": {"api_key": self._api_key(), "alias": alias},
                },
                "extra_context": extra_context or {},
            },
        )
        result = response.get("result") if isinstance(response, dict) else None
        token = result.get("access_token") if isinstance(result, dict) else None
        if not token:
            raise BloqueAPIError(
                "Connect response did not include an access token",
                ErrorDetails(code="INVALID_RESPONSE", body=response),
            )

        self._http.set_access_token(token)
        self._http.set_urn(urn)
        logger.info("Connected session urn=%s", urn)
        return Session(http=self._http, urn=urn, access_token=token)

    def authenticate_with_token(self, token: str, alias: str) -> Session:
        if not token or not token.strip():
            raise ValueError("Token is required")
        if not isinstance(self._http.auth, JwtAuth):
            raise BloqueConfigError("authenticate_with_token is only available for JWT auth")

        urn = self.build_urn(alias)
        self._http.set_jwt_token(token)
        self._http.set_urn(urn)
        return Session(http=self._http, urn=urn, access_token=token)

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["BaseClient", "SDK", "Session"]

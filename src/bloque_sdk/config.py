"""Configuration objects for the Bloque Python SDK."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

from .constants import API_BASE_URLS
from .errors import BloqueConfigError
from .storage import TokenStorage

MODES: Tuple[str, ...] = ("sandbox", "production")
PLATFORMS: Tuple[str, ...] = ("node", "bun", "deno", "browser", "react-native")

# Platforms where the runtime carries the session cookie for us.
COOKIE_PLATFORMS: Tuple[str, ...] = ("browser",)


@dataclass(frozen=True)
class ApiKeyAuth:
    api_key: str
    kind: str = field(default="apiKey", init=False)

    def __repr__(self) -> str:
        return "ApiKeyAuth(api_key='***')"


@dataclass(frozen=True)
class JwtAuth:
    kind: str = field(default="jwt", init=False)


AuthStrategy = Union[ApiKeyAuth, JwtAuth]


class AuthRule(str, Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"
    REQUIRES_TOKEN_STORAGE = "requires_token_storage"


PLATFORM_AUTH_RULES: Dict[Tuple[str, str], AuthRule] = {
    ("node", "apiKey"): AuthRule.ALLOWED,
    ("bun", "apiKey"): AuthRule.ALLOWED,
    ("deno", "apiKey"): AuthRule.ALLOWED,
    ("browser", "apiKey"): AuthRule.FORBIDDEN,
    ("react-native", "apiKey"): AuthRule.FORBIDDEN,
    ("node", "jwt"): AuthRule.REQUIRES_TOKEN_STORAGE,
    ("bun", "jwt"): AuthRule.REQUIRES_TOKEN_STORAGE,
    ("deno", "jwt"): AuthRule.REQUIRES_TOKEN_STORAGE,
    ("browser", "jwt"): AuthRule.ALLOWED,
    ("react-native", "jwt"): AuthRule.REQUIRES_TOKEN_STORAGE,
}


def check_platform_auth(platform: str, auth_kind: str, has_token_storage: bool) -> Optional[str]:
    """Return the reason a platform/auth pairing is rejected, or None if it is allowed."""
    rule = PLATFORM_AUTH_RULES.get((platform, auth_kind))
    if rule is None:
        return f'Unsupported authentication "{auth_kind}" for platform "{platform}"'
    if rule is AuthRule.FORBIDDEN:
        return f'API key authentication is not allowed on the "{platform}" platform; use JWT authentication'
    if rule is AuthRule.REQUIRES_TOKEN_STORAGE and not has_token_storage:
        return f'JWT authentication on the "{platform}" platform requires a token storage'
    return None


@dataclass(frozen=True)
class RetryConfig:
    enabled: bool = True
    max_retries: int = 3
    initial_delay_ms: int = 1000
    max_delay_ms: int = 30000


@dataclass(frozen=True)
class BloqueConfig:
    auth: AuthStrategy
    origin: Optional[str] = None
    mode: str = "production"
    platform: str = "node"
    timeout_ms: int = 30000
    retry: RetryConfig = field(default_factory=RetryConfig)
    token_storage: Optional[TokenStorage] = None
    base_url: Optional[str] = None
    access_token: Optional[str] = None
    urn: Optional[str] = None

    def __post_init__(self) -> None:
        validate_config(self)

    @property
    def resolved_base_url(self) -> str:
        return (self.base_url or API_BASE_URLS[self.mode]).rstrip("/")

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        *,
        token_storage: Optional[TokenStorage] = None,
    ) -> "BloqueConfig":
        env = os.environ if env is None else env
        api_key = env.get("BLOQUE_API_KEY")
        auth: AuthStrategy = ApiKeyAuth(api_key=api_key) if api_key is not None else JwtAuth()

        retry = RetryConfig(
            enabled=_env_bool(env, "BLOQUE_RETRY_ENABLED", True),
            max_retries=_env_int(env, "BLOQUE_MAX_RETRIES", 3),
            initial_delay_ms=_env_int(env, "BLOQUE_RETRY_INITIAL_DELAY_MS", 1000),
            max_delay_ms=_env_int(env, "BLOQUE_RETRY_MAX_DELAY_MS", 30000),
        )
        return cls(
            auth=auth,
            origin=env.get("BLOQUE_ORIGIN"),
            mode=env.get("BLOQUE_MODE", "production"),
            platform=env.get("BLOQUE_PLATFORM", "node"),
            timeout_ms=_env_int(env, "BLOQUE_TIMEOUT_MS", 30000),
            retry=retry,
            token_storage=token_storage,
            base_url=env.get("BLOQUE_BASE_URL") or None,
        )


def validate_config(config: BloqueConfig) -> None:
    if config.mode not in MODES:
        raise BloqueConfigError('Mode must be either "sandbox" or "production"')
    if config.platform not in PLATFORMS:
        raise BloqueConfigError(f"Platform must be one of: {', '.join(PLATFORMS)}")

    numbers = {
        "timeout_ms": config.timeout_ms,
        "retry.max_retries": config.retry.max_retries,
        "retry.initial_delay_ms": config.retry.initial_delay_ms,
        "retry.max_delay_ms": config.retry.max_delay_ms,
    }
    for name, value in numbers.items():
        if value < 0:
            raise BloqueConfigError(f"{name} must be a non-negative number")

    auth = config.auth
    if isinstance(auth, ApiKeyAuth):
        if not auth.api_key or not auth.api_key.strip():
            raise BloqueConfigError("API key is required")
        if not config.origin or not config.origin.strip():
            raise BloqueConfigError("Origin is required for API key authentication")
    elif not isinstance(auth, JwtAuth):
        raise BloqueConfigError("auth must be ApiKeyAuth or JwtAuth")

    reason = check_platform_auth(config.platform, auth.kind, config.token_storage is not None)
    if reason:
        raise BloqueConfigError(reason)


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise BloqueConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


__all__ = [
    "ApiKeyAuth",
    "JwtAuth",
    "AuthStrategy",
    "AuthRule",
    "PLATFORM_AUTH_RULES",
    "COOKIE_PLATFORMS",
    "MODES",
    "PLATFORMS",
    "RetryConfig",
    "BloqueConfig",
    "check_platform_auth",
    "validate_config",
]

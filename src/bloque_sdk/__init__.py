"""Bloque Python SDK."""

from .client import SDK, BaseClient, Session
from .config import ApiKeyAuth, BloqueConfig, JwtAuth, RetryConfig
from .errors import (
    BloqueAPIError,
    BloqueAuthenticationError,
    BloqueConfigError,
    BloqueError,
    BloqueInsufficientFundsError,
    BloqueNetworkError,
    BloqueNotFoundError,
    BloqueRateLimitError,
    BloqueTimeoutError,
    BloqueValidationError,
    ErrorKind,
)
from .http_client import HttpClient
from .models import RequestOptions
from .storage import InMemoryTokenStorage, TokenStorage

__all__ = [
    "SDK",
    "BaseClient",
    "Session",
    "HttpClient",
    "RequestOptions",
    "BloqueConfig",
    "ApiKeyAuth",
    "JwtAuth",
    "RetryConfig",
    "TokenStorage",
    "InMemoryTokenStorage",
    "ErrorKind",
    "BloqueError",
    "BloqueAPIError",
    "BloqueAuthenticationError",
    "BloqueConfigError",
    "BloqueInsufficientFundsError",
    "BloqueNetworkError",
    "BloqueNotFoundError",
    "BloqueRateLimitError",
    "BloqueTimeoutError",
    "BloqueValidationError",
]

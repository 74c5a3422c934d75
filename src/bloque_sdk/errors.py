"""Typed errors raised by the Bloque SDK transport."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional


class ErrorKind(str, Enum):
    CONFIG = "config"
    NETWORK = "network"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    API = "api"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ErrorDetails:
    status: Optional[int] = None
    code: Optional[str] = None
    request_id: Optional[str] = None
    body: Any = None
    retry_after: Optional[str] = None
    retry_after_seconds: Optional[float] = None
    timeout_ms: Optional[int] = None


class BloqueError(Exception):
    """Base class for every error the SDK raises on its own behalf.

    The payload lives in a frozen :class:`ErrorDetails` record and is exposed
    through read-only properties, so an error cannot be altered after it has
    been raised.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, details: Optional[ErrorDetails] = None) -> None:
        super().__init__(message)
        self._message = message
        self._details = details or ErrorDetails()

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> ErrorDetails:
        return self._details

    @property
    def status(self) -> Optional[int]:
        return self._details.status

    @property
    def code(self) -> Optional[str]:
        return self._details.code

    @property
    def request_id(self) -> Optional[str]:
        return self._details.request_id

    @property
    def response_body(self) -> Any:
        return self._details.body

    @property
    def retryable(self) -> bool:
        return is_retryable(self)

    def __str__(self) -> str:
        parts = []
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.code:
            parts.append(f"code={self.code}")
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        if not parts:
            return self._message
        return f"{self._message} ({' '.join(parts)})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r}, kind={self.kind.value})"


class BloqueConfigError(BloqueError):
    """Misconfiguration. Raised at construction or on a misconfigured auth path."""

    kind = ErrorKind.CONFIG


class BloqueNetworkError(BloqueError):
    kind = ErrorKind.NETWORK

    def __init__(self, message: str, details: Optional[ErrorDetails] = None) -> None:
        super().__init__(message, details or ErrorDetails(code="NETWORK_ERROR"))


class BloqueTimeoutError(BloqueError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(
            f"Request timed out after {timeout_ms}ms",
            ErrorDetails(code="TIMEOUT_ERROR", timeout_ms=timeout_ms),
        )

    @property
    def timeout_ms(self) -> int:
        return self._details.timeout_ms  # type: ignore[return-value]


class BloqueAPIError(BloqueError):
    """Non-2xx response from the API."""

    kind = ErrorKind.API


class BloqueRateLimitError(BloqueAPIError):
    kind = ErrorKind.RATE_LIMIT

    @property
    def retry_after_seconds(self) -> Optional[float]:
        return self._details.retry_after_seconds


class BloqueValidationError(BloqueAPIError):
    pass


class BloqueAuthenticationError(BloqueAPIError):
    pass


class BloqueNotFoundError(BloqueAPIError):
    pass


class BloqueInsufficientFundsError(BloqueAPIError):
    pass


_STATUS_ERRORS: Dict[int, type] = {
    400: BloqueValidationError,
    401: BloqueAuthenticationError,
    402: BloqueInsufficientFundsError,
    403: BloqueAuthenticationError,
    404: BloqueNotFoundError,
    422: BloqueValidationError,
    429: BloqueRateLimitError,
}


def api_error_class(status: int, code: Optional[str] = None) -> type:
    """Pick the most specific :class:`BloqueAPIError` subclass for a response."""
    if code == "INSUFFICIENT_FUNDS":
        return BloqueInsufficientFundsError
    return _STATUS_ERRORS.get(status, BloqueAPIError)


# Every ErrorKind must appear here; tests/test_errors.py checks the table is total.
_RETRYABLE: Dict[ErrorKind, Callable[[BloqueError], bool]] = {
    ErrorKind.CONFIG: lambda error: False,
    ErrorKind.NETWORK: lambda error: True,
    ErrorKind.TIMEOUT: lambda error: True,
    ErrorKind.RATE_LIMIT: lambda error: True,
    ErrorKind.API: lambda error: error.status == 503,
    ErrorKind.UNKNOWN: lambda error: False,
}


def is_retryable(error: BloqueError) -> bool:
    return _RETRYABLE[error.kind](error)


__all__ = [
    "ErrorKind",
    "ErrorDetails",
    "BloqueError",
    "BloqueConfigError",
    "BloqueNetworkError",
    "BloqueTimeoutError",
    "BloqueAPIError",
    "BloqueRateLimitError",
    "BloqueValidationError",
    "BloqueAuthenticationError",
    "BloqueNotFoundError",
    "BloqueInsufficientFundsError",
    "api_error_class",
    "is_retryable",
]

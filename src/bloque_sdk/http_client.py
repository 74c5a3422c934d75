"""Async HTTP transport shared by every Bloque resource client."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import time
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from .auth import build_auth_headers
from .config import AuthStrategy, BloqueConfig
from .constants import DEFAULT_HEADERS, REQUEST_ID_HEADERS
from .errors import (
    BloqueAPIError,
    BloqueError,
    BloqueNetworkError,
    BloqueRateLimitError,
    BloqueTimeoutError,
    ErrorDetails,
    api_error_class,
    is_retryable,
)
from .metrics import REQUEST_COUNTER, REQUEST_LATENCY, RETRY_COUNTER
from .models import HttpMethod, RequestOptions
from .retry import Err, Ok, Outcome, RetryPolicy, parse_retry_after, run_with_retry, utcnow
from .routes import RouteMatcher
from .session import SessionState

logger = logging.getLogger("bloque.http")


class HttpClient:
    """Executes API requests with auth, timeouts and retries applied.

    One instance owns one session: the validated configuration, the access
    token and URN set by the connect flow, and a pooled ``httpx.AsyncClient``.
    ``sleep``, ``rng`` and ``clock`` exist so tests can drive the retry loop
    without real delays.
    """

    def __init__(
        self,
        config: BloqueConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._config = config
        self._base_url = config.resolved_base_url
        self._session = SessionState(access_token=config.access_token, urn=config.urn, origin=config.origin)
        self._routes = RouteMatcher()
        self._policy = RetryPolicy.from_config(config.retry)
        self._sleep = sleep
        self._rng = rng
        self._clock = clock or utcnow
        # Timeouts are enforced per attempt in _send, not by httpx.
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=None,
            transport=transport,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def config(self) -> BloqueConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def auth(self) -> AuthStrategy:
        return self._config.auth

    @property
    def platform(self) -> str:
        return self._config.platform

    @property
    def origin(self) -> Optional[str]:
        return self._session.origin

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token

    @property
    def urn(self) -> Optional[str]:
        return self._session.urn

    def set_access_token(self, token: str) -> None:
        self._session.access_token = token

    def set_urn(self, urn: str) -> None:
        self._session.urn = urn

    def set_origin(self, origin: str) -> None:
        self._session.origin = origin

    def set_jwt_token(self, token: str) -> None:
        if self._config.token_storage is not None:
            self._config.token_storage.set(token)
        self._session.access_token = token

    def get_jwt_token(self) -> Optional[str]:
        if self._config.token_storage is None:
            return None
        return self._config.token_storage.get()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        *,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None,
    ) -> Any:
        options = RequestOptions(method=method, path=path, body=body, headers=headers or {}, timeout=timeout)
        return await self.execute(options)

    async def execute(self, options: RequestOptions) -> Any:
        """Send ``options`` and return the decoded JSON body.

        Raises a :class:`~bloque_sdk.errors.BloqueError` subclass once the
        failure is terminal: not retryable, retries disabled, or retries
        exhausted (the last error is raised).
        """
        # Case-insensitive merge; caller headers win.
        headers = httpx.Headers(DEFAULT_HEADERS)
        if not self._routes.is_public(options.path):
            headers.update(build_auth_headers(self._config, self._session))
        headers.update(options.headers)

        timeout_ms = options.timeout if options.timeout is not None else self._config.timeout_ms
        content = None
        if options.body is not None:
            content = json.dumps(options.body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

        async def attempt(number: int) -> Outcome:
            logger.debug("Dispatching %s %s attempt=%s", options.method, options.path, number)
            try:
                response = await self._send(options.method, options.path, headers, content, timeout_ms)
            except Exception as exc:  # classified into a typed error below
                return Err(self._classify_exception(exc, timeout_ms))
            data = _decode_json(response)
            if response.is_success:
                return Ok(data)
            return Err(self._error_from_response(response, data))

        started = time.perf_counter()
        outcome = await run_with_retry(
            attempt,
            policy=self._policy,
            is_retryable=is_retryable,
            compute_delay=self._compute_delay,
            sleep=self._sleep,
            on_retry=self._record_retry,
        )
        REQUEST_LATENCY.labels(method=options.method).observe(time.perf_counter() - started)

        if isinstance(outcome, Ok):
            REQUEST_COUNTER.labels(method=options.method, outcome="success").inc()
            return outcome.value

        error = outcome.error
        REQUEST_COUNTER.labels(method=options.method, outcome=error.kind.value).inc()
        logger.error(
            "Request failed method=%s path=%s kind=%s status=%s code=%s request_id=%s",
            options.method,
            options.path.split("?", 1)[0],
            error.kind.value,
            error.status,
            error.code,
            error.request_id,
        )
        raise error

    async def _send(
        self,
        method: str,
        path: str,
        headers: httpx.Headers,
        content: Optional[bytes],
        timeout_ms: int,
    ) -> httpx.Response:
        request = self._client.build_request(method, path, headers=headers, content=content)
        send = self._client.send(request)
        if not timeout_ms:
            return await send
        return await asyncio.wait_for(send, timeout=timeout_ms / 1000)

    def _classify_exception(self, exc: Exception, timeout_ms: int) -> BloqueError:
        # Anything raised by the send that is not a timeout counts as a network failure.
        if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
            error: BloqueError = BloqueTimeoutError(timeout_ms)
        else:
            error = BloqueNetworkError(f"Request failed: {exc}")
        error.__cause__ = exc
        return error

    def _error_from_response(self, response: httpx.Response, data: Any) -> BloqueAPIError:
        status = response.status_code
        fields = data if isinstance(data, dict) else {}
        message = fields.get("message") if isinstance(fields.get("message"), str) else None
        code = fields.get("code") if isinstance(fields.get("code"), str) else None
        request_id = next(
            (response.headers[name] for name in REQUEST_ID_HEADERS if name in response.headers),
            None,
        )
        retry_after = response.headers.get("retry-after")

        if status == 429:
            delay_ms = parse_retry_after(retry_after, self._policy.max_delay_ms, self._clock)
            details = ErrorDetails(
                status=status,
                code=code,
                request_id=request_id,
                body=data,
                retry_after=retry_after,
                retry_after_seconds=delay_ms / 1000 if delay_ms is not None else None,
            )
            return BloqueRateLimitError(message or "Rate limit exceeded", details)

        details = ErrorDetails(
            status=status,
            code=code,
            request_id=request_id,
            body=data,
            retry_after=retry_after,
        )
        error_cls = api_error_class(status, code)
        return error_cls(message or f"HTTP {status}: {response.reason_phrase}", details)

    def _compute_delay(self, attempt: int, error: BloqueError) -> float:
        return self._policy.compute_delay(attempt, error, rng=self._rng, now=self._clock)

    def _record_retry(self, attempt: int, error: BloqueError, delay_ms: float) -> None:
        RETRY_COUNTER.labels(kind=error.kind.value).inc()

    async def aclose(self) -> None:
        await self._client.aclose()


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


__all__ = ["HttpClient"]

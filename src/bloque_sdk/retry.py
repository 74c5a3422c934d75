"""Retry policy, backoff math and the retry loop used by the transport."""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from .config import RetryConfig
from .errors import BloqueError

logger = logging.getLogger("bloque.retry")

T = TypeVar("T")

JITTER_RATIO = 0.25

_INTEGER_SECONDS = re.compile(r"^\s*-?\d+\s*$")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: BloqueError


Outcome = Union[Ok[T], Err]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_retry_after(
    value: Optional[str],
    max_delay_ms: int,
    now: Callable[[], datetime] = utcnow,
) -> Optional[int]:
    """Convert a ``Retry-After`` header into a delay in milliseconds.

    Accepts an integer number of seconds or an HTTP date. The result is clamped
    to ``[0, max_delay_ms]``. Returns None when the header is absent or parses
    as neither form.
    """
    if value is None or not value.strip():
        return None
    if _INTEGER_SECONDS.match(value):
        try:
            delay_ms = int(value) * 1000
        except ValueError:
            # longer than the interpreter will convert
            return None
        return max(0, min(delay_ms, max_delay_ms))
    try:
        when = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    delay_ms = int((when - now()).total_seconds() * 1000)
    return max(0, min(delay_ms, max_delay_ms))


def backoff_delay(
    attempt: int,
    initial_delay_ms: int,
    max_delay_ms: int,
    rng: Optional[random.Random] = None,
) -> float:
    """Exponential backoff with symmetric +/-25% jitter, clamped to max_delay_ms."""
    # Any base above 2x the cap still clamps to the cap after jitter.
    base = min(initial_delay_ms * (2 ** attempt), 2 * max_delay_ms)
    uniform = (rng or random).uniform(-1.0, 1.0)
    delay = base + base * JITTER_RATIO * uniform
    return max(0.0, min(delay, float(max_delay_ms)))


@dataclass(frozen=True)
class RetryPolicy:
    enabled: bool = True
    max_retries: int = 3
    initial_delay_ms: int = 1000
    max_delay_ms: int = 30000

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            enabled=config.enabled,
            max_retries=config.max_retries,
            initial_delay_ms=config.initial_delay_ms,
            max_delay_ms=config.max_delay_ms,
        )

    def compute_delay(
        self,
        attempt: int,
        error: BloqueError,
        *,
        rng: Optional[random.Random] = None,
        now: Callable[[], datetime] = utcnow,
    ) -> float:
        retry_after = parse_retry_after(error.details.retry_after, self.max_delay_ms, now)
        if retry_after is not None:
            return retry_after
        return backoff_delay(attempt, self.initial_delay_ms, self.max_delay_ms, rng)


async def run_with_retry(
    attempt: Callable[[int], Awaitable[Outcome]],
    *,
    policy: RetryPolicy,
    is_retryable: Callable[[BloqueError], bool],
    compute_delay: Callable[[int, BloqueError], float],
    sleep: Callable[[float], Awaitable[None]],
    on_retry: Optional[Callable[[int, BloqueError, float], None]] = None,
) -> Outcome:
    """Run ``attempt`` until it succeeds or its failure is terminal.

    ``attempt`` receives the zero-based attempt number. The outcome of the
    last attempt is returned as is, so an exhausted loop hands back the last
    error that was seen.
    """
    number = 0
    while True:
        outcome = await attempt(number)
        if isinstance(outcome, Ok):
            return outcome

        error = outcome.error
        if not (policy.enabled and number < policy.max_retries and is_retryable(error)):
            return outcome

        delay_ms = compute_delay(number, error)
        logger.warning(
            "Retrying request attempt=%s delay_ms=%.0f kind=%s status=%s",
            number + 1,
            delay_ms,
            error.kind.value,
            error.status,
        )
        if on_retry is not None:
            on_retry(number, error, delay_ms)
        await sleep(delay_ms / 1000)
        number += 1


__all__ = [
    "Ok",
    "Err",
    "Outcome",
    "RetryPolicy",
    "backoff_delay",
    "parse_retry_after",
    "run_with_retry",
    "utcnow",
]

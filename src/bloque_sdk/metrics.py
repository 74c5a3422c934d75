"""Prometheus instrumentation for the SDK transport."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNTER = Counter(
    "bloque_sdk_requests_total",
    "Logical API calls made through the transport",
    ["method", "outcome"],
)
RETRY_COUNTER = Counter("bloque_sdk_retries_total", "Retried attempts", ["kind"])
REQUEST_LATENCY = Histogram(
    "bloque_sdk_request_latency_seconds",
    "Wall-clock latency of a logical API call, retries included",
    ["method"],
)

__all__ = ["REQUEST_COUNTER", "RETRY_COUNTER", "REQUEST_LATENCY"]

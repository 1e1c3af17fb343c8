"""Prometheus metrics used across the inventory application."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

store_requests_total = Counter(
    "equipment_store_requests_total",
    "Total number of calls to the equipment backend by operation and outcome.",
    ["operation", "outcome"],
)
store_request_seconds = Histogram(
    "equipment_store_request_seconds",
    "Time spent waiting for the equipment backend.",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, float("inf")),
)
login_attempts_total = Counter(
    "login_attempts_total",
    "Total number of sign-in attempts by outcome.",
    ["outcome"],
)


__all__ = [
    "store_requests_total",
    "store_request_seconds",
    "login_attempts_total",
]

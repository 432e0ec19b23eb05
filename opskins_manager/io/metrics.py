"""Metrics instrumentation."""

from __future__ import annotations

from prometheus_client import Counter

purchases_total = Counter("opskins_purchases_total", "Items bought on the market")
withdrawals_total = Counter(
    "opskins_withdrawals_total", "Withdrawal attempts by outcome", ["result"]
)
cache_writes_total = Counter(
    "opskins_cache_writes_total", "Inventory cache files written"
)


def inc_purchases(n: int = 1) -> None:
    purchases_total.inc(n)


def inc_withdrawals(result: str) -> None:
    withdrawals_total.labels(result=result).inc()


def inc_cache_writes(n: int = 1) -> None:
    cache_writes_total.inc(n)

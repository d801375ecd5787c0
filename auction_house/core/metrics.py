"""
Prometheus metrics for the marketplace (exposed at /metrics).
"""

from prometheus_client import Counter

PURCHASES = Counter(
    "auction_purchases_total",
    "Purchase attempts by outcome (sold or error code).",
    ["outcome"],
)

AUCTIONS_EXPIRED = Counter(
    "auctions_expired_total",
    "Auctions transitioned to expired by the sweeper.",
)

SWEEP_FAILURES = Counter(
    "auction_sweep_failures_total",
    "Sweep ticks that failed with a store error.",
)

"""Prometheus metrics for the shutdown coordinator."""

from prometheus_client import Counter, Gauge

SHUTDOWN_DRAINING = Gauge(
    "shutdown_draining",
    "1 once the server has started draining connections",
)

REJECTED_REQUESTS_TOTAL = Counter(
    "shutdown_rejected_requests_total",
    "Requests rejected with 503 while draining",
    ["method"],
)

# reason: immediate, drained, forced
SHUTDOWN_EXITS_TOTAL = Counter(
    "shutdown_exits_total",
    "Process terminations requested by the shutdown controller",
    ["reason"],
)

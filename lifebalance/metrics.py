"""
Prometheus metrics for lifebalance.

Environment Variables:
    LIFEBALANCE_METRICS_ENABLED: Enable metrics server (true/false) - default: false
    LIFEBALANCE_METRICS_PORT: HTTP port for /metrics endpoint - default: 9108

Usage:
    from lifebalance.metrics import init_metrics, track_mutation

    init_metrics()
    track_mutation("add_event")

Helpers are no-ops until init_metrics() has run, so library code can call
them unconditionally.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

MUTATIONS_TOTAL: Optional[Counter] = None
PERSISTENCE_FAILURES_TOTAL: Optional[Counter] = None
ORACLE_REQUESTS_TOTAL: Optional[Counter] = None
ORACLE_DURATION: Optional[Histogram] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock; repeated calls are ignored.
    """
    global MUTATIONS_TOTAL, PERSISTENCE_FAILURES_TOTAL
    global ORACLE_REQUESTS_TOTAL, ORACLE_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        MUTATIONS_TOTAL = Counter(
            "lifebalance_mutations_total",
            "Total number of applied container mutations",
            labelnames=["operation"],
        )

        PERSISTENCE_FAILURES_TOTAL = Counter(
            "lifebalance_persistence_failures_total",
            "Total number of failed persistence reads/writes",
            labelnames=["operation"],
        )

        ORACLE_REQUESTS_TOTAL = Counter(
            "lifebalance_oracle_requests_total",
            "Total number of rating oracle requests by outcome",
            labelnames=["outcome"],
        )

        ORACLE_DURATION = Histogram(
            "lifebalance_oracle_duration_seconds",
            "Duration of rating oracle requests in seconds",
            buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in a background daemon thread.

    Initializes the metrics registry if needed.
    """
    if not enabled:
        logger.info("Metrics server disabled")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


def track_mutation(operation: str) -> None:
    """Count an applied mutation (add_event, remove_friend, clear_all, ...)."""
    if MUTATIONS_TOTAL is not None:
        MUTATIONS_TOTAL.labels(operation=operation).inc()


def track_persistence_failure(operation: str) -> None:
    """Count a failed persistence operation (load_events, save_friends, ...)."""
    if PERSISTENCE_FAILURES_TOTAL is not None:
        PERSISTENCE_FAILURES_TOTAL.labels(operation=operation).inc()


def track_oracle_request(outcome: str) -> None:
    """Count an oracle request by outcome (ok, unavailable, error, invalid)."""
    if ORACLE_REQUESTS_TOTAL is not None:
        ORACLE_REQUESTS_TOTAL.labels(outcome=outcome).inc()


@contextmanager
def track_oracle_duration() -> Generator[None, None, None]:
    """Time an oracle request."""
    if ORACLE_DURATION is None:
        yield
        return

    with ORACLE_DURATION.time():
        yield

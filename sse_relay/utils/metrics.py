"""
Prometheus metrics for event stream monitoring.

Metrics are retrieved from the default registry when they already exist, so
re-importing this module under `uvicorn --reload` does not fail.
"""

from prometheus_client import REGISTRY, Counter, Gauge


def _get_or_create_counter(
    name: str, doc: str, labels: list[str] | None = None
) -> Counter:
    """
    Get existing counter or create new one.

    Args:
        name: Metric name.
        doc: Metric documentation.
        labels: Optional list of label names.

    Returns:
        Counter instance.
    """
    try:
        return Counter(name, doc, labels or [])
    except ValueError:
        # Metric already exists, retrieve it from registry
        return REGISTRY._names_to_collectors[name]


def _get_or_create_gauge(
    name: str, doc: str, labels: list[str] | None = None
) -> Gauge:
    """
    Get existing gauge or create new one.

    Args:
        name: Metric name.
        doc: Metric documentation.
        labels: Optional list of label names.

    Returns:
        Gauge instance.
    """
    try:
        return Gauge(name, doc, labels or [])
    except ValueError:
        return REGISTRY._names_to_collectors[name]


sse_connections_active = _get_or_create_gauge(
    "sse_connections_active", "Number of registered event streams"
)

sse_connections_total = _get_or_create_counter(
    "sse_connections_total",
    "Total event stream connection attempts",
    ["status"],  # accepted, rejected
)

sse_messages_dispatched_total = _get_or_create_counter(
    "sse_messages_dispatched_total",
    "Total dispatch requests",
    ["outcome"],  # delivered, unknown_target, invalid, failed
)


__all__ = [
    "sse_connections_active",
    "sse_connections_total",
    "sse_messages_dispatched_total",
]

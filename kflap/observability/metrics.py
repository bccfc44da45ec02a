"""Prometheus metrics for kflap.

All collectors live on the default registry.  The exposition server is only
started when a metrics port is configured.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, start_http_server

polls_total = Counter(
    "kflap_polls_total",
    "Poll cycles delivered to the monitor, by outcome.",
    ["outcome"],  # ok | error | stale
)

poll_duration_seconds = Histogram(
    "kflap_poll_duration_seconds",
    "Wall-clock duration of a poll cycle.",
    buckets=(0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60),
)

list_failures_total = Counter(
    "kflap_list_failures_total",
    "List calls that failed for a resource type.",
    ["resource"],
)

discovery_failures_total = Counter(
    "kflap_discovery_failures_total",
    "Group versions whose resource list could not be fetched.",
)

skipped_version_tokens_total = Counter(
    "kflap_skipped_version_tokens_total",
    "Objects skipped because their resourceVersion is not an integer.",
)

tracked_objects = Gauge(
    "kflap_tracked_objects",
    "Objects currently held in the version table.",
)

flapping_objects = Gauge(
    "kflap_flapping_objects",
    "Tracked objects whose version changed at least once.",
)


def start_metrics_server(port: int) -> bool:
    """Start the exposition HTTP server on *port*; a port of 0 disables it."""
    if port <= 0:
        return False
    start_http_server(port)
    return True

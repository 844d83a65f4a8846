"""Prometheus metrics for upstream calls, retries and profile refresh outcomes"""

from prometheus_client import Counter, Histogram

# Upstream Greencard API metrics
upstream_latency_histogram = Histogram(
    "greencard_upstream_latency_seconds",
    "Greencard API response time",
    ["endpoint"],  # auth | account | history | ping
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0],
)

upstream_failure_counter = Counter(
    "greencard_upstream_failures_total",
    "Failed Greencard API calls",
    ["endpoint", "error"],  # error = exception class name
)

redirect_counter = Counter(
    "greencard_redirects_total",
    "Redirect hops followed with re-attached headers",
)

transient_cancel_retry_counter = Counter(
    "greencard_transient_cancel_retries_total",
    "Requests retried after a session-level cancellation",
    ["operation"],
)

# Profile controller metrics
profile_fetch_counter = Counter(
    "greencard_profile_fetch_total",
    "Profile load/refresh runs",
    ["mode", "outcome"],  # mode: load | refresh; outcome: success | failure | suppressed | cancelled | stale
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_profile_fetch(mode: str, outcome: str) -> None:
    """Record the outcome of one controller run"""
    profile_fetch_counter.labels(mode=mode, outcome=outcome).inc()

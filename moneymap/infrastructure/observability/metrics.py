"""Prometheus metrics for reconciliation outcomes and request latency"""

from prometheus_client import Counter, Histogram

# Reconciler metrics
reconciler_insert_counter = Counter(
    "moneymap_reconciler_inserts_total",
    "Rows inserted by the recurring contribution reconciler",
    ["obligation"],  # EPF | SIP | SIP_SKIP
)

reconciler_failure_counter = Counter(
    "moneymap_reconciler_failures_total",
    "Reconciler reads or writes that failed and were skipped",
    ["obligation", "stage"],  # stage: read | write | conflict
)

reconciliation_duration_histogram = Histogram(
    "moneymap_reconciliation_duration_seconds",
    "Time spent in one reconciliation pass",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_inserts(obligation: str, count: int) -> None:
    """Record rows added for one obligation"""
    if count > 0:
        reconciler_insert_counter.labels(obligation=obligation).inc(count)


def record_failure(obligation: str, stage: str) -> None:
    reconciler_failure_counter.labels(obligation=obligation, stage=stage).inc()

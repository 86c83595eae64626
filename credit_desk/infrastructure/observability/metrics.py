"""Prometheus metrics for credit assessments, imports and HTTP latency"""

from prometheus_client import Counter, Histogram

# Assessment metrics
assessment_counter = Counter(
    "credit_desk_assessment_total",
    "Credit assessments computed",
    ["risk_level"],  # low | medium | high
)

credit_limit_bucket_counter = Counter(
    "credit_desk_credit_limit_bucket",
    "Suggested credit limits by bucket",
    ["bucket"],  # 0, 1-10k, 10k-50k, 50k+
)

# Import metrics
import_rows_counter = Counter(
    "credit_desk_import_rows_total",
    "Import rows processed",
    ["outcome"],  # accepted | rejected
)

import_failures_counter = Counter(
    "credit_desk_import_failures_total",
    "Import batches rejected before row processing",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(risk_level: str, credit_limit: int) -> None:
    """Record risk tier and limit distribution"""
    assessment_counter.labels(risk_level=risk_level).inc()

    if credit_limit <= 0:
        bucket = "0"
    elif credit_limit <= 10_000:
        bucket = "1-10k"
    elif credit_limit <= 50_000:
        bucket = "10k-50k"
    else:
        bucket = "50k+"

    credit_limit_bucket_counter.labels(bucket=bucket).inc()


def record_import(accepted: int, rejected: int) -> None:
    import_rows_counter.labels(outcome="accepted").inc(accepted)
    import_rows_counter.labels(outcome="rejected").inc(rejected)

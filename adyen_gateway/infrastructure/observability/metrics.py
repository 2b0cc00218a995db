"""Prometheus metrics for Adyen API calls and payment outcomes"""

from prometheus_client import Counter, Histogram

# Adyen API metrics
adyen_request_counter = Counter(
    "adyen_api_requests_total",
    "Adyen Checkout API calls",
    ["endpoint", "outcome"],  # success | error
)

adyen_latency_histogram = Histogram(
    "adyen_api_latency_seconds",
    "Adyen Checkout API response time",
    ["endpoint"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Payment metrics
payment_status_counter = Counter(
    "adyen_payment_status_total",
    "Payment statuses set by the gateway",
    ["status"],
)

payment_flow_counter = Counter(
    "adyen_payment_start_total",
    "Payments started by flow",
    ["flow"],  # api | session
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_status(status: str) -> None:
    payment_status_counter.labels(status=status).inc()

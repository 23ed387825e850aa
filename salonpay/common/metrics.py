"""Prometheus metric definitions for the checkout broker."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


intent_requests_total = Counter(
    "intent_requests_total",
    "Total intent creation requests",
    ["service", "mode"],
)
intent_failures_total = Counter(
    "intent_failures_total",
    "Intent creation requests that failed at the processor",
    ["service", "mode"],
)
processor_call_seconds = Histogram(
    "processor_call_seconds",
    "Latency of single calls to the payment processor",
    ["service", "operation"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")

"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking workflow metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking workflow invocations',
    ['operation', 'outcome']  # create/update, success/not_found/payment_required/...
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking workflow latency',
    ['operation'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Database metrics
db_operations = Counter(
    'db_operations_total',
    'Total database operations',
    ['operation']  # read, write
)


def metrics_endpoint() -> Response:
    """Prometheus scrape endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(operation: str, outcome: str):
    """Record a booking workflow outcome. Outcome: success or an error kind."""
    booking_attempts.labels(operation=operation, outcome=outcome).inc()


def record_db_operation(operation: str):
    """Record database operation. Operation: read, write"""
    db_operations.labels(operation=operation).inc()

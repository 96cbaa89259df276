"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_requests = Counter(
    'desk_booking_requests_total',
    'Booking creation requests',
    ['outcome']  # created, partial, conflict
)

bookings_created = Counter(
    'desk_bookings_created_total',
    'Booking rows written (one per occurrence)'
)

cancellations = Counter(
    'desk_booking_cancellations_total',
    'Bookings removed',
    ['source']  # single, series
)

plan_latency = Histogram(
    'desk_booking_plan_seconds',
    'Time to build a booking plan and its suggestions',
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1]
)

# Optimistic concurrency on seat revisions
seat_revision_retries = Counter(
    'desk_booking_seat_revision_retries_total',
    'Read-plan-write sequences retried after a seat revision clash'
)

# Cache metrics
cache_operations = Counter(
    'desk_booking_cache_operations_total',
    'Analytics cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

# HTTP
request_latency = Histogram(
    'desk_booking_http_request_seconds',
    'HTTP request latency',
    ['method', 'route'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)


def metrics_endpoint() -> Response:
    """Prometheus scrape payload."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_request(outcome: str, created: int = 0):
    """Record a booking request. Outcome: created, partial, conflict"""
    booking_requests.labels(outcome=outcome).inc()
    if created:
        bookings_created.inc(created)


def record_cancellations(source: str, count: int = 1):
    cancellations.labels(source=source).inc(count)


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()

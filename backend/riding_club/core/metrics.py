"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Submission metrics
booking_submissions = Counter(
    'booking_submissions_total',
    'Booking submissions by requester role and outcome',
    ['role', 'outcome']  # member/admin, complete/partial/failed/invalid
)

booking_instances_created = Counter(
    'booking_instances_created_total',
    'Booking rows written, including every week of a subscription'
)

# Group lifecycle metrics
group_fanout = Counter(
    'group_fanout_total',
    'Group lifecycle operations by outcome',
    ['operation', 'outcome']  # approve/reject/delete, complete/partial/failed
)

group_fanout_size = Histogram(
    'group_fanout_size',
    'Number of bookings touched per group operation',
    buckets=[1, 2, 4, 8, 13, 26, 53]
)

# Gateway metrics
gateway_calls = Counter(
    'gateway_calls_total',
    'Persistence gateway calls by serving tier',
    ['tier']  # remote, local
)

gateway_fallbacks = Counter(
    'gateway_fallbacks_total',
    'Remote store failures that demoted the gateway to the local store'
)

gateway_demoted = Gauge(
    'gateway_demoted',
    'Gateway tier state (1=serving from local store, 0=remote)'
)

remote_latency = Histogram(
    'gateway_remote_latency_seconds',
    'Remote store call latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0]
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_submission(role: str, outcome: str):
    booking_submissions.labels(role=role, outcome=outcome).inc()


def record_fanout(operation: str, outcome: str, size: int):
    group_fanout.labels(operation=operation, outcome=outcome).inc()
    group_fanout_size.observe(size)


def record_gateway_call(tier: str):
    gateway_calls.labels(tier=tier).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()

"""
Prometheus metrics

Everything registers on the default registry and is exposed by ``/metrics``.
"""
from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Gauge, Histogram,
                               generate_latest)

_HTTP_LABELS = ['method', 'endpoint', 'status_code']
_DB_LABELS = ['operation', 'table']

# HTTP

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    _HTTP_LABELS
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    _HTTP_LABELS,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'HTTP responses with status >= 400',
    _HTTP_LABELS + ['error_type']
)

# TeslaMate database reads

db_queries_total = Counter(
    'db_queries_total',
    'Statements executed against the TeslaMate database',
    _DB_LABELS
)

db_query_duration_seconds = Histogram(
    'db_query_duration_seconds',
    'Statement duration in seconds',
    _DB_LABELS,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)
)

db_connection_pool_size = Gauge(
    'db_connection_pool_size',
    'Pooled connections by state',
    ['state']  # active, idle
)

# Car status lookups

car_status_requests_total = Counter(
    'car_status_requests_total',
    'Car status lookups by outcome',
    ['outcome']  # success, not_found, no_data, data_access_error
)

car_status_lookup_duration_seconds = Histogram(
    'car_status_lookup_duration_seconds',
    'Time from existence check to converted response',
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

car_status_resolved_state_total = Counter(
    'car_status_resolved_state_total',
    'Vehicle states returned by status lookups',
    ['state', 'source']  # source: recorded, inferred
)

# Logging

log_messages_total = Counter(
    'log_messages_total',
    'Log records emitted by level',
    ['level']
)


def get_metrics() -> bytes:
    """Current metrics in Prometheus text format"""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST

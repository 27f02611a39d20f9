"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

quotes_computed = Counter(
    'quotes_computed_total',
    'Total quotes computed',
    ['immediate'],
    registry=registry
)

quote_cache = Counter(
    'quote_cache_total',
    'Quote cache lookups',
    ['result'],
    registry=registry
)

search_requests = Counter(
    'search_requests_total',
    'Total hybrid search requests',
    ['lexical_fallback'],
    registry=registry
)

backend_calls = Counter(
    'backend_calls_total',
    'Total calls to the backend service',
    ['operation', 'status'],
    registry=registry
)

webhook_deliveries = Counter(
    'webhook_deliveries_total',
    'Total webhook delivery attempts',
    ['status'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    return generate_latest(registry).decode('utf-8')

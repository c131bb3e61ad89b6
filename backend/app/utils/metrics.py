"""
Prometheus metrics definitions for the API.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Upload metrics
uploads_total = Counter(
    'uploads_total',
    'Total uploaded files',
    ['backend', 'status']
)

upload_bytes = Histogram(
    'upload_bytes',
    'Size of stored uploads in bytes',
    ['backend'],
    buckets=[10_000, 100_000, 250_000, 500_000, 1_000_000, 2_500_000, 5_242_880]
)

# Listing metrics
properties_created_total = Counter(
    'properties_created_total',
    'Total property listings created'
)

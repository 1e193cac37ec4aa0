from prometheus_client import Counter, Histogram

# Basic metrics with proper buckets for latency
REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"])
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0, float("inf"))
)
ORDERS_TOTAL = Counter("orders_placed_total", "Order placement attempts by outcome", ["result"])


def endpoint_label(path: str) -> str:
    """Collapse dynamic path segments so label cardinality stays bounded."""
    if path.startswith("/api/products/"):
        return "/api/products/<id>"
    if path.startswith("/api/orders/") and path.endswith("/status"):
        return "/api/orders/<id>/status"
    if path.startswith("/api/upload/image/"):
        return "/api/upload/image/<filename>"
    if path.startswith("/images/"):
        return "/images/*"
    return path

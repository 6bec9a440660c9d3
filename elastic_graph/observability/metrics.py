"""Prometheus metric definitions for graph store observability."""

from prometheus_client import Counter, Histogram

# --- Bucket configurations ---

OPERATION_LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)

# --- Element operation metrics ---

OPERATION_DURATION = Histogram(
    "elastic_graph_operation_duration_seconds",
    "Graph element operation latency in seconds",
    ["operation"],
    buckets=OPERATION_LATENCY_BUCKETS,
)

OPERATION_ERRORS = Counter(
    "elastic_graph_operation_errors_total",
    "Graph element operations that raised, by error code",
    ["operation", "code"],
)

# --- Backend metrics ---

BACKEND_ERRORS = Counter(
    "elastic_graph_backend_errors_total",
    "Storage backend request failures",
    ["operation", "error"],
)

SEARCH_HITS = Counter(
    "elastic_graph_search_hits_total",
    "Documents returned by search requests",
    ["kind"],
)

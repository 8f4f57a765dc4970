"""Prometheus metrics for the siphon."""

from shared.metrics import get_counter, get_gauge, get_histogram

_SERVICE = "siphon"

METRICS_LISTED = get_counter(
    "metrics_listed_total", "Metrics returned by ListMetrics", _SERVICE
)
LISTING_PAGES = get_counter(
    "listing_pages_total", "ListMetrics pages received", _SERVICE
)
LISTING_ERRORS = get_counter(
    "listing_errors_total", "ListMetrics calls that failed", _SERVICE
)
TASK_OUTCOMES = get_counter(
    "task_outcomes_total",
    "Fetch+persist tasks by terminal state",
    _SERVICE,
    labelnames=["outcome"],
)
DATAPOINTS_WRITTEN = get_counter(
    "datapoints_written_total", "Datapoints appended to output files", _SERVICE
)
BYTES_WRITTEN = get_counter(
    "bytes_written_total", "Bytes appended to output files", _SERVICE
)

FETCH_LATENCY = get_histogram(
    "fetch_latency_seconds", "GetMetricStatistics call latency", _SERVICE
)

IN_FLIGHT_TASKS = get_gauge(
    "in_flight_tasks", "Tasks currently fetching or persisting", _SERVICE
)
QUEUE_DEPTH = get_gauge("queue_depth", "Metrics waiting for a worker", _SERVICE)

"""Per-metric GetMetricStatistics call."""

from __future__ import annotations

from typing import Any, Dict, Protocol

from shared.constants import Statistics
from src.core.errors import FetchError
from src.domain.models import MetricIdentity, StatisticResult, TimeWindow
from src.metrics import FETCH_LATENCY
from src.utils.concurrency import run_blocking


class StatisticsSource(Protocol):
    def get_metric_statistics(self, **params: Any) -> Dict[str, Any]: ...


def build_request(
    metric: MetricIdentity, window: TimeWindow, unit: str | None
) -> Dict[str, Any]:
    """Fixed query shape: the same five statistics for every metric."""
    params: Dict[str, Any] = {
        "Namespace": metric.namespace,
        "MetricName": metric.name,
        "Dimensions": [d.as_api() for d in metric.dimensions],
        "StartTime": window.start,
        "EndTime": window.end,
        "Period": window.period_seconds,
        "Statistics": Statistics.all(),
    }
    if unit:
        params["Unit"] = unit
    return params


async def fetch_statistics(
    source: StatisticsSource,
    metric: MetricIdentity,
    window: TimeWindow,
    unit: str | None,
) -> StatisticResult:
    params = build_request(metric, window, unit)
    try:
        with FETCH_LATENCY.time():
            response = await run_blocking(source.get_metric_statistics, **params)
        return StatisticResult.from_api(metric, response)
    except Exception as exc:  # noqa: BLE001
        raise FetchError(metric, exc) from exc

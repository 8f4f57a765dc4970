import time
from datetime import datetime, timedelta, timezone

import pytest
from src.core.config import RunConfig
from src.domain.models import TimeWindow

UTC = timezone.utc


class FakeCloudWatch:
    """In-memory stand-in for CloudWatchClient.

    ``datapoints`` maps metric name -> datapoint list; metrics not in the map
    return no datapoints. Listing raises when it reaches ``fail_listing_at``.
    """

    def __init__(
        self,
        pages,
        datapoints=None,
        fail_listing_at=None,
        fail_metrics=(),
        delay=0.0,
        on_fetch=None,
    ):
        self.pages = pages
        self.datapoints = datapoints or {}
        self.fail_listing_at = fail_listing_at
        self.fail_metrics = set(fail_metrics)
        self.delay = delay
        self.on_fetch = on_fetch
        self.requests = []

    def iter_metric_pages(self):
        for index, page in enumerate(self.pages):
            if index == self.fail_listing_at:
                raise RuntimeError("AccessDenied: not authorized to ListMetrics")
            yield page

    def get_metric_statistics(self, **params):
        self.requests.append(params)
        name = params["MetricName"]
        if self.on_fetch is not None:
            self.on_fetch(params)
        if self.delay:
            time.sleep(self.delay)
        if name in self.fail_metrics:
            raise RuntimeError(f"Throttling: rate exceeded for {name}")
        return {
            "Label": name,
            "Datapoints": self.datapoints.get(name, []),
            "ResponseMetadata": {"HTTPStatusCode": 200},
        }


@pytest.fixture
def fake_cloudwatch():
    return FakeCloudWatch


@pytest.fixture
def metric_payload():
    def _make(namespace, name, dimensions=()):
        return {
            "Namespace": namespace,
            "MetricName": name,
            "Dimensions": [{"Name": n, "Value": v} for n, v in dimensions],
        }

    return _make


@pytest.fixture
def datapoints():
    def _make(count, unit="Seconds"):
        start = datetime(2016, 1, 18, tzinfo=UTC)
        return [
            {
                "Timestamp": start + timedelta(minutes=5 * i),
                "SampleCount": 5.0,
                "Average": 1.5 + i,
                "Sum": 7.5 + 5 * i,
                "Minimum": 1.0,
                "Maximum": 2.0 + i,
                "Unit": unit,
            }
            for i in range(count)
        ]

    return _make


@pytest.fixture
def window():
    return TimeWindow(
        start=datetime(2016, 1, 18, tzinfo=UTC),
        end=datetime(2016, 1, 20, tzinfo=UTC),
        period_seconds=300,
    )


@pytest.fixture
def run_config(tmp_path, window):
    return RunConfig(
        region="us-east-1",
        profile=None,
        base_dir=tmp_path / "cloudwatch",
        window=window,
        unit="Seconds",
        max_concurrency=4,
        queue_max_size=10,
        task_timeout_seconds=None,
    )

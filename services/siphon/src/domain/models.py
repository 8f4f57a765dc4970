"""CloudWatch domain models.

Field aliases follow the CloudWatch API casing so listing and statistics
payloads validate directly and persisted documents keep the API's shape.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Dimension(_ApiModel):
    name: str = Field(alias="Name")
    value: str = Field(alias="Value")

    def as_api(self) -> Dict[str, str]:
        return {"Name": self.name, "Value": self.value}


class MetricIdentity(_ApiModel):
    """One time series as returned by ListMetrics."""

    namespace: str = Field(alias="Namespace")
    name: str = Field(alias="MetricName")
    dimensions: Tuple[Dimension, ...] = Field(default=(), alias="Dimensions")

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "MetricIdentity":
        return cls.model_validate(payload)

    @property
    def first_dimension(self) -> Optional[Dimension]:
        return self.dimensions[0] if self.dimensions else None

    def describe(self) -> str:
        dims = ",".join(f"{d.name}={d.value}" for d in self.dimensions)
        return f"{self.namespace}/{self.name}[{dims}]"

    def log_context(self) -> Dict[str, Any]:
        return {
            "namespace": self.namespace,
            "metric_name": self.name,
            "dimensions": [d.as_api() for d in self.dimensions],
        }


class TimeWindow(_ApiModel):
    """Query window shared by every task of one run."""

    start: datetime
    end: datetime
    period_seconds: int


class Datapoint(_ApiModel):
    timestamp: datetime = Field(alias="Timestamp")
    sample_count: Optional[float] = Field(default=None, alias="SampleCount")
    average: Optional[float] = Field(default=None, alias="Average")
    sum: Optional[float] = Field(default=None, alias="Sum")
    minimum: Optional[float] = Field(default=None, alias="Minimum")
    maximum: Optional[float] = Field(default=None, alias="Maximum")
    unit: Optional[str] = Field(default=None, alias="Unit")


class StatisticResult(_ApiModel):
    """GetMetricStatistics output enriched with the metric it belongs to."""

    namespace: str = Field(alias="Namespace")
    metric_name: str = Field(alias="MetricName")
    dimensions: Tuple[Dimension, ...] = Field(default=(), alias="Dimensions")
    label: Optional[str] = Field(default=None, alias="Label")
    datapoints: List[Datapoint] = Field(default_factory=list, alias="Datapoints")

    @classmethod
    def from_api(
        cls, metric: MetricIdentity, payload: Dict[str, Any]
    ) -> "StatisticResult":
        return cls(
            namespace=metric.namespace,
            metric_name=metric.name,
            dimensions=metric.dimensions,
            label=payload.get("Label"),
            datapoints=[
                Datapoint.model_validate(dp) for dp in payload.get("Datapoints") or []
            ],
        )

    @property
    def is_empty(self) -> bool:
        return not self.datapoints

    def to_json(self) -> bytes:
        """Serialize as one compact JSON document."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import PositiveFloat, PositiveInt

from shared.config import BaseServiceConfig
from shared.constants import Units
from src.domain.models import TimeWindow
from src.domain.window import resolve_window


class Settings(BaseServiceConfig):
    # Output
    siphon_base_dir: str = "/tmp/cloudwatch"

    # Query window
    siphon_period_seconds: PositiveInt = 300
    siphon_start_date: str | None = None  # 2016-Jan-18 or ISO-8601
    siphon_end_date: str | None = None
    siphon_duration_hours: PositiveFloat = 24.0
    siphon_unit: str = Units.SECONDS  # empty string drops the unit filter

    # Concurrency
    siphon_max_concurrency: PositiveInt = 32
    siphon_queue_max_size: PositiveInt = 1000
    siphon_task_timeout_seconds: PositiveFloat | None = None

    # Metrics exporter, disabled unless a port is given
    siphon_metrics_port: int | None = None

    otel_service_name: str = "siphon"


@dataclass(frozen=True)
class RunConfig:
    """Immutable per-run configuration handed to every pipeline component."""

    region: str
    profile: str | None
    base_dir: Path
    window: TimeWindow
    unit: str | None
    max_concurrency: int
    queue_max_size: int
    task_timeout_seconds: float | None

    @classmethod
    def from_settings(
        cls, settings: Settings, now: datetime | None = None
    ) -> "RunConfig":
        window = resolve_window(
            start_date=settings.siphon_start_date,
            end_date=settings.siphon_end_date,
            duration_hours=settings.siphon_duration_hours,
            period_seconds=settings.siphon_period_seconds,
            now=now,
        )
        return cls(
            region=settings.aws_region,
            profile=settings.aws_profile,
            base_dir=Path(settings.siphon_base_dir),
            window=window,
            unit=settings.siphon_unit or None,
            max_concurrency=settings.siphon_max_concurrency,
            queue_max_size=settings.siphon_queue_max_size,
            task_timeout_seconds=settings.siphon_task_timeout_seconds,
        )

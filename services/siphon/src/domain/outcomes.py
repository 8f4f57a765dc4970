from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.domain.models import MetricIdentity, TimeWindow


class TaskOutcome(str, Enum):
    """Terminal state of one fetch+persist task."""

    PERSISTED = "persisted"
    NO_DATA = "no_data"
    FETCH_FAILED = "fetch_failed"
    PERSIST_FAILED = "persist_failed"
    TIMED_OUT = "timed_out"
    SKIPPED = "skipped"

    @property
    def is_failure(self) -> bool:
        return self in (
            TaskOutcome.FETCH_FAILED,
            TaskOutcome.PERSIST_FAILED,
            TaskOutcome.TIMED_OUT,
        )


@dataclass(frozen=True)
class TaskResult:
    metric: MetricIdentity
    outcome: TaskOutcome
    datapoints: int = 0
    path: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class ListingReport:
    """What the lister saw before it stopped."""

    total_metrics: int = 0
    pages: int = 0
    error: Optional[str] = None
    stopped_early: bool = False
    # listed but never queued because the stop signal arrived mid-page
    unqueued: List[MetricIdentity] = field(default_factory=list)


@dataclass
class RunSummary:
    window: TimeWindow
    total_metrics: int = 0
    pages: int = 0
    listing_error: Optional[str] = None
    aborted: bool = False
    outcomes: Counter = field(default_factory=Counter)
    datapoints_written: int = 0

    def record(self, result: TaskResult) -> None:
        self.outcomes[result.outcome] += 1
        if result.outcome is TaskOutcome.PERSISTED:
            self.datapoints_written += result.datapoints

    def apply_listing(self, report: ListingReport) -> None:
        self.total_metrics = report.total_metrics
        self.pages = report.pages
        self.listing_error = report.error
        self.aborted = report.stopped_early or bool(report.unqueued)
        for metric in report.unqueued:
            self.record(TaskResult(metric=metric, outcome=TaskOutcome.SKIPPED))

    def count(self, outcome: TaskOutcome) -> int:
        return self.outcomes.get(outcome, 0)

    @property
    def completed(self) -> int:
        return sum(self.outcomes.values())

    @property
    def failed(self) -> int:
        return sum(n for o, n in self.outcomes.items() if o.is_failure)

    def summary_line(self) -> str:
        return (
            f"Got {self.total_metrics} metrics from "
            f"{self.window.start.isoformat()} to {self.window.end.isoformat()}."
        )

    def outcome_line(self) -> str:
        parts = ", ".join(f"{o.value}={self.count(o)}" for o in TaskOutcome)
        line = f"Tasks: {parts}; datapoints_written={self.datapoints_written}"
        if self.listing_error:
            line += f"; listing stopped early: {self.listing_error}"
        return line

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_metrics": self.total_metrics,
            "pages": self.pages,
            "window_start": self.window.start.isoformat(),
            "window_end": self.window.end.isoformat(),
            "period_seconds": self.window.period_seconds,
            "outcomes": {o.value: self.count(o) for o in TaskOutcome},
            "datapoints_written": self.datapoints_written,
            "listing_error": self.listing_error,
            "aborted": self.aborted,
        }

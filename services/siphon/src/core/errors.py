"""Error types raised inside the siphon.

Only ConfigurationError escapes to the entrypoint; FetchError and PersistError
are caught per task and turned into task outcomes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.models import MetricIdentity


class SiphonError(Exception):
    """Base class for siphon errors."""


class ConfigurationError(SiphonError):
    """Invalid settings detected before any work is scheduled."""


class TaskError(SiphonError):
    def __init__(self, metric: "MetricIdentity", cause: BaseException):
        self.metric = metric
        self.cause = cause
        super().__init__(f"{metric.describe()}: {type(cause).__name__}: {cause}")


class FetchError(TaskError):
    """GetMetricStatistics failed for one metric."""


class PersistError(TaskError):
    """Serializing or appending one metric's result failed."""

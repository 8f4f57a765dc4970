"""Siphon logger shim.

Module loggers come from the shared utility; configure_logging switches the
root logger to JSON output using the run's settings.
"""

from __future__ import annotations

import logging

from shared.logging.json import configure_logging as _shared_configure_logging
from shared.logging.logger import get_logger

from .config import Settings


def configure_logging(config: Settings) -> logging.Logger:
    return _shared_configure_logging(
        service=config.otel_service_name,
        level=config.app_log_level,
        environment=config.app_environment,
        redaction_patterns=config.app_log_redaction_patterns,
    )


__all__ = ["configure_logging", "get_logger"]

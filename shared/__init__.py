"""Shared utilities and components for the siphon service."""

from .config import BaseAwsConfig, BaseLoggingConfig, BaseServiceConfig
from .constants import Statistics, Units

__all__ = [
    "Statistics",
    "Units",
    "BaseServiceConfig",
    "BaseLoggingConfig",
    "BaseAwsConfig",
]

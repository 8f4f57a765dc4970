"""Shared configuration base classes.

Common settings (logging, AWS scope) kept apart from the service-specific
collection settings so they can be reused by any future tooling.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "access_key",
        "authorization",
        "credential",
        "session_token",
    ]
    app_environment: str = "production"


class BaseAwsConfig(BaseSettings):
    """AWS scope shared by everything that talks to CloudWatch."""

    aws_region: str = "us-east-1"
    aws_profile: str | None = None


class BaseServiceConfig(BaseLoggingConfig, BaseAwsConfig):
    """Base configuration combining logging and AWS settings.

    Services should inherit from this and add their own specific settings.
    The otel_service_name should be overridden by each service.
    """

    otel_service_name: str = "unknown"  # Should be overridden by service


__all__ = ["BaseLoggingConfig", "BaseAwsConfig", "BaseServiceConfig"]

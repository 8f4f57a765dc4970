from prometheus_client import start_http_server

from src.core.config import Settings
from src.core.logger import configure_logging, get_logger

logger = get_logger("startup")


def initialize_application(config: Settings) -> None:
    """Initialize logging and the optional metrics exporter (order preserved for tests)."""
    logger.info("initializing_application")
    configure_logging(config)
    if config.siphon_metrics_port:
        start_http_server(config.siphon_metrics_port)
        logger.info("metrics_listening", extra={"port": config.siphon_metrics_port})
    logger.info(
        "application_initialized",
        extra={
            "region": config.aws_region,
            "base_dir": config.siphon_base_dir,
            "otel_service": config.otel_service_name,
        },
    )

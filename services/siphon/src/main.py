from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from typing import Any, Dict, Sequence

from pydantic import ValidationError

from src.core.config import RunConfig, Settings
from src.core.errors import ConfigurationError
from src.core.logger import get_logger
from src.domain.outcomes import RunSummary
from src.infrastructure.cloudwatch.client import CloudWatchClient
from src.services.coordinator import SiphonCoordinator
from src.startup import initialize_application
from src.utils.concurrency import install_executor

logger = get_logger("app")

# CLI flag -> settings field; unset flags fall through to env/defaults.
_FLAG_FIELDS = {
    "region": "aws_region",
    "profile": "aws_profile",
    "base_dir": "siphon_base_dir",
    "period": "siphon_period_seconds",
    "start_date": "siphon_start_date",
    "end_date": "siphon_end_date",
    "duration_hours": "siphon_duration_hours",
    "unit": "siphon_unit",
    "max_concurrency": "siphon_max_concurrency",
    "queue_size": "siphon_queue_max_size",
    "task_timeout": "siphon_task_timeout_seconds",
    "metrics_port": "siphon_metrics_port",
    "log_level": "app_log_level",
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cloudwatch-siphon",
        description="Dump CloudWatch statistics for every metric in a region.",
    )
    parser.add_argument("--region", help="AWS region to siphon metrics from.")
    parser.add_argument("--profile", help="Named AWS profile.")
    parser.add_argument(
        "--base-dir", help="Base directory to store the datapoint file structure."
    )
    parser.add_argument(
        "--period", type=int, help="Statistic period in seconds (default 300)."
    )
    parser.add_argument(
        "--start-date", help="Window start, YYYY-Mon-DD (2016-Jan-18) or ISO-8601."
    )
    parser.add_argument("--end-date", help="Window end, same formats as --start-date.")
    parser.add_argument(
        "--duration-hours",
        type=float,
        help="Window length used when a date is missing (default 24).",
    )
    parser.add_argument(
        "--unit", help="Unit filter sent with each query; '' to omit (default Seconds)."
    )
    parser.add_argument("--max-concurrency", type=int, help="Worker count.")
    parser.add_argument("--queue-size", type=int, help="Work queue capacity.")
    parser.add_argument(
        "--task-timeout", type=float, help="Per-metric deadline in seconds."
    )
    parser.add_argument(
        "--metrics-port", type=int, help="Expose Prometheus metrics on this port."
    )
    parser.add_argument("--log-level", help="Log level (default INFO).")
    return parser.parse_args(argv)


def settings_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        field: getattr(args, flag)
        for flag, field in _FLAG_FIELDS.items()
        if getattr(args, flag) is not None
    }


def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event
) -> Dict[int, Any]:
    # Support double signal: first drains, second cancels everything
    state = {"signalled": False}

    def _on_signal(signum, frame):  # noqa: D401
        if not state["signalled"]:
            logger.info("signal_received", extra={"signal": signum, "action": "drain"})
            loop.call_soon_threadsafe(stop_event.set)
            state["signalled"] = True
        else:
            logger.warning(
                "second_signal_exit", extra={"signal": signum, "action": "cancel"}
            )
            for task in asyncio.all_tasks(loop):
                loop.call_soon_threadsafe(task.cancel)

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[sig] = signal.signal(sig, _on_signal)
        except ValueError:  # not on the main thread
            logger.debug("signal_handler_install_failed", extra={"signal": sig})
    return previous


async def _run(config: RunConfig) -> RunSummary:
    loop = asyncio.get_running_loop()
    install_executor(loop, config.max_concurrency + 1)

    client = CloudWatchClient(
        region=config.region,
        profile=config.profile,
        max_pool_connections=config.max_concurrency + 1,
    )

    stop_event = asyncio.Event()
    previous = _install_signal_handlers(loop, stop_event)
    try:
        return await SiphonCoordinator(config, client, stop_event).run()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings(**settings_overrides(args))
        initialize_application(settings)
        config = RunConfig.from_settings(settings)
    except (ValidationError, ConfigurationError) as exc:
        logger.error("invalid_configuration", extra={"error": str(exc)})
        print(f"invalid configuration: {exc}", file=sys.stderr)
        return 1

    try:
        summary = asyncio.run(_run(config))
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("siphon_cancelled")
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("fatal_error_main")
        return 1

    print(summary.summary_line())
    print(summary.outcome_line())
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

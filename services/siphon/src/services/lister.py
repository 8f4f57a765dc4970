"""Metric listing: feed every listed metric into the work queue."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

from src.core.logger import get_logger
from src.domain.models import MetricIdentity
from src.domain.outcomes import ListingReport
from src.metrics import LISTING_ERRORS, LISTING_PAGES, METRICS_LISTED, QUEUE_DEPTH
from src.utils.concurrency import run_blocking

logger = get_logger("siphon.lister")


class MetricSource(Protocol):
    def iter_metric_pages(self) -> Any: ...


async def enqueue_metrics(
    source: MetricSource,
    queue: asyncio.Queue,
    stop_event: asyncio.Event,
) -> ListingReport:
    """Walk every ListMetrics page and put one work item per metric.

    A listing failure stops enumeration but is not raised: whatever was
    already queued still runs, and the report carries the count so far.
    """
    report = ListingReport()
    pages = iter(source.iter_metric_pages())
    logger.info("metric_listing_started")

    while not stop_event.is_set():
        try:
            raw_page = await run_blocking(next, pages, None)
            if raw_page is None:
                break
            metrics = [MetricIdentity.from_api(m) for m in raw_page]
        except Exception as exc:  # noqa: BLE001
            report.error = f"{type(exc).__name__}: {exc}"
            LISTING_ERRORS.inc()
            logger.exception(
                "metric_listing_failed",
                extra={
                    "pages": report.pages,
                    "total_metrics": report.total_metrics,
                    "error": str(exc),
                },
            )
            break

        report.pages += 1
        report.total_metrics += len(metrics)
        LISTING_PAGES.inc()
        METRICS_LISTED.inc(len(metrics))
        logger.debug(
            "metric_page_received",
            extra={"page": report.pages, "page_size": len(metrics)},
        )

        for index, metric in enumerate(metrics):
            if stop_event.is_set():
                report.unqueued.extend(metrics[index:])
                break
            await queue.put(metric)
            QUEUE_DEPTH.set(queue.qsize())
    else:
        report.stopped_early = True
        logger.warning(
            "metric_listing_aborted",
            extra={"pages": report.pages, "total_metrics": report.total_metrics},
        )

    logger.info(
        "metric_listing_finished",
        extra={"pages": report.pages, "total_metrics": report.total_metrics},
    )
    return report

"""Fan-out/fan-in orchestration of fetch+persist tasks.

The lister fills a bounded queue; a fixed pool of workers drains it. Every
dequeued metric reaches exactly one terminal TaskOutcome, and run() only
returns after the lister is done and every worker has drained its share.
"""

from __future__ import annotations

import asyncio
from typing import Any

from src.core.config import RunConfig
from src.core.errors import FetchError, PersistError
from src.core.logger import get_logger
from src.domain.models import MetricIdentity, StatisticResult
from src.domain.outcomes import RunSummary, TaskOutcome, TaskResult
from src.metrics import (
    BYTES_WRITTEN,
    DATAPOINTS_WRITTEN,
    IN_FLIGHT_TASKS,
    QUEUE_DEPTH,
    TASK_OUTCOMES,
)
from src.services.fetcher import fetch_statistics
from src.services.lister import enqueue_metrics
from src.services.persister import append_result, output_path
from src.utils.concurrency import run_blocking

logger = get_logger("siphon.coordinator")

_DONE = object()  # one per worker, queued after the last metric


class SiphonCoordinator:
    def __init__(
        self,
        config: RunConfig,
        client: Any,
        stop_event: asyncio.Event | None = None,
    ):
        self.config = config
        self.client = client
        self.stop_event = stop_event or asyncio.Event()

    async def run(self) -> RunSummary:
        summary = RunSummary(window=self.config.window)
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.config.queue_max_size)
        workers = [
            asyncio.create_task(self._worker(queue, summary), name=f"siphon-worker-{i}")
            for i in range(self.config.max_concurrency)
        ]
        logger.info(
            "siphon_run_started",
            extra={
                "region": self.config.region,
                "workers": self.config.max_concurrency,
                "window_start": self.config.window.start.isoformat(),
                "window_end": self.config.window.end.isoformat(),
                "period_seconds": self.config.window.period_seconds,
            },
        )

        try:
            listing = await enqueue_metrics(self.client, queue, self.stop_event)
        except BaseException:
            for worker in workers:
                worker.cancel()
            raise

        for _ in workers:
            await queue.put(_DONE)
        await asyncio.gather(*workers)

        summary.apply_listing(listing)
        if listing.unqueued:
            TASK_OUTCOMES.labels(outcome=TaskOutcome.SKIPPED.value).inc(
                len(listing.unqueued)
            )
        logger.info("siphon_run_completed", extra=summary.as_dict())
        return summary

    async def _worker(self, queue: asyncio.Queue, summary: RunSummary) -> None:
        while True:
            item = await queue.get()
            if item is _DONE:
                queue.task_done()
                return
            QUEUE_DEPTH.set(queue.qsize())
            try:
                if self.stop_event.is_set():
                    result = TaskResult(metric=item, outcome=TaskOutcome.SKIPPED)
                else:
                    result = await self._run_task(item)
            except Exception as exc:  # noqa: BLE001
                # keep the worker alive so the queue keeps draining
                logger.exception(
                    "task_crashed", extra={**item.log_context(), "error": str(exc)}
                )
                result = TaskResult(
                    metric=item, outcome=TaskOutcome.FETCH_FAILED, error=str(exc)
                )
            finally:
                queue.task_done()
            summary.record(result)
            TASK_OUTCOMES.labels(outcome=result.outcome.value).inc()

    async def _run_task(self, metric: MetricIdentity) -> TaskResult:
        IN_FLIGHT_TASKS.inc()
        try:
            return await self._fetch_and_persist(metric)
        finally:
            IN_FLIGHT_TASKS.dec()

    async def _fetch(self, metric: MetricIdentity) -> StatisticResult:
        fetch = fetch_statistics(
            self.client, metric, self.config.window, self.config.unit
        )
        timeout = self.config.task_timeout_seconds
        if timeout is None:
            return await fetch
        return await asyncio.wait_for(fetch, timeout)

    async def _fetch_and_persist(self, metric: MetricIdentity) -> TaskResult:
        # The deadline covers the fetch only; a started append always finishes.
        try:
            result = await self._fetch(metric)
        except asyncio.TimeoutError:
            timeout = self.config.task_timeout_seconds
            logger.warning(
                "task_timed_out",
                extra={**metric.log_context(), "timeout_seconds": timeout},
            )
            return TaskResult(
                metric=metric,
                outcome=TaskOutcome.TIMED_OUT,
                error=f"exceeded {timeout}s",
            )
        except FetchError as exc:
            logger.error(
                "fetch_failed", extra={**metric.log_context(), "error": str(exc.cause)}
            )
            return TaskResult(
                metric=metric, outcome=TaskOutcome.FETCH_FAILED, error=str(exc)
            )

        if result.is_empty:
            logger.debug("no_datapoints", extra=metric.log_context())
            return TaskResult(metric=metric, outcome=TaskOutcome.NO_DATA)

        path = output_path(self.config.base_dir, metric)
        try:
            written = await run_blocking(append_result, path, metric, result)
        except PersistError as exc:
            logger.error(
                "persist_failed",
                extra={
                    **metric.log_context(),
                    "path": str(path),
                    "error": str(exc.cause),
                },
            )
            return TaskResult(
                metric=metric,
                outcome=TaskOutcome.PERSIST_FAILED,
                path=path,
                error=str(exc),
            )

        DATAPOINTS_WRITTEN.inc(len(result.datapoints))
        BYTES_WRITTEN.inc(written)
        logger.info(
            "datapoints_written",
            extra={"datapoints": len(result.datapoints), "path": str(path)},
        )
        return TaskResult(
            metric=metric,
            outcome=TaskOutcome.PERSISTED,
            datapoints=len(result.datapoints),
            path=path,
        )

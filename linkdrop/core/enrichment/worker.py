"""
Enrichment worker pool.

An asyncio.Queue drained by a fixed number of worker tasks. Submission
only enqueues. The worker loop is the single place where enrichment
failures are caught, logged, and recorded as FAILED; nothing escapes it.

Dependencies: asyncio, linkdrop.core.enrichment
System role: Background execution of link enrichment
"""

import asyncio
import logging

from linkdrop.boundary.db.models.file_model import MetadataStatus
from linkdrop.core.enrichment.enricher import EnrichmentTask, LinkEnricher
from linkdrop.core.enrichment.state_machine import EnrichmentStateMachine
from linkdrop.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class EnrichmentWorker:
    """Queue-backed pool running LinkEnricher tasks concurrently."""

    def __init__(
        self,
        enricher: LinkEnricher,
        state_machine: EnrichmentStateMachine,
        concurrency: int = 4,
    ) -> None:
        self.enricher = enricher
        self.state_machine = state_machine
        self.concurrency = max(1, concurrency)
        self.queue: asyncio.Queue[EnrichmentTask] = asyncio.Queue()
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def start(self) -> None:
        """Spawn worker tasks on the running event loop."""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._run(index), name=f"enrichment-worker-{index}")
            for index in range(self.concurrency)
        ]
        logger.info("Enrichment worker started", extra={"concurrency": self.concurrency})

    async def stop(self) -> None:
        """Cancel worker tasks. Queued tasks that never started are dropped."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info(
            "Enrichment worker stopped",
            extra={"dropped_tasks": self.queue.qsize()},
        )

    def enqueue(self, task: EnrichmentTask) -> None:
        """Schedule a task without waiting for it."""
        self.queue.put_nowait(task)
        logger.debug(
            "Enrichment task queued",
            extra={"record_id": str(task.record_id), "reentry": task.reentry},
        )

    async def join(self) -> None:
        """Wait until every queued task has been processed."""
        await self.queue.join()

    async def _run(self, index: int) -> None:
        while True:
            task = await self.queue.get()
            try:
                await self.enricher.run(task)
            except Exception as e:
                log_exception_with_context(
                    logger,
                    "Link enrichment failed",
                    e,
                    worker=index,
                    record_id=str(task.record_id),
                    url=task.url,
                )
                await self._mark_failed(task)
            finally:
                self.queue.task_done()

    async def _mark_failed(self, task: EnrichmentTask) -> None:
        try:
            await self.state_machine.transition(task.record_id, MetadataStatus.FAILED, abort=True)
        except Exception as e:
            log_exception_with_context(
                logger,
                "Could not record enrichment failure",
                e,
                record_id=str(task.record_id),
            )

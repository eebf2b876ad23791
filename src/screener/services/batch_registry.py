import asyncio
import logging
import uuid

from screener.services.batch_orchestrator import BatchOrchestrator, BatchRun

logger = logging.getLogger(__name__)


class BatchRegistry:
    """Keeps submitted runs and their background tasks alive.

    Once more than ``max_runs`` runs are held, the oldest finished ones are
    evicted when a new run is submitted. Runs still in flight are never evicted.
    """

    def __init__(self, max_runs: int = 10) -> None:
        self.max_runs = max_runs
        self._runs: dict[uuid.UUID, BatchRun] = {}
        self._tasks: dict[uuid.UUID, asyncio.Task[BatchRun]] = {}

    def __len__(self) -> int:
        return len(self._runs)

    def get(self, batch_id: uuid.UUID) -> BatchRun | None:
        return self._runs.get(batch_id)

    def submit(self, orchestrator: BatchOrchestrator, batch: BatchRun) -> asyncio.Task[BatchRun]:
        self._runs[batch.id] = batch
        self._evict_finished()
        task = asyncio.create_task(orchestrator.process(batch), name=f"batch-{batch.id}")
        self._tasks[batch.id] = task
        task.add_done_callback(lambda t: self._on_done(batch.id, t))
        return task

    def _evict_finished(self) -> None:
        excess = len(self._runs) - self.max_runs
        if excess <= 0:
            return
        # dicts keep insertion order, so the oldest runs come first
        stale = [batch_id for batch_id, run in self._runs.items() if run.finished][:excess]
        for batch_id in stale:
            del self._runs[batch_id]
        if stale:
            logger.info("Evicted %d finished batch(es)", len(stale))

    def _on_done(self, batch_id: uuid.UUID, task: asyncio.Task[BatchRun]) -> None:
        self._tasks.pop(batch_id, None)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Batch %s aborted: %s", batch_id, task.exception())

    async def wait(self, batch_id: uuid.UUID) -> BatchRun | None:
        """Wait for a submitted run to finish; returns None for unknown ids."""
        task = self._tasks.get(batch_id)
        if task is not None:
            await asyncio.shield(task)
        return self._runs.get(batch_id)

    async def drain(self, timeout: float) -> int:
        """Wait up to ``timeout`` seconds for in-flight runs.

        Returns how many runs were still in flight when the wait ended.
        """
        pending = list(self._tasks.values())
        if not pending:
            return 0
        logger.info("Waiting for %d running batch(es)", len(pending))
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        if still_running:
            logger.warning("%d batch(es) still running at shutdown", len(still_running))
        return len(still_running)

    def discard(self, batch_id: uuid.UUID) -> None:
        """Forget a run. An in-flight task still resolves on its own."""
        self._runs.pop(batch_id, None)

import logging
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from screener.core.exceptions import ScoringError
from screener.schemas.analysis import AnalysisResult, CandidateInfo, ResumeEntry
from screener.schemas.batch import BatchSnapshot, CandidateResult, QueueItem, QueueStatus
from screener.services.result_aggregate import ResultAggregate
from screener.services.scoring_client import ScoringClient
from screener.storage.history import HistoryRecorder

logger = logging.getLogger(__name__)

UNTITLED_JOB = "Untitled Position"


class BatchRun:
    """State of one batch: the ordered queue, its results and counters.

    Only ``BatchOrchestrator`` mutates a run; observers call ``snapshot()``.
    """

    def __init__(
        self,
        job_description: str,
        resumes: Sequence[ResumeEntry],
        candidate_info: CandidateInfo,
    ) -> None:
        self.id = uuid.uuid4()
        self.job_description = job_description
        self.candidate_info = candidate_info
        self.resumes: tuple[ResumeEntry, ...] = tuple(resumes)
        self.queue: list[QueueItem] = [
            QueueItem(id=resume.id, file_name=resume.file_name) for resume in self.resumes
        ]
        self.results = ResultAggregate()
        self.done_count = 0
        self.failed_count = 0
        self.warning: str | None = None
        self.created_at = datetime.now(UTC)
        # Index of the next item to start; everything before it has been dequeued
        self._cursor = 0

    @property
    def total(self) -> int:
        return len(self.queue)

    @property
    def finished(self) -> bool:
        return self._cursor == self.total and self.current is None

    @property
    def current(self) -> QueueItem | None:
        """The item in flight, if any."""
        if self._cursor == 0:
            return None
        item = self.queue[self._cursor - 1]
        return item if item.status is QueueStatus.PROCESSING else None

    def next_item(self) -> tuple[ResumeEntry, QueueItem] | None:
        if self.current is not None:
            raise RuntimeError(f"Item '{self.current.id}' is still processing")
        if self._cursor == self.total:
            return None
        index = self._cursor
        self._cursor += 1
        return self.resumes[index], self.queue[index]

    def snapshot(self) -> BatchSnapshot:
        current = self.current
        return BatchSnapshot(
            id=self.id,
            job_title=self.candidate_info.job_title,
            queue=[item.model_copy() for item in self.queue],
            results=self.results.snapshot(),
            total=self.total,
            done_count=self.done_count,
            failed_count=self.failed_count,
            processing_id=current.id if current else None,
            finished=self.finished,
            warning=self.warning,
            created_at=self.created_at,
        )


class BatchOrchestrator:
    """Scores every resume of a batch, one at a time, in submission order."""

    def __init__(
        self,
        client: ScoringClient,
        history: HistoryRecorder | None = None,
        strict: bool = False,
    ) -> None:
        self.client = client
        self.history = history
        self.strict = strict

    def create_run(
        self,
        job_description: str,
        resumes: Sequence[ResumeEntry],
        candidate_info: CandidateInfo | None = None,
    ) -> BatchRun:
        if not job_description.strip():
            raise ValueError("Job description is required")
        if not resumes:
            raise ValueError("At least one resume is required")

        seen: set[str] = set()
        for resume in resumes:
            if resume.id in seen:
                raise ValueError(f"Duplicate resume id '{resume.id}'")
            if not resume.text.strip():
                raise ValueError(f"Resume '{resume.file_name}' has no text")
            seen.add(resume.id)

        return BatchRun(job_description, resumes, candidate_info or CandidateInfo())

    async def run(
        self,
        job_description: str,
        resumes: Sequence[ResumeEntry],
        candidate_info: CandidateInfo | None = None,
    ) -> BatchRun:
        batch = self.create_run(job_description, resumes, candidate_info)
        await self.process(batch)
        return batch

    async def process(self, batch: BatchRun) -> BatchRun:
        logger.info("Batch %s started with %d resume(s)", batch.id, batch.total)

        while (step := batch.next_item()) is not None:
            resume, item = step
            item.advance(QueueStatus.PROCESSING, strict=self.strict)
            try:
                result = await self.client.score(
                    batch.job_description, resume.text, batch.candidate_info
                )
            except ScoringError as e:
                logger.error("Batch %s: scoring %s failed: %s", batch.id, resume.file_name, e)
                item.advance(QueueStatus.ERROR, error=e.message, strict=self.strict)
                batch.failed_count += 1
                continue
            except Exception as e:
                logger.exception("Batch %s: scoring %s crashed", batch.id, resume.file_name)
                item.advance(QueueStatus.ERROR, error=f"Unexpected error: {e}", strict=self.strict)
                batch.failed_count += 1
                continue

            item.advance(QueueStatus.DONE, strict=self.strict)
            batch.results.append(
                CandidateResult(id=resume.id, file_name=resume.file_name, result=result)
            )
            batch.done_count += 1
            self._record_history(batch, resume, result)

        if batch.failed_count:
            batch.warning = f"{batch.failed_count} of {batch.total} candidates failed"
            logger.warning("Batch %s finished: %s", batch.id, batch.warning)
        else:
            logger.info("Batch %s finished: %d candidate(s) scored", batch.id, batch.done_count)
        return batch

    def _record_history(self, batch: BatchRun, resume: ResumeEntry, result: AnalysisResult) -> None:
        if self.history is None:
            return
        info = batch.candidate_info
        if batch.total == 1 and info.name:
            candidate_label = info.name
        else:
            candidate_label = resume.file_name
        try:
            self.history.record(candidate_label, info.job_title or UNTITLED_JOB, result)
        except Exception:
            logger.exception("Batch %s: history record for %s failed", batch.id, resume.file_name)

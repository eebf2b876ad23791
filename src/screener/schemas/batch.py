import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from screener.core.exceptions import InvalidTransitionError
from screener.schemas.analysis import AnalysisResult, CandidateInfo, ResumeEntry

logger = logging.getLogger(__name__)


class QueueStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


_TRANSITIONS: dict[QueueStatus, frozenset[QueueStatus]] = {
    QueueStatus.PENDING: frozenset({QueueStatus.PROCESSING}),
    QueueStatus.PROCESSING: frozenset({QueueStatus.DONE, QueueStatus.ERROR}),
    QueueStatus.DONE: frozenset(),
    QueueStatus.ERROR: frozenset(),
}


class QueueItem(BaseModel):
    id: str
    file_name: str
    status: QueueStatus = QueueStatus.PENDING
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.status]

    def advance(self, status: QueueStatus, error: str | None = None, *, strict: bool = False) -> bool:
        """Move the item to ``status`` if the lifecycle allows it.

        Forbidden moves raise ``InvalidTransitionError`` when ``strict`` is set,
        otherwise they are logged and leave the item untouched.
        """
        if status not in _TRANSITIONS[self.status]:
            message = f"Queue item '{self.id}' cannot move from {self.status} to {status}"
            if strict:
                raise InvalidTransitionError(message)
            logger.error(message)
            return False

        self.status = status
        self.error = error if status is QueueStatus.ERROR else None
        return True


class CandidateResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    file_name: str
    result: AnalysisResult
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SortField(StrEnum):
    FILE_NAME = "file_name"
    MATCH_SCORE = "match_score"
    RECOMMENDATION = "recommendation"
    TIMESTAMP = "timestamp"


class SortDir(StrEnum):
    ASC = "asc"
    DESC = "desc"


class BatchCreate(BaseModel):
    job_description: str = Field(..., min_length=1)
    resumes: list[ResumeEntry] = Field(..., min_length=1)
    candidate_info: CandidateInfo = Field(default_factory=CandidateInfo)


class BatchSnapshot(BaseModel):
    id: uuid.UUID
    job_title: str | None
    queue: list[QueueItem]
    results: list[CandidateResult]
    total: int
    done_count: int
    failed_count: int
    processing_id: str | None
    finished: bool
    warning: str | None
    created_at: datetime


class SelectionRead(BaseModel):
    selected_ids: list[str]
    max_selected: int


class ComparisonView(BaseModel):
    candidates: list[CandidateResult]
    top_candidate_id: str
    max_score: int

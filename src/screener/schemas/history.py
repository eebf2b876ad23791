import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from screener.schemas.analysis import AnalysisResult


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    candidate_name: str
    job_title: str
    result: AnalysisResult
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from screener.api.deps import get_batch_registry, get_history_recorder, get_scoring_client
from screener.main import create_app
from screener.schemas.analysis import AnalysisResult, Recommendation, ResumeEntry
from screener.schemas.batch import CandidateResult
from screener.services.batch_registry import BatchRegistry
from screener.services.scoring_client import ScoringClient
from screener.storage.memory import InMemoryHistoryRecorder
from tests.mocks.mock_scoring import FakeScoringService

SCORING_URL = "http://scoring.test/webhook/screening"
JOB_DESCRIPTION = "Senior Python engineer. Requirements: Python, FastAPI, SQL, AWS."


@pytest.fixture
def scoring_service() -> FakeScoringService:
    """Return a fake scoring endpoint with no queued outcomes."""
    return FakeScoringService()


@pytest_asyncio.fixture
async def http_client(scoring_service: FakeScoringService) -> AsyncGenerator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=scoring_service.transport()) as client:
        yield client


@pytest.fixture
def scoring_client(http_client: httpx.AsyncClient) -> ScoringClient:
    """ScoringClient against the fake endpoint, with no retry delay."""
    return ScoringClient(
        http_client,
        endpoint_url=SCORING_URL,
        timeout_ms=1_000,
        max_retries=1,
        retry_delay_ms=0,
        default_hiring_manager_email="hr@company.com",
    )


@pytest.fixture
def history() -> InMemoryHistoryRecorder:
    return InMemoryHistoryRecorder(max_entries=20)


@pytest.fixture
def registry() -> BatchRegistry:
    return BatchRegistry()


@pytest_asyncio.fixture
async def client(
    scoring_client: ScoringClient,
    history: InMemoryHistoryRecorder,
    registry: BatchRegistry,
) -> AsyncGenerator[AsyncClient]:
    app = create_app()

    app.dependency_overrides[get_scoring_client] = lambda: scoring_client
    app.dependency_overrides[get_history_recorder] = lambda: history
    app.dependency_overrides[get_batch_registry] = lambda: registry

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", follow_redirects=True
    ) as ac:
        yield ac


def make_resume(index: int, **overrides) -> ResumeEntry:
    """Helper to create a resume entry whose text is unique per index."""
    data = {
        "id": f"resume-{index}",
        "file_name": f"candidate_{index}.pdf",
        "text": f"Resume {index}: Python developer with FastAPI and SQL experience.",
    }
    data.update(overrides)
    return ResumeEntry(**data)


def make_analysis(**overrides) -> AnalysisResult:
    """Helper to create a normalized analysis result."""
    data = {
        "match_score": 72,
        "summary": "Solid match",
        "strengths": ["Python", "FastAPI"],
        "concerns": ["Limited AWS exposure"],
        "recommendation": Recommendation.INTERVIEW,
        "reasoning": "Meets the core requirements.",
    }
    data.update(overrides)
    return AnalysisResult(**data)


def make_candidate_result(
    candidate_id: str,
    score: int = 50,
    file_name: str | None = None,
    recommendation: Recommendation = Recommendation.REJECT,
    offset_minutes: int = 0,
) -> CandidateResult:
    """Helper to create a completed candidate result."""
    return CandidateResult(
        id=candidate_id,
        file_name=file_name or f"{candidate_id}.pdf",
        result=make_analysis(match_score=score, recommendation=recommendation),
        timestamp=datetime(2026, 3, 1, 9, 0, tzinfo=UTC) + timedelta(minutes=offset_minutes),
    )


def make_batch_payload(count: int = 2, **overrides) -> dict:
    """Helper to create a valid batch submission body."""
    data = {
        "job_description": JOB_DESCRIPTION,
        "resumes": [make_resume(i).model_dump() for i in range(1, count + 1)],
        "candidate_info": {"job_title": "Backend Engineer"},
    }
    data.update(overrides)
    return data

import asyncio
import logging
import math
from typing import Any

import httpx

from screener.core.config import Settings
from screener.core.exceptions import (
    MalformedResponseError,
    RateLimitedError,
    RequestFailedError,
    ScoringTimeoutError,
    ServiceUnavailableError,
)
from screener.schemas.analysis import (
    AnalysisResult,
    CandidateInfo,
    Recommendation,
    ScoreBreakdown,
)

logger = logging.getLogger(__name__)

BREAKDOWN_CAPS: dict[str, int] = {
    "skills_match": 40,
    "experience_match": 25,
    "achievements": 20,
    "soft_skills": 15,
}


def _clamp(value: float, low: int, high: int) -> int:
    # Halves round up
    return max(low, min(high, math.floor(value + 0.5)))


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _normalize_breakdown(raw: Any) -> ScoreBreakdown | None:
    if not isinstance(raw, dict):
        return None
    return ScoreBreakdown(
        **{
            key: _clamp(raw[key], 0, cap) if _is_number(raw.get(key)) else 0
            for key, cap in BREAKDOWN_CAPS.items()
        }
    )


def normalize_response(data: Any) -> AnalysisResult:
    """Validate a scoring service payload and map it onto ``AnalysisResult``.

    The payload must carry a numeric ``score`` and a string ``summary``;
    everything else is optional and falls back to an empty value.
    """
    if not isinstance(data, dict):
        raise MalformedResponseError("expected a JSON object")
    score = data.get("score")
    if not _is_number(score):
        raise MalformedResponseError("missing numeric 'score'")
    summary = data.get("summary")
    if not isinstance(summary, str):
        raise MalformedResponseError("missing 'summary'")

    recommendation = (
        Recommendation.INTERVIEW
        if data.get("recommendation") == Recommendation.INTERVIEW.value
        else Recommendation.REJECT
    )
    reasoning = data.get("reasoning")
    application_id = data.get("applicationId")

    return AnalysisResult(
        match_score=_clamp(score, 0, 100),
        summary=summary,
        strengths=_string_list(data.get("strengths")),
        concerns=_string_list(data.get("concerns")),
        recommendation=recommendation,
        reasoning=reasoning if isinstance(reasoning, str) else "",
        application_id=application_id if isinstance(application_id, str) else None,
        breakdown=_normalize_breakdown(data.get("breakdown")),
    )


class ScoringClient:
    """Sends one job description / resume pair to the external scoring endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint_url: str,
        timeout_ms: int = 60_000,
        max_retries: int = 1,
        retry_delay_ms: int = 2_000,
        default_hiring_manager_email: str = "",
    ) -> None:
        self.http_client = http_client
        self.endpoint_url = endpoint_url
        self.timeout_ms = timeout_ms
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms
        self.default_hiring_manager_email = default_hiring_manager_email

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient, settings: Settings) -> "ScoringClient":
        return cls(
            http_client,
            endpoint_url=settings.scoring_endpoint_url,
            timeout_ms=settings.scoring_timeout_ms,
            max_retries=settings.scoring_max_retries,
            retry_delay_ms=settings.scoring_retry_delay_ms,
            default_hiring_manager_email=settings.default_hiring_manager_email,
        )

    def _build_payload(
        self, job_description: str, resume_text: str, info: CandidateInfo
    ) -> dict[str, str]:
        return {
            "jobDescription": job_description,
            "resume": resume_text,
            "candidateName": info.name or "",
            "candidateEmail": info.email or "",
            "jobTitle": info.job_title or "",
            "hiringManagerEmail": info.hiring_manager_email or self.default_hiring_manager_email,
        }

    async def _post(self, payload: dict[str, str]) -> httpx.Response:
        """POST once and retry transport failures; timeouts are never retried."""
        attempts = max(1, self.max_retries + 1)
        last_exc: httpx.TransportError | None = None
        for attempt in range(1, attempts + 1):
            try:
                async with asyncio.timeout(self.timeout_ms / 1000):
                    return await self.http_client.post(
                        self.endpoint_url,
                        json=payload,
                        timeout=self.timeout_ms / 1000,
                    )
            except (TimeoutError, httpx.TimeoutException) as exc:
                raise ScoringTimeoutError(self.timeout_ms) from exc
            except httpx.TransportError as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "Scoring attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    attempts,
                    exc,
                    self.retry_delay_ms / 1000,
                )
                await asyncio.sleep(self.retry_delay_ms / 1000)
            except httpx.HTTPError as exc:
                # Decoding, redirect and protocol failures are not transient
                logger.error("Scoring request failed: %s", exc)
                raise RequestFailedError(f"{type(exc).__name__}: {exc}") from exc

        logger.error("Scoring request failed after %d attempts: %s", attempts, last_exc)
        raise RequestFailedError(f"Network error: {last_exc}") from last_exc

    async def score(
        self,
        job_description: str,
        resume_text: str,
        candidate_info: CandidateInfo | None = None,
    ) -> AnalysisResult:
        """Score one resume against a job description.

        Raises a ``ScoringError`` subclass when the service cannot produce a
        usable result.
        """
        if not job_description.strip():
            raise ValueError("job_description must not be empty")
        if not resume_text.strip():
            raise ValueError("resume_text must not be empty")

        payload = self._build_payload(job_description, resume_text, candidate_info or CandidateInfo())
        response = await self._post(payload)

        if response.status_code == 429:
            raise RateLimitedError()
        if response.status_code >= 500:
            raise ServiceUnavailableError(response.status_code)
        if not response.is_success:
            raise RequestFailedError(response.text, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError("body is not valid JSON") from exc
        return normalize_response(data)

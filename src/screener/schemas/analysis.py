from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Recommendation(StrEnum):
    INTERVIEW = "Interview"
    REJECT = "Reject"


class ResumeEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    file_name: str
    text: str


class CandidateInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: str | None = None
    job_title: str | None = None
    hiring_manager_email: str | None = None


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    skills_match: int = Field(0, ge=0, le=40)
    experience_match: int = Field(0, ge=0, le=25)
    achievements: int = Field(0, ge=0, le=20)
    soft_skills: int = Field(0, ge=0, le=15)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    match_score: int = Field(..., ge=0, le=100)
    summary: str
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    recommendation: Recommendation = Recommendation.REJECT
    reasoning: str = ""
    application_id: str | None = None
    breakdown: ScoreBreakdown | None = None

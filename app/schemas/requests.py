from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from .analysis import ComprehensiveAnalysis, Industry, JobAnalysis, Level, ResumeAnalysis
from .base import CamelModel

MAX_TEXT_LENGTH = 50000


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("Text must not be blank.")
    return value


class ResumeAnalysisRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)
    industry: Industry = "technology"
    level: Level = "mid"
    user_id: str | None = Field(default=None, max_length=200)

    @field_validator("resume_text")
    @classmethod
    def validate_resume_text(cls, value: str) -> str:
        return _require_text(value)


class JobAnalysisRequest(CamelModel):
    job_description: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)
    job_title: str = Field(default="", max_length=200)
    company: str = Field(default="", max_length=200)
    industry: Industry = "technology"
    level: Level = "mid"
    resume_analysis: ResumeAnalysis | None = None
    resume_text: str | None = Field(default=None, max_length=MAX_TEXT_LENGTH)
    user_id: str | None = Field(default=None, max_length=200)

    @field_validator("job_description")
    @classmethod
    def validate_job_description(cls, value: str) -> str:
        return _require_text(value)

    @model_validator(mode="after")
    def validate_resume_source(self):
        if self.resume_analysis is None and not (self.resume_text or "").strip():
            raise ValueError("Provide either resumeAnalysis or a non-blank resumeText.")
        return self


class ComprehensiveRequest(JobAnalysisRequest):
    pass


class ExportRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)
    job_description: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    analysis: dict[str, Any] | None = None
    industry: Industry = "technology"
    level: Level = "mid"

    @field_validator("resume_text")
    @classmethod
    def validate_resume_text(cls, value: str) -> str:
        return _require_text(value)


class ResumeAnalysisResponse(CamelModel):
    analysis: ResumeAnalysis
    persisted: bool = False
    warnings: list[str] = Field(default_factory=list)


class JobAnalysisResponse(CamelModel):
    analysis: JobAnalysis
    persisted: bool = False
    warnings: list[str] = Field(default_factory=list)


class ComprehensiveResponse(CamelModel):
    analysis: ComprehensiveAnalysis
    persisted: bool = False
    warnings: list[str] = Field(default_factory=list)


class HistoryRecord(CamelModel):
    id: int
    created_at: str
    user_id: str
    kind: str
    industry: str
    level: str
    job_title: str | None = None
    company: str | None = None
    match_score: int = Field(ge=0, le=100)
    analysis: dict[str, Any] = Field(default_factory=dict)


class HistoryStats(CamelModel):
    total_analyses: int = Field(ge=0)
    average_match_score: float = Field(ge=0.0, le=100.0)
    best_match_score: int = Field(ge=0, le=100)
    last_analyzed_at: datetime | None = None

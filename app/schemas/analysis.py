from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

from pydantic import Field

from .base import FrozenCamelModel

Industry = Literal["technology", "finance", "healthcare", "marketing", "sales", "education", "consulting"]
Level = Literal["entry", "mid", "senior"]
Priority = Literal["high", "medium", "low"]
SectionName = Literal["contact", "summary", "experience", "education", "skills", "achievements"]

INDUSTRIES: tuple[str, ...] = get_args(Industry)
LEVELS: tuple[str, ...] = get_args(Level)
SECTION_NAMES: tuple[str, ...] = get_args(SectionName)


class SectionScore(FrozenCamelModel):
    score: int = Field(ge=0, le=100)
    feedback: list[str] = Field(default_factory=list)


class SectionScores(FrozenCamelModel):
    contact: SectionScore
    summary: SectionScore
    experience: SectionScore
    education: SectionScore
    skills: SectionScore
    achievements: SectionScore

    def as_dict(self) -> dict[str, SectionScore]:
        return {name: getattr(self, name) for name in SECTION_NAMES}

    def score_of(self, name: str) -> int:
        return getattr(self, name).score


class Suggestion(FrozenCamelModel):
    category: str
    title: str
    description: str
    priority: Priority
    tips: list[str] = Field(default_factory=list)
    examples: list[str] | None = None


class Recommendation(FrozenCamelModel):
    category: str
    title: str
    description: str
    priority: Priority
    action_items: list[str] = Field(default_factory=list)
    examples: list[str] | None = None


class ResumeAnalysis(FrozenCamelModel):
    overall_score: int = Field(ge=0, le=100)
    sections: SectionScores
    suggestions: list[Suggestion] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    ats_score: int = Field(ge=0, le=100)
    readability_score: int = Field(ge=0, le=100)
    word_count: int = Field(ge=0)
    estimated_reading_time: int = Field(ge=0)


class JobAnalysis(FrozenCamelModel):
    job_title: str = ""
    company: str = ""
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    match_score: int = Field(ge=0, le=100)
    gaps: list[str] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)


class ComprehensiveAnalysis(FrozenCamelModel):
    resume_analysis: ResumeAnalysis
    job_title: str = ""
    company_name: str = ""
    industry: Industry
    level: Level
    match_score: int = Field(ge=0, le=100)
    matching_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    job_skills: list[str] = Field(default_factory=list, max_length=25)
    recommendations: list[Recommendation] = Field(default_factory=list)
    analysis_date: datetime

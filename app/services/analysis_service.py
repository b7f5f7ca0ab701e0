from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from app.features.patterns import get_default_engine_config
from app.history import db as history_db
from app.schemas.analysis import ComprehensiveAnalysis, JobAnalysis, ResumeAnalysis

from .comprehensive_matcher import ComprehensiveMatcher
from .job_analyzer import JobDescriptionAnalyzer
from .resume_analyzer import ResumeAnalyzer

logger = logging.getLogger(__name__)

HISTORY_WARNING = "Analysis completed but could not be saved to your history."


@lru_cache(maxsize=1)
def get_resume_analyzer() -> ResumeAnalyzer:
    return ResumeAnalyzer(get_default_engine_config())


@lru_cache(maxsize=1)
def get_job_analyzer() -> JobDescriptionAnalyzer:
    return JobDescriptionAnalyzer(get_default_engine_config())


@lru_cache(maxsize=1)
def get_comprehensive_matcher() -> ComprehensiveMatcher:
    return ComprehensiveMatcher(get_default_engine_config())


def analyze_resume(text: str, industry: str, level: str) -> ResumeAnalysis:
    analysis = get_resume_analyzer().analyze(text, industry, level)
    logger.info(
        "resume_analysis_completed industry=%s level=%s overall=%s ats=%s words=%s",
        industry,
        level,
        analysis.overall_score,
        analysis.ats_score,
        analysis.word_count,
    )
    return analysis


def analyze_job(
    job_text: str,
    job_title: str,
    company: str,
    industry: str,
    level: str,
    resume_analysis: ResumeAnalysis,
) -> JobAnalysis:
    analysis = get_job_analyzer().analyze(job_text, job_title, company, industry, level, resume_analysis)
    logger.info(
        "job_analysis_completed industry=%s level=%s required=%s preferred=%s gaps=%s match=%s",
        industry,
        level,
        len(analysis.required_skills),
        len(analysis.preferred_skills),
        len(analysis.gaps),
        analysis.match_score,
    )
    return analysis


def analyze_comprehensive(
    resume_analysis: ResumeAnalysis,
    job_text: str,
    job_title: str,
    company: str,
    industry: str,
    level: str,
) -> ComprehensiveAnalysis:
    analysis = get_comprehensive_matcher().analyze(resume_analysis, job_text, job_title, company, industry, level)
    logger.info(
        "comprehensive_match_completed industry=%s level=%s job_skills=%s missing=%s match=%s",
        industry,
        level,
        len(analysis.job_skills),
        len(analysis.missing_skills),
        analysis.match_score,
    )
    return analysis


@dataclass(frozen=True, slots=True)
class PersistOutcome:
    persisted: bool = False
    warnings: list[str] = field(default_factory=list)


def _match_score_of(kind: str, analysis: BaseModel) -> int:
    if kind == "resume":
        return int(analysis.overall_score)
    return int(analysis.match_score)


def persist_analysis(
    *,
    user_id: str | None,
    kind: str,
    industry: str,
    level: str,
    analysis: ResumeAnalysis | JobAnalysis | ComprehensiveAnalysis,
    job_title: str | None = None,
    company: str | None = None,
) -> PersistOutcome:
    """Save an analysis to the history store when a user is known.

    Storage errors never fail the request; they come back as a warning.
    """
    if not user_id:
        return PersistOutcome()
    try:
        row_id = history_db.save_analysis(
            user_id=user_id,
            kind=kind,
            industry=industry,
            level=level,
            match_score=_match_score_of(kind, analysis),
            analysis=analysis.model_dump(mode="json", by_alias=True),
            job_title=job_title,
            company=company,
        )
    except history_db.PersistenceFailure as exc:
        logger.warning("history_persist_failed kind=%s error=%s", kind, exc)
        return PersistOutcome(persisted=False, warnings=[HISTORY_WARNING])
    return PersistOutcome(persisted=row_id is not None)


def build_export_payload(
    resume_content: str,
    job_description: str,
    analysis: dict[str, Any] | BaseModel | None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    if isinstance(analysis, BaseModel):
        analysis = analysis.model_dump(mode="json", by_alias=True)
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    return {
        "resumeContent": resume_content,
        "jobDescription": job_description,
        "analysis": analysis,
        "timestamp": timestamp,
    }


def export_filename(now: datetime | None = None) -> str:
    day = (now or datetime.now(timezone.utc)).date().isoformat()
    return f"resume-analysis-{day}.json"

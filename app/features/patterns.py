from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from app.core.config.scoring import get_scoring_value


class PatternCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    patterns: tuple[str, ...] = ()


class SectionCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    points: int = Field(ge=0, le=100)
    feedback: str
    pattern: str | None = None
    case_sensitive: bool = False
    terms: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    minimum: float | None = None
    min_length: int | None = None


class IndustryProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    keywords: tuple[str, ...] = ()


class LevelProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    focus: str


class ATSRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    points_per_section: int = 20
    thresholds: dict[str, int] = Field(
        default_factory=lambda: {"contact": 80, "summary": 70, "experience": 70, "skills": 70, "education": 70}
    )
    keyword_bonus_threshold: int = 80
    keyword_bonus_high: int = 20
    keyword_bonus_low: int = 10


class JobMatchRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_weight: float = 70
    preferred_weight: float = 30
    bonus_cap: int = 10
    anchor_window_words: int = Field(default=12, ge=1)
    anchor_block_lines: int = Field(default=8, ge=0)
    max_lines: int = Field(default=15, ge=1)
    required_anchors: tuple[str, ...] = ("required", "must have", "requirements", "qualifications", "experience")
    preferred_anchors: tuple[str, ...] = ("preferred", "nice to have", "bonus", "plus", "desired", "helpful")


class ComprehensiveRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    exact_weight: float = 0.7
    partial_weight: float = 0.3
    top_skills: int = Field(default=25, ge=1, le=25)
    categories: tuple[str, ...] = ()


class EngineConfig(BaseModel):
    """Pattern tables and weights shared by every analyzer.

    Built from ``config/scoring.yaml`` in production; tests construct smaller
    instances directly.
    """

    model_config = ConfigDict(frozen=True)

    reading_words_per_minute: int = Field(default=200, ge=1)
    stop_words: tuple[str, ...] = ()
    categories: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    technical_categories: tuple[str, ...] = ()
    professional_categories: tuple[str, ...] = ()
    industries: dict[str, IndustryProfile] = Field(default_factory=dict)
    levels: dict[str, LevelProfile] = Field(default_factory=dict)
    sections: dict[str, dict[str, SectionCheck]] = Field(default_factory=dict)
    ats: ATSRules = Field(default_factory=ATSRules)
    job_match: JobMatchRules = Field(default_factory=JobMatchRules)
    comprehensive: ComprehensiveRules = Field(default_factory=ComprehensiveRules)

    @model_validator(mode="after")
    def _check_category_references(self) -> "EngineConfig":
        referenced: list[str] = [
            *self.technical_categories,
            *self.professional_categories,
            *self.comprehensive.categories,
        ]
        for checks in self.sections.values():
            for check in checks.values():
                referenced.extend(check.categories)
        unknown = sorted({name for name in referenced if name not in self.categories})
        if unknown:
            raise ValueError(f"unknown pattern categories referenced: {', '.join(unknown)}")
        return self

    def category(self, name: str) -> PatternCategory:
        return PatternCategory(name=name, patterns=self.categories[name])

    def categories_for(self, names: tuple[str, ...] | list[str]) -> list[PatternCategory]:
        return [self.category(name) for name in names]

    def industry_profile(self, industry: str) -> IndustryProfile:
        profile = self.industries.get(industry)
        if profile is None:
            raise ValueError(f"Unknown industry '{industry}'")
        return profile

    def level_profile(self, level: str) -> LevelProfile:
        profile = self.levels.get(level)
        if profile is None:
            raise ValueError(f"Unknown level '{level}'")
        return profile

    def industry_category(self, industry: str) -> PatternCategory:
        return PatternCategory(name=f"industry:{industry}", patterns=self.industry_profile(industry).keywords)

    def skill_categories(self, industry: str) -> list[PatternCategory]:
        """Industry keywords plus the generic technical and professional categories."""
        return [
            self.industry_category(industry),
            *self.categories_for(self.technical_categories),
            *self.categories_for(self.professional_categories),
        ]

    def section_checks(self, section: str) -> dict[str, SectionCheck]:
        return self.sections.get(section, {})


def build_engine_config(raw: dict[str, Any]) -> EngineConfig:
    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid engine scoring config: {exc}") from exc


@lru_cache(maxsize=1)
def get_default_engine_config() -> EngineConfig:
    raw = get_scoring_value("engine")
    if not isinstance(raw, dict):
        raise RuntimeError("Scoring config is missing the top-level 'engine' mapping.")
    return build_engine_config(raw)

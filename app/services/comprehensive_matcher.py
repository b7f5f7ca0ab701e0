from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from app.features.patterns import ComprehensiveRules, EngineConfig
from app.features.text_matcher import TextFeatureMatcher, has_overlap
from app.features.text_utils import clamp_score
from app.schemas.analysis import ComprehensiveAnalysis, Priority, Recommendation, ResumeAnalysis

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class SkillBuckets:
    exact: list[str] = field(default_factory=list)
    partial: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def matching(self) -> list[str]:
        return [*self.exact, *self.partial]


def bucket_skills(job_skills: list[str], resume_keywords: list[str]) -> SkillBuckets:
    """Sort job skills into exact, partial (substring overlap only) and missing, in job order."""
    keyword_set = set(resume_keywords)
    buckets = SkillBuckets()
    for skill in job_skills:
        if skill in keyword_set:
            buckets.exact.append(skill)
        elif has_overlap(skill, resume_keywords):
            buckets.partial.append(skill)
        else:
            buckets.missing.append(skill)
    return buckets


def weighted_match_score(buckets: SkillBuckets, job_skill_count: int, rules: ComprehensiveRules) -> int:
    weighted = rules.exact_weight * len(buckets.exact) + rules.partial_weight * len(buckets.partial)
    return clamp_score(100 * weighted / max(job_skill_count, 1))


@dataclass(frozen=True, slots=True)
class _Template:
    category: str
    title: str
    description: str
    priority: Priority
    action_items: tuple[str, ...]
    examples: Callable[[SkillBuckets], list[str]] | None = None


_TEMPLATES: tuple[_Template, ...] = (
    _Template(
        category="skills",
        title="Skills Optimization",
        description="Put the skills you share with this {job_title} posting where reviewers and ATS filters see them first.",
        priority="high",
        action_items=(
            "List matching skills in a dedicated skills section",
            "Mention each matching skill in at least one experience bullet",
            "Use the same spelling as the job description",
        ),
        examples=lambda buckets: buckets.matching[:5],
    ),
    _Template(
        category="skills",
        title="Skills Development",
        description="Close the gaps between your resume and the {job_title} posting.",
        priority="high",
        action_items=(
            "Add missing skills you already have, with evidence",
            "Pick one missing skill and build a small project with it",
            "Consider a course or certification for the largest gap",
        ),
        examples=lambda buckets: buckets.missing[:5],
    ),
    _Template(
        category="content",
        title="Content Enhancement",
        description="Make each bullet prove impact with numbers and concrete outcomes.",
        priority="medium",
        action_items=(
            "Start bullets with an action verb",
            "Quantify results with percentages, revenue or time saved",
            "Remove duties that do not relate to the target role",
        ),
    ),
    _Template(
        category="experience",
        title="Experience Alignment",
        description="Reorder and reword your experience to mirror what {company} expects from a {level_label} hire.",
        priority="medium",
        action_items=(
            "Lead each role with the responsibilities closest to the posting",
            "Describe scope in the terms {industry_label} employers use",
            "Emphasize {level_focus}",
        ),
    ),
    _Template(
        category="strategy",
        title="Strategic Positioning",
        description="Position yourself as a {level_label} {industry_label} candidate in your headline and summary.",
        priority="low",
        action_items=(
            "Rewrite your summary around the {job_title} role",
            "Prepare interview stories for your strongest matching skills",
            "Tailor your cover letter to {company}",
        ),
    ),
)


class ComprehensiveMatcher:
    """Re-reads the posting with its own category list and grades every skill.

    Exact matches count fully, partial matches by ``partial_weight``; the
    recommendations are a fixed set of five with data-driven examples.
    """

    def __init__(
        self,
        config: EngineConfig,
        *,
        matcher: TextFeatureMatcher | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._rules = config.comprehensive
        self._matcher = matcher or TextFeatureMatcher.from_config(config)
        self._clock = clock or _utc_now

    def job_skills(self, job_text: str, industry: str) -> list[str]:
        categories = [
            *self._config.categories_for(self._rules.categories),
            self._config.industry_category(industry),
        ]
        return self._matcher.extract(job_text or "", categories)

    def analyze(
        self,
        resume_analysis: ResumeAnalysis,
        job_text: str,
        job_title: str,
        company: str,
        industry: str,
        level: str,
    ) -> ComprehensiveAnalysis:
        level_profile = self._config.level_profile(level)
        industry_profile = self._config.industry_profile(industry)

        skills = self.job_skills(job_text, industry)
        buckets = bucket_skills(skills, list(resume_analysis.keywords))
        values = {
            "job_title": (job_title or "").strip() or "this role",
            "company": (company or "").strip() or "the employer",
            "industry_label": industry_profile.label,
            "level_label": level_profile.label,
            "level_focus": level_profile.focus,
        }
        recommendations = [
            Recommendation(
                category=template.category,
                title=template.title.format(**values),
                description=template.description.format(**values),
                priority=template.priority,
                action_items=[item.format(**values) for item in template.action_items],
                examples=(template.examples(buckets) or None) if template.examples else None,
            )
            for template in _TEMPLATES
        ]

        return ComprehensiveAnalysis(
            resume_analysis=resume_analysis,
            job_title=job_title or "",
            company_name=company or "",
            industry=industry,
            level=level,
            match_score=weighted_match_score(buckets, len(skills), self._rules),
            matching_skills=buckets.matching,
            missing_skills=buckets.missing,
            job_skills=skills[: self._rules.top_skills],
            recommendations=recommendations,
            analysis_date=self._clock(),
        )

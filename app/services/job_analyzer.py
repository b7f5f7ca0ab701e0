from __future__ import annotations

from app.features.patterns import EngineConfig, JobMatchRules
from app.features.recommendations import RecommendationEngine
from app.features.text_matcher import TextFeatureMatcher, has_overlap
from app.features.text_utils import (
    clamp_score,
    contains_any,
    dedupe,
    is_bullet_like,
    normalize_line,
    round_half_up,
    strip_bullet_prefix,
)
from app.schemas.analysis import JobAnalysis, ResumeAnalysis

_REQUIREMENT_HEADERS = (
    "requirements",
    "qualifications",
    "minimum qualifications",
    "preferred qualifications",
    "what you'll need",
    "what you will need",
    "what we're looking for",
    "must have",
    "nice to have",
)
_RESPONSIBILITY_HEADERS = (
    "responsibilities",
    "key responsibilities",
    "what you'll do",
    "what you will do",
    "duties",
    "your role",
    "the role",
)
_REQUIREMENT_MARKERS = (
    "required",
    "must",
    "experience",
    "degree",
    "years",
    "proficien",
    "knowledge of",
    "familiar",
    "ability to",
    "qualification",
    "preferred",
    "nice to have",
)
_RESPONSIBILITY_MARKERS = (
    "responsible for",
    "you will",
    "manage",
    "develop",
    "design",
    "build",
    "lead",
    "collaborate",
    "maintain",
    "drive",
    "support",
    "own ",
)


def _heading_kind(line: str) -> str | None:
    lowered = line.strip().lower()
    header = lowered.rstrip(":").strip()
    if len(header.split()) > 5:
        return None
    ends_with_colon = lowered.endswith(":")

    def _matches(items: tuple[str, ...]) -> bool:
        return any(header == item or (ends_with_colon and header.startswith(item)) for item in items)

    if _matches(_REQUIREMENT_HEADERS):
        return "requirements"
    if _matches(_RESPONSIBILITY_HEADERS):
        return "responsibilities"
    return None


def extract_job_lines(job_text: str, max_lines: int = 15) -> tuple[list[str], list[str]]:
    """Split a posting into requirement and responsibility lines.

    Lines under a Requirements/Responsibilities heading belong to that section;
    elsewhere bullets and keyword-flagged lines are classified by their markers.
    """
    requirements: list[str] = []
    responsibilities: list[str] = []
    section: str | None = None

    for raw_line in (job_text or "").splitlines():
        stripped = normalize_line(raw_line)
        if not stripped:
            continue
        kind = _heading_kind(stripped)
        if kind is not None:
            section = kind
            continue

        text = strip_bullet_prefix(stripped)
        if not text:
            continue
        if section == "requirements":
            requirements.append(text)
        elif section == "responsibilities":
            responsibilities.append(text)
        elif contains_any(text, _REQUIREMENT_MARKERS):
            requirements.append(text)
        elif contains_any(text, _RESPONSIBILITY_MARKERS) or is_bullet_like(stripped):
            responsibilities.append(text)

    return dedupe(requirements)[:max_lines], dedupe(responsibilities)[:max_lines]


def compute_match_score(
    required: list[str],
    preferred: list[str],
    resume_keywords: list[str],
    rules: JobMatchRules,
) -> int:
    required_matches = sum(1 for skill in required if has_overlap(skill, resume_keywords))
    preferred_matches = sum(1 for skill in preferred if has_overlap(skill, resume_keywords))
    score = (
        rules.required_weight * required_matches / max(len(required), 1)
        + rules.preferred_weight * preferred_matches / max(len(preferred), 1)
    )
    job_skill_count = len(required) + len(preferred)
    if len(resume_keywords) > job_skill_count:
        score += min(rules.bonus_cap, round_half_up((len(resume_keywords) - job_skill_count) / 2))
    return clamp_score(score)


def find_gaps(required: list[str], preferred: list[str], resume_keywords: list[str]) -> list[str]:
    return dedupe([skill for skill in [*required, *preferred] if not has_overlap(skill, resume_keywords)])


class JobDescriptionAnalyzer:
    def __init__(
        self,
        config: EngineConfig,
        *,
        matcher: TextFeatureMatcher | None = None,
        recommendations: RecommendationEngine | None = None,
    ) -> None:
        self._config = config
        self._rules = config.job_match
        self._matcher = matcher or TextFeatureMatcher.from_config(config)
        self._recommendations = recommendations or RecommendationEngine(config)

    def extract_skills(self, job_text: str, industry: str) -> tuple[list[str], list[str]]:
        rules = self._rules
        categories = self._config.skill_categories(industry)
        required = self._matcher.extract_near(
            job_text,
            rules.required_anchors,
            categories,
            exclude_anchors=rules.preferred_anchors,
            window_words=rules.anchor_window_words,
            block_lines=rules.anchor_block_lines,
        )
        preferred = self._matcher.extract_near(
            job_text,
            rules.preferred_anchors,
            categories,
            exclude_anchors=rules.required_anchors,
            window_words=rules.anchor_window_words,
            block_lines=rules.anchor_block_lines,
        )
        required_set = set(required)
        preferred = [skill for skill in preferred if skill not in required_set]
        if not required:
            # Postings without anchor phrases: every recognized skill counts as required.
            preferred_set = set(preferred)
            required = [skill for skill in self._matcher.extract(job_text, categories) if skill not in preferred_set]
        return required, preferred

    def analyze(
        self,
        job_text: str,
        job_title: str,
        company: str,
        industry: str,
        level: str,
        resume_analysis: ResumeAnalysis,
    ) -> JobAnalysis:
        job_text = job_text or ""
        required, preferred = self.extract_skills(job_text, industry)
        requirements, responsibilities = extract_job_lines(job_text, self._rules.max_lines)
        resume_keywords = list(resume_analysis.keywords)
        gaps = find_gaps(required, preferred, resume_keywords)

        return JobAnalysis(
            job_title=job_title or "",
            company=company or "",
            required_skills=required,
            preferred_skills=preferred,
            requirements=requirements,
            responsibilities=responsibilities,
            match_score=compute_match_score(required, preferred, resume_keywords, self._rules),
            gaps=gaps,
            recommendations=self._recommendations.generate_job_recommendations(
                required, preferred, gaps, level, industry, job_title
            ),
        )

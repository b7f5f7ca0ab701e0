from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from app.schemas.analysis import Priority, Recommendation, SectionScores, Suggestion

from .patterns import EngineConfig


@dataclass(frozen=True, slots=True)
class ResumeRuleContext:
    sections: SectionScores
    industry: str
    industry_label: str
    level: str
    level_label: str
    level_focus: str
    found: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    def template_vars(self) -> dict[str, Any]:
        values: dict[str, Any] = {
            "industry": self.industry,
            "industry_label": self.industry_label,
            "level": self.level,
            "level_label": self.level_label,
            "level_focus": self.level_focus,
            "found_count": len(self.found),
            "missing_count": len(self.missing),
            "missing_preview": ", ".join(self.missing[:5]),
        }
        for name, section in self.sections.as_dict().items():
            values[f"{name}_score"] = section.score
        return values


@dataclass(frozen=True, slots=True)
class JobRuleContext:
    required: list[str]
    preferred: list[str]
    gaps: list[str]
    matched_required: list[str]
    industry: str
    industry_label: str
    level: str
    level_label: str
    level_focus: str
    job_title: str

    def template_vars(self) -> dict[str, Any]:
        return {
            "job_title": self.job_title,
            "industry": self.industry,
            "industry_label": self.industry_label,
            "level": self.level,
            "level_label": self.level_label,
            "level_focus": self.level_focus,
            "required_count": len(self.required),
            "preferred_count": len(self.preferred),
            "gap_count": len(self.gaps),
            "gap_preview": ", ".join(self.gaps[:5]),
            "matched_count": len(self.matched_required),
            "matched_preview": ", ".join(self.matched_required[:5]),
        }


@dataclass(frozen=True, slots=True)
class RecommendationRule:
    rule_id: str
    category: str
    title: str
    description: str
    priority: Priority
    tips: tuple[str, ...]
    condition: Callable[[Any], bool]
    examples: Callable[[Any], list[str]] | None = None

    def render(self, context: Any) -> dict[str, Any]:
        values = context.template_vars()
        examples = self.examples(context) if self.examples else None
        return {
            "category": self.category,
            "title": self.title.format(**values),
            "description": self.description.format(**values),
            "priority": self.priority,
            "items": [tip.format(**values) for tip in self.tips],
            "examples": examples or None,
        }


def _section_below(name: str, threshold: int = 70) -> Callable[[ResumeRuleContext], bool]:
    return lambda ctx: ctx.sections.score_of(name) < threshold


# Evaluated top to bottom; the order is the display order.
RESUME_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        rule_id="contact_incomplete",
        category="contact",
        title="Complete Your Contact Information",
        description="Recruiters and ATS parsers could not find all of your contact details (score {contact_score}/100).",
        priority="high",
        tips=(
            "Place email, phone, location and LinkedIn URL at the top of the resume",
            "Use plain text rather than icons or images for contact details",
            "Make sure your email address looks professional",
        ),
        condition=_section_below("contact"),
    ),
    RecommendationRule(
        rule_id="experience_weak",
        category="experience",
        title="Strengthen Your Work Experience",
        description="Your experience section scored {experience_score}/100. Clear dates, action verbs and metrics make impact visible.",
        priority="high",
        tips=(
            "Start each bullet with a strong action verb",
            "Add dates for every position you list",
            "Quantify outcomes with percentages, dollar amounts or volumes",
        ),
        condition=_section_below("experience"),
    ),
    RecommendationRule(
        rule_id="skills_weak",
        category="skills",
        title="Build Out Your Skills Section",
        description="Your skills section scored {skills_score}/100. ATS filters lean heavily on an explicit skills list.",
        priority="high",
        tips=(
            "Add a dedicated, clearly labeled skills section",
            "Separate technical skills from soft skills",
            "Indicate proficiency levels for your strongest skills",
        ),
        condition=_section_below("skills"),
    ),
    RecommendationRule(
        rule_id="missing_industry_keywords",
        category="keywords",
        title="Add {industry_label} Keywords",
        description="Your resume is missing {missing_count} keywords commonly expected in {industry_label} roles.",
        priority="high",
        tips=(
            "Work the missing keywords into your experience bullets where they are accurate",
            "Mirror the exact wording used in target job postings",
            "Avoid keyword stuffing; every keyword should be backed by real experience",
        ),
        condition=lambda ctx: len(ctx.missing) > 0,
        examples=lambda ctx: ctx.missing[:5],
    ),
    RecommendationRule(
        rule_id="summary_weak",
        category="summary",
        title="Sharpen Your Professional Summary",
        description="Your summary scored {summary_score}/100. A strong opening tells the reader who you are in seconds.",
        priority="medium",
        tips=(
            "Open with a labeled summary of two to three sentences",
            "Lead with your years of experience and core specialty",
            "Use confident language that reflects {level_focus}",
        ),
        condition=_section_below("summary"),
    ),
    RecommendationRule(
        rule_id="achievements_weak",
        category="achievements",
        title="Showcase Your Achievements",
        description="Your achievements scored {achievements_score}/100. Awards and measurable results set you apart.",
        priority="medium",
        tips=(
            "Add an awards, achievements or certifications section",
            "Describe results with concrete numbers",
            "Mention promotions and formal recognition",
        ),
        condition=_section_below("achievements"),
    ),
    RecommendationRule(
        rule_id="thin_keyword_coverage",
        category="keywords",
        title="Expand Your Skills Vocabulary",
        description="Only {found_count} recognizable skills and keywords were found in your resume.",
        priority="medium",
        tips=(
            "Name the specific tools, platforms and methods you use",
            "Spell out acronyms at least once",
            "Include both technical and interpersonal skills",
        ),
        condition=lambda ctx: len(ctx.found) < 5,
    ),
    RecommendationRule(
        rule_id="education_weak",
        category="education",
        title="Clarify Your Education",
        description="Your education section scored {education_score}/100.",
        priority="low",
        tips=(
            "State your degree type and field of study",
            "Include GPA when it is 3.0 or higher",
            "List relevant coursework, honors or a thesis",
        ),
        condition=_section_below("education"),
    ),
    RecommendationRule(
        rule_id="level_positioning",
        category="positioning",
        title="Tailor Your Resume for {level_label} Roles",
        description="Hiring managers reviewing {level_label} candidates in {industry_label} look for {level_focus}.",
        priority="low",
        tips=(
            "Reorder sections so your strongest evidence for {level_focus} comes first",
            "Trim content that does not support your target level",
        ),
        condition=lambda ctx: True,
    ),
)

JOB_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        rule_id="critical_gaps",
        category="skills",
        title="Close Critical Skill Gaps",
        description="The posting for {job_title} lists {gap_count} skills that are not evident in your resume.",
        priority="high",
        tips=(
            "Add any of these skills you already have, with a concrete example",
            "Plan short courses or projects for the skills you lack",
            "Address the most important gaps in your cover letter",
        ),
        condition=lambda ctx: len(ctx.gaps) > 3,
        examples=lambda ctx: ctx.gaps[:5],
    ),
    RecommendationRule(
        rule_id="minor_gaps",
        category="skills",
        title="Address Missing Skills",
        description="A few skills from the posting for {job_title} are missing from your resume: {gap_preview}.",
        priority="high",
        tips=(
            "Mention these skills where you have used them",
            "Use the exact spelling from the job description",
        ),
        condition=lambda ctx: 0 < len(ctx.gaps) <= 3,
        examples=lambda ctx: ctx.gaps[:5],
    ),
    RecommendationRule(
        rule_id="highlight_matches",
        category="experience",
        title="Highlight Matching Qualifications",
        description="You already cover {matched_count} of {required_count} required skills. Make them easy to find.",
        priority="medium",
        tips=(
            "Move bullets that show the matching skills to the top of each role",
            "Repeat the matching skills in your summary",
        ),
        condition=lambda ctx: len(ctx.matched_required) > 0,
        examples=lambda ctx: ctx.matched_required[:5],
    ),
    RecommendationRule(
        rule_id="mirror_job_language",
        category="keywords",
        title="Tailor Your Resume to {job_title}",
        description="Align your headline and summary with the wording of the posting for {job_title}.",
        priority="medium",
        tips=(
            "Use the job title in your headline if it reflects your experience",
            "Echo key responsibilities from the posting in your bullets",
        ),
        condition=lambda ctx: True,
    ),
    RecommendationRule(
        rule_id="industry_terminology",
        category="industry",
        title="Use {industry_label} Terminology",
        description="Reviewers in {industry_label} expect familiar domain vocabulary and outcomes.",
        priority="low",
        tips=(
            "Describe outcomes in the metrics {industry_label} teams track",
            "Reference relevant regulations, tools or standards in {industry_label}",
        ),
        condition=lambda ctx: True,
    ),
    RecommendationRule(
        rule_id="level_positioning",
        category="positioning",
        title="Position Yourself for a {level_label} Role",
        description="For {level_label} roles, emphasize {level_focus}.",
        priority="low",
        tips=(
            "Lead with the evidence that best shows {level_focus}",
            "Match the scope of your examples to the level of the role",
        ),
        condition=lambda ctx: True,
    ),
    RecommendationRule(
        rule_id="strong_alignment",
        category="strategy",
        title="Lead With Your Strong Alignment",
        description="Your resume covers every skill the posting for {job_title} lists.",
        priority="low",
        tips=(
            "Apply soon and tailor your cover letter to the company",
            "Prepare interview stories for each required skill",
        ),
        condition=lambda ctx: not ctx.gaps and bool(ctx.required),
    ),
)


class RecommendationEngine:
    def __init__(
        self,
        config: EngineConfig,
        *,
        resume_rules: tuple[RecommendationRule, ...] = RESUME_RULES,
        job_rules: tuple[RecommendationRule, ...] = JOB_RULES,
    ) -> None:
        self._config = config
        self._resume_rules = resume_rules
        self._job_rules = job_rules

    def generate_resume_suggestions(
        self,
        sections: SectionScores,
        industry: str,
        level: str,
        found: list[str],
        missing: list[str],
    ) -> list[Suggestion]:
        industry_profile = self._config.industry_profile(industry)
        level_profile = self._config.level_profile(level)
        context = ResumeRuleContext(
            sections=sections,
            industry=industry,
            industry_label=industry_profile.label,
            level=level,
            level_label=level_profile.label,
            level_focus=level_profile.focus,
            found=list(found),
            missing=list(missing),
        )
        suggestions: list[Suggestion] = []
        for rule in self._resume_rules:
            if not rule.condition(context):
                continue
            rendered = rule.render(context)
            suggestions.append(Suggestion(tips=rendered.pop("items"), **rendered))
        return suggestions

    def generate_job_recommendations(
        self,
        required: list[str],
        preferred: list[str],
        gaps: list[str],
        level: str,
        industry: str,
        job_title: str,
    ) -> list[Recommendation]:
        industry_profile = self._config.industry_profile(industry)
        level_profile = self._config.level_profile(level)
        gap_set = set(gaps)
        context = JobRuleContext(
            required=list(required),
            preferred=list(preferred),
            gaps=list(gaps),
            matched_required=[skill for skill in required if skill not in gap_set],
            industry=industry,
            industry_label=industry_profile.label,
            level=level,
            level_label=level_profile.label,
            level_focus=level_profile.focus,
            job_title=(job_title or "").strip() or "this role",
        )
        recommendations: list[Recommendation] = []
        for rule in self._job_rules:
            if not rule.condition(context):
                continue
            rendered = rule.render(context)
            recommendations.append(Recommendation(action_items=rendered.pop("items"), **rendered))
        return recommendations

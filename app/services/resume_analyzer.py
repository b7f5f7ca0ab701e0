from __future__ import annotations

import math

from app.features.ats_scorer import ATSScorer
from app.features.patterns import EngineConfig
from app.features.readability import ReadabilityScorer, split_words
from app.features.recommendations import RecommendationEngine
from app.features.section_analyzer import SectionAnalyzer
from app.features.text_matcher import TextFeatureMatcher
from app.features.text_utils import dedupe, normalize_term, round_half_up
from app.schemas.analysis import SECTION_NAMES, ResumeAnalysis


class ResumeAnalyzer:
    def __init__(
        self,
        config: EngineConfig,
        *,
        matcher: TextFeatureMatcher | None = None,
        sections: SectionAnalyzer | None = None,
        readability: ReadabilityScorer | None = None,
        ats: ATSScorer | None = None,
        recommendations: RecommendationEngine | None = None,
    ) -> None:
        self._config = config
        self._matcher = matcher or TextFeatureMatcher.from_config(config)
        self._sections = sections or SectionAnalyzer(config, self._matcher)
        self._readability = readability or ReadabilityScorer()
        self._ats = ats or ATSScorer(config.ats)
        self._recommendations = recommendations or RecommendationEngine(config)

    def analyze(self, text: str, industry: str, level: str) -> ResumeAnalysis:
        text = text or ""
        self._config.level_profile(level)

        keywords = self._matcher.extract(text, self._config.skill_categories(industry))
        found = set(keywords)
        industry_keywords = dedupe([normalize_term(term) for term in self._config.industry_profile(industry).keywords])
        missing = [term for term in industry_keywords if term not in found]

        sections = self._sections.analyze_all(text)
        overall = round_half_up(sum(sections.score_of(name) for name in SECTION_NAMES) / len(SECTION_NAMES))
        word_count = len(split_words(text))

        return ResumeAnalysis(
            overall_score=overall,
            sections=sections,
            suggestions=self._recommendations.generate_resume_suggestions(
                sections, industry, level, keywords, missing
            ),
            keywords=keywords,
            missing_keywords=missing,
            ats_score=self._ats.score(sections),
            readability_score=self._readability.score(text),
            word_count=word_count,
            estimated_reading_time=math.ceil(word_count / self._config.reading_words_per_minute),
        )

from .ats_scorer import ATSScorer
from .patterns import EngineConfig, PatternCategory, SectionCheck, build_engine_config, get_default_engine_config
from .readability import ReadabilityScorer, count_syllables
from .recommendations import JOB_RULES, RESUME_RULES, RecommendationEngine, RecommendationRule
from .section_analyzer import SectionAnalyzer
from .text_matcher import TextFeatureMatcher, skills_overlap

__all__ = [
    "EngineConfig",
    "PatternCategory",
    "SectionCheck",
    "build_engine_config",
    "get_default_engine_config",
    "TextFeatureMatcher",
    "skills_overlap",
    "SectionAnalyzer",
    "ReadabilityScorer",
    "count_syllables",
    "ATSScorer",
    "RecommendationRule",
    "RecommendationEngine",
    "RESUME_RULES",
    "JOB_RULES",
]

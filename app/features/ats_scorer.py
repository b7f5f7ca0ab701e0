from __future__ import annotations

from app.schemas.analysis import SectionScores

from .patterns import ATSRules


class ATSScorer:
    """Threshold aggregate: a section either clears its bar or earns nothing."""

    def __init__(self, rules: ATSRules | None = None) -> None:
        self._rules = rules or ATSRules()

    def score(self, sections: SectionScores) -> int:
        rules = self._rules
        total = 0
        for section, threshold in rules.thresholds.items():
            if sections.score_of(section) > threshold:
                total += rules.points_per_section
        if sections.skills.score > rules.keyword_bonus_threshold:
            total += rules.keyword_bonus_high
        else:
            total += rules.keyword_bonus_low
        return max(0, min(100, total))

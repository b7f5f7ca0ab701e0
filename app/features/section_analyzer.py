from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable

from app.schemas.analysis import SECTION_NAMES, SectionScore, SectionScores

from .patterns import EngineConfig, SectionCheck
from .text_matcher import TextFeatureMatcher, compile_terms
from .text_utils import clamp_score

CheckFn = Callable[[str, str, SectionCheck, str], bool]


class SectionAnalyzer:
    """Six independent resume section scorers.

    Every check either awards its points or appends its feedback line, in the
    order the checks are configured.
    """

    def __init__(self, config: EngineConfig, matcher: TextFeatureMatcher | None = None) -> None:
        self._config = config
        self._matcher = matcher or TextFeatureMatcher.from_config(config)
        self._patterns: dict[tuple[str, str], re.Pattern[str]] = {}
        for section, checks in config.sections.items():
            for check_id, check in checks.items():
                if check.pattern:
                    flags = 0 if check.case_sensitive else re.IGNORECASE
                    self._patterns[(section, check_id)] = re.compile(check.pattern, flags)

    def contact(self, text: str) -> SectionScore:
        return self._score("contact", text)

    def summary(self, text: str) -> SectionScore:
        return self._score("summary", text, {"length": self._summary_span_long_enough})

    def experience(self, text: str) -> SectionScore:
        return self._score("experience", text)

    def education(self, text: str) -> SectionScore:
        return self._score("education", text, {"gpa": self._gpa_meets_minimum})

    def skills(self, text: str) -> SectionScore:
        return self._score("skills", text)

    def achievements(self, text: str) -> SectionScore:
        return self._score("achievements", text)

    def analyze_all(self, text: str) -> SectionScores:
        return SectionScores(**{name: getattr(self, name)(text) for name in SECTION_NAMES})

    def _score(self, section: str, text: str, overrides: dict[str, CheckFn] | None = None) -> SectionScore:
        text = text or ""
        total = 0
        feedback: list[str] = []
        for check_id, check in self._config.section_checks(section).items():
            check_fn = (overrides or {}).get(check_id, self._present)
            if check_fn(section, check_id, check, text):
                total += check.points
            else:
                feedback.append(check.feedback)
        return SectionScore(score=clamp_score(total), feedback=feedback)

    def _present(self, section: str, check_id: str, check: SectionCheck, text: str) -> bool:
        if not text:
            return False
        pattern = self._patterns.get((section, check_id))
        if pattern is not None and pattern.search(text):
            return True
        terms = compile_terms(tuple(check.terms))
        if terms is not None and terms.search(text):
            return True
        if check.categories:
            return bool(self._matcher.extract(text, self._config.categories_for(check.categories)))
        return False

    def _summary_span_long_enough(self, section: str, check_id: str, check: SectionCheck, text: str) -> bool:
        header = self._patterns.get((section, "header"))
        if header is None:
            return False
        match = header.search(text)
        if match is None:
            return False
        span = text[match.end():].lstrip(" \t:-–—\n")
        stop = _span_stop_pattern(tuple(check.terms)).search(span)
        if stop is not None:
            span = span[: stop.start()]
        return len(span.strip()) > (check.min_length or 0)

    def _gpa_meets_minimum(self, section: str, check_id: str, check: SectionCheck, text: str) -> bool:
        pattern = self._patterns.get((section, check_id))
        if pattern is None:
            return False
        minimum = check.minimum if check.minimum is not None else 0.0
        for match in pattern.finditer(text):
            captured = next((group for group in match.groups() if group), None)
            if captured is None:
                continue
            try:
                value = float(captured)
            except ValueError:
                continue
            if value >= minimum:
                return True
        return False


@lru_cache(maxsize=32)
def _span_stop_pattern(headings: tuple[str, ...]) -> re.Pattern[str]:
    """Blank line, an inline ``Heading:`` or a heading on its own line ends the span."""
    heading_re = compile_terms(headings)
    if heading_re is None:
        return re.compile(r"\n[^\S\n]*\n")
    inner = heading_re.pattern
    return re.compile(
        rf"\n[^\S\n]*\n|{inner}[^\S\n]*:|\n[^\S\n]*{inner}[^\S\n]*(?=\n|$)",
        re.IGNORECASE,
    )

from __future__ import annotations

import re

from .text_utils import clamp_score

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_NON_ALPHA_RE = re.compile(r"[^a-z]")
_SILENT_SUFFIX_RE = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y_RE = re.compile(r"^y")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]{1,2}")


def count_syllables(word: str) -> int:
    cleaned = _NON_ALPHA_RE.sub("", word.lower())
    if len(cleaned) <= 3:
        return 1
    cleaned = _SILENT_SUFFIX_RE.sub("", cleaned)
    cleaned = _LEADING_Y_RE.sub("", cleaned)
    groups = _VOWEL_GROUP_RE.findall(cleaned)
    return len(groups) or 1


def split_sentences(text: str) -> list[str]:
    return [span.strip() for span in _SENTENCE_SPLIT_RE.split(text or "") if span.strip()]


def split_words(text: str) -> list[str]:
    return (text or "").split()


class ReadabilityScorer:
    """Flesch Reading Ease clamped to a 0-100 score."""

    def score(self, text: str) -> int:
        sentences = split_sentences(text)
        words = split_words(text)
        if not sentences or not words:
            return 0
        syllables = sum(count_syllables(word) for word in words)
        ease = 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))
        return clamp_score(ease)

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from .patterns import EngineConfig, PatternCategory
from .text_utils import dedupe, normalize_term, strip_bullet_prefix

_NUMERIC_RE = re.compile(r"^[\d\s.,%$+-]+$")
_INLINE_STOP_RE = re.compile(r"[.;!?](?=\s|$)|\n")
_CLAUSE_BREAK_RE = re.compile(r"[.;!?](?=\s)")
_BLANK_LINE_RE = re.compile(r"\n[^\S\n]*\n")
_LINE_RE = re.compile(r"[^\n]+")
_CHAIN_GAP_RE = re.compile(r"[^\S\n]+")
_ANCHOR_TRAILER_RE = re.compile(r"[^\S\n]*(?:\(s\))?[^\S\n]*[:\-–—]?[^\S\n]*")


@lru_cache(maxsize=512)
def compile_terms(terms: tuple[str, ...]) -> re.Pattern[str] | None:
    """One alternation per term list, longest first, guarded so c++ / node.js / ci/cd match whole."""
    cleaned = dedupe([normalize_term(term) for term in terms if term and term.strip()])
    if not cleaned:
        return None
    ordered = sorted(cleaned, key=lambda term: (-len(term), term))
    alternation = "|".join(r"\s+".join(re.escape(part) for part in term.split(" ")) for term in ordered)
    return re.compile(rf"(?<![A-Za-z0-9])(?:{alternation})(?![A-Za-z0-9])", re.IGNORECASE)


def skills_overlap(left: str, right: str) -> bool:
    """Case-insensitive substring overlap in either direction."""
    a = normalize_term(left)
    b = normalize_term(right)
    if not a or not b:
        return False
    return a in b or b in a


def has_overlap(skill: str, keywords: list[str]) -> bool:
    return any(skills_overlap(skill, keyword) for keyword in keywords)


@dataclass(frozen=True, slots=True)
class AnchorRun:
    """Text owned by one anchor phrase.

    ``kind`` is ``inline`` (words after the anchor), ``trailing`` (the clause an anchor
    closes, as in "Go is a plus") or ``block`` (the lines under a heading).
    """

    anchor: str
    position: int
    kind: str
    spans: tuple[tuple[int, int], ...]
    text: str
    labeled: bool = False

    def covers(self, offset: int) -> bool:
        return any(start <= offset < end for start, end in self.spans)


@dataclass(frozen=True, slots=True)
class _Chain:
    start: int
    end: int
    phrases: tuple[str, ...]


def _anchor_chains(text: str, pattern: re.Pattern[str]) -> list[_Chain]:
    chains: list[_Chain] = []
    for match in pattern.finditer(text):
        phrase = normalize_term(match.group(0))
        if chains and _CHAIN_GAP_RE.fullmatch(text, chains[-1].end, match.start()):
            last = chains[-1]
            chains[-1] = _Chain(start=last.start, end=match.end(), phrases=(*last.phrases, phrase))
        else:
            chains.append(_Chain(start=match.start(), end=match.end(), phrases=(phrase,)))
    return chains


def _line_start(text: str, pos: int) -> int:
    return text.rfind("\n", 0, pos) + 1


def _begins_line(text: str, pos: int) -> bool:
    return not strip_bullet_prefix(text[_line_start(text, pos) : pos])


class TextFeatureMatcher:
    def __init__(self, stop_words: tuple[str, ...] | list[str] = ()) -> None:
        self._stop_words = frozenset(normalize_term(word) for word in stop_words)

    @classmethod
    def from_config(cls, config: EngineConfig) -> "TextFeatureMatcher":
        return cls(stop_words=config.stop_words)

    def is_noise(self, term: str) -> bool:
        if not term:
            return True
        if term in self._stop_words:
            return True
        if len(term) == 1:
            return True
        return bool(_NUMERIC_RE.match(term))

    def extract_category(self, text: str, category: PatternCategory) -> list[str]:
        pattern = compile_terms(tuple(category.patterns))
        if pattern is None or not text:
            return []
        found: list[str] = []
        for match in pattern.finditer(text):
            term = normalize_term(match.group(0))
            if self.is_noise(term):
                continue
            found.append(term)
        return dedupe(found)

    def extract(self, text: str, categories: list[PatternCategory]) -> list[str]:
        found: list[str] = []
        for category in categories:
            found.extend(self.extract_category(text or "", category))
        return dedupe(found)

    def anchor_runs(
        self,
        text: str,
        anchor_phrases: tuple[str, ...] | list[str],
        *,
        window_words: int = 12,
        block_lines: int = 8,
    ) -> list[AnchorRun]:
        """Split the text into runs owned by anchor phrases.

        Anchors separated only by spaces form one chain ("Preferred Qualifications").
        A chain that fills its line is a heading: its first phrase owns the following
        lines up to a blank line or the next heading. Any other chain owns the words
        after it, or, when the clause ends right after it, the clause before it; that
        trailing run belongs to the chain's last phrase ("Kubernetes experience
        preferred"). Lines under a heading that carry their own label ("Nice to have:
        Kafka", "Go is a plus") are left to that label.
        """
        pattern = compile_terms(tuple(anchor_phrases))
        if pattern is None or not text:
            return []

        runs: list[AnchorRun] = []
        headings: list[tuple[_Chain, int]] = []
        for chain in _anchor_chains(text, pattern):
            trailer = _ANCHOR_TRAILER_RE.match(text, chain.end)
            body_start = trailer.end()
            at_line_end = body_start >= len(text) or text[body_start] == "\n"
            begins_line = _begins_line(text, chain.start)
            if begins_line and at_line_end:
                headings.append((chain, body_start))
                continue
            run = self._inline_run(text, chain, body_start, window_words, labeled=begins_line and ":" in trailer.group(0))
            if run is None:
                run = self._trailing_run(text, chain, window_words)
            if run is not None:
                runs.append(run)

        heading_lines = sorted(_line_start(text, chain.start) for chain, _ in headings)
        carved = [run.position for run in runs if run.labeled]
        for chain, body_start in headings:
            run = self._block_run(text, chain, body_start, heading_lines, carved, block_lines)
            if run is not None:
                runs.append(run)
        return runs

    def extract_near(
        self,
        text: str,
        anchor_phrases: tuple[str, ...] | list[str],
        categories: list[PatternCategory],
        *,
        exclude_anchors: tuple[str, ...] | list[str] = (),
        window_words: int = 12,
        block_lines: int = 8,
    ) -> list[str]:
        """Category matches inside the runs owned by ``anchor_phrases``.

        Runs owned by ``exclude_anchors`` compete for the same text: an anchor that falls
        inside one of them is skipped, so "Preferred: experience with Kubernetes" does
        not seed a required skill.
        """
        text = text or ""
        own = {normalize_term(phrase) for phrase in anchor_phrases if phrase and phrase.strip()}
        runs = self.anchor_runs(
            text,
            [*anchor_phrases, *exclude_anchors],
            window_words=window_words,
            block_lines=block_lines,
        )
        others = [run for run in runs if run.anchor not in own]
        kept = [
            run
            for run in runs
            if run.anchor in own and not any(other.covers(run.position) for other in others)
        ]
        return self.extract("\n".join(run.text for run in kept), categories)

    @staticmethod
    def _inline_run(text: str, chain: _Chain, start: int, window_words: int, *, labeled: bool) -> AnchorRun | None:
        stop = _INLINE_STOP_RE.search(text, start)
        end = stop.start() if stop else len(text)
        words = text[start:end].split()
        if not words:
            return None
        return AnchorRun(
            anchor=chain.phrases[0],
            position=chain.start,
            kind="inline",
            spans=((start, end),),
            text=" ".join(words[:window_words]),
            labeled=labeled,
        )

    @staticmethod
    def _trailing_run(text: str, chain: _Chain, window_words: int) -> AnchorRun | None:
        begin = _line_start(text, chain.start)
        for match in _CLAUSE_BREAK_RE.finditer(text, begin, chain.start):
            begin = match.end()
        words = strip_bullet_prefix(text[begin : chain.start]).split()
        if not words:
            return None
        return AnchorRun(
            anchor=chain.phrases[-1],
            position=chain.start,
            kind="trailing",
            spans=((begin, chain.start),),
            text=" ".join(words[-window_words:]),
            labeled=True,
        )

    @staticmethod
    def _block_run(
        text: str,
        chain: _Chain,
        body_start: int,
        heading_lines: list[int],
        carved: list[int],
        block_lines: int,
    ) -> AnchorRun | None:
        if block_lines <= 0:
            return None
        blank = _BLANK_LINE_RE.search(text, body_start + 1)
        end = blank.start() if blank else len(text)
        end = min([end, *(line for line in heading_lines if body_start < line < end)])

        spans: list[tuple[int, int]] = []
        lines: list[str] = []
        for match in _LINE_RE.finditer(text, body_start, end):
            line = match.group(0).strip()
            if not line or any(match.start() <= pos < match.end() for pos in carved):
                continue
            spans.append((match.start(), match.end()))
            lines.append(line)
            if len(lines) >= block_lines:
                break
        if not lines:
            return None
        return AnchorRun(
            anchor=chain.phrases[0],
            position=chain.start,
            kind="block",
            spans=tuple(spans),
            text="\n".join(lines),
        )

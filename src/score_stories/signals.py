"""Heuristic transparency and composition signals for a story."""

from __future__ import annotations

import math
import re

from load_documents.models import Document
from score_stories.models import ContentBreakdown, SourceDiversity, StorySignals, TransparencySignals

ATTRIBUTION_CUES = [
    re.compile(r"\bsaid\b", re.IGNORECASE),
    re.compile(r"\baccording to\b", re.IGNORECASE),
    re.compile(r"\bquoted\b", re.IGNORECASE),
    re.compile(r"\bstated\b", re.IGNORECASE),
    re.compile(r"\breported\b", re.IGNORECASE),
    re.compile(r"\bexplained\b", re.IGNORECASE),
    re.compile(r'"[^"]+"\s+said\b'),
    re.compile(r"—\s*[A-Z][a-z]+"),
]

PRIMARY_SOURCE_HINTS = [
    re.compile(r"\.gov\b", re.IGNORECASE),
    re.compile(r"\breport\b", re.IGNORECASE),
    re.compile(r"\bdata\b", re.IGNORECASE),
    re.compile(r"\bcourt\b", re.IGNORECASE),
    re.compile(r"\bstudy\b", re.IGNORECASE),
    re.compile(r"\bsurvey\b", re.IGNORECASE),
    re.compile(r"\bofficial\b", re.IGNORECASE),
    re.compile(r"\bannounced\b", re.IGNORECASE),
    re.compile(r"\b(?:WTO|EU|IEA|NASA|CDC|FBI)\b", re.IGNORECASE),
]

SENSATIONAL_WORDS = [
    "shocking", "devastating", "explosive", "bombshell", "crisis",
    "chaos", "fury", "outrage", "scandal", "nightmare", "horror",
    "disaster", "panic", "terrifying", "alarming", "stunning",
]
_SENSATIONAL_PATTERNS = {
    word: re.compile(rf"\b{word}\b", re.IGNORECASE) for word in SENSATIONAL_WORDS
}

INTERPRETATION_CUES = [
    re.compile(r"\blikely\b", re.IGNORECASE),
    re.compile(r"\bsuggests\b", re.IGNORECASE),
    re.compile(r"\banalysts\b", re.IGNORECASE),
    re.compile(r"\bwidely seen\b", re.IGNORECASE),
    re.compile(r"\bcould\b", re.IGNORECASE),
    re.compile(r"\bmay\b", re.IGNORECASE),
    re.compile(r"\bmight\b", re.IGNORECASE),
    re.compile(r"\bpotential\b", re.IGNORECASE),
    re.compile(r"\bexperts say\b", re.IGNORECASE),
    re.compile(r"\bseems\b", re.IGNORECASE),
    re.compile(r"\bappears\b", re.IGNORECASE),
    re.compile(r"\binterpreted\b", re.IGNORECASE),
]

OPINION_CUES = [
    re.compile(r'"[^"]+"\s+(?:said|stated|explained)\b', re.IGNORECASE),
    re.compile(r'\b(?:said|stated|argued)\s+"', re.IGNORECASE),
    re.compile(r"\baccording to\b", re.IGNORECASE),
    re.compile(r'"\s+said\b', re.IGNORECASE),
]

OPINION_SCALE = 400
INTERPRETATION_SCALE = 350
MAX_OPINION_PCT = 35
MAX_INTERPRETATION_PCT = 35
MIN_FACTUAL_PCT = 20


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_matches(text: str, patterns: list[re.Pattern]) -> int:
    """Total non-overlapping matches of every pattern in text."""
    return sum(len(pattern.findall(text)) for pattern in patterns)


def combined_text(documents: list[Document]) -> str:
    return " ".join(f"{d.title} {d.summary}" for d in documents)


def source_diversity(documents: list[Document]) -> SourceDiversity:
    publishers = len({d.publisher for d in documents})
    if publishers >= 4:
        return "high"
    if publishers >= 2:
        return "moderate"
    return "low"


def has_primary_data(text: str) -> bool:
    return any(pattern.search(text) for pattern in PRIMARY_SOURCE_HINTS)


def sensational_words_found(text: str) -> list[str]:
    return [word for word, pattern in _SENSATIONAL_PATTERNS.items() if pattern.search(text)]


def content_breakdown(text: str) -> ContentBreakdown:
    """Estimate factual/opinion/interpretation percentages from cue density."""
    word_count = len(text.split()) or 1
    opinion = min(MAX_OPINION_PCT, _round_half_up(count_matches(text, OPINION_CUES) / word_count * OPINION_SCALE))
    interpretation = min(
        MAX_INTERPRETATION_PCT,
        _round_half_up(count_matches(text, INTERPRETATION_CUES) / word_count * INTERPRETATION_SCALE),
    )
    factual = max(MIN_FACTUAL_PCT, 100 - opinion - interpretation)

    total = factual + opinion + interpretation
    factual = _round_half_up(factual / total * 100)
    opinion = _round_half_up(opinion / total * 100)
    return ContentBreakdown(
        factual=factual,
        opinion=opinion,
        interpretation=100 - factual - opinion,
    )


def compute_story_signals(documents: list[Document]) -> StorySignals:
    """Compute transparency signals and content breakdown for a story's members."""
    if not documents:
        return StorySignals(
            transparency_signals=TransparencySignals(
                has_attribution_clarity=False,
                source_diversity="low",
                has_primary_data=False,
                sensational_language_detected=False,
            ),
        )

    text = combined_text(documents)
    attribution_matches = count_matches(text, ATTRIBUTION_CUES)

    return StorySignals(
        transparency_signals=TransparencySignals(
            has_attribution_clarity=attribution_matches >= min(2, len(documents)),
            source_diversity=source_diversity(documents),
            has_primary_data=has_primary_data(text),
            sensational_language_detected=len(sensational_words_found(text)) >= 2,
        ),
        content_breakdown=content_breakdown(text),
    )

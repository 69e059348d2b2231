"""Data models for the score_stories stage."""

from dataclasses import dataclass, field
from typing import Literal

SourceDiversity = Literal["low", "moderate", "high"]


@dataclass(frozen=True)
class TransparencySignals:
    has_attribution_clarity: bool
    source_diversity: SourceDiversity
    has_primary_data: bool
    sensational_language_detected: bool


@dataclass(frozen=True)
class ContentBreakdown:
    """Estimated percentage split of a story's text; always sums to 100."""

    factual: int = 100
    opinion: int = 0
    interpretation: int = 0


@dataclass(frozen=True)
class StorySignals:
    transparency_signals: TransparencySignals
    content_breakdown: ContentBreakdown = field(default_factory=ContentBreakdown)

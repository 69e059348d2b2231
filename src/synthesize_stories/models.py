"""Data models for the synthesize_stories stage."""

from dataclasses import dataclass, field
from typing import Literal, Optional

BlockType = Literal["factual", "opinion", "interpretation"]


@dataclass(frozen=True)
class ContentBlock:
    type: BlockType
    text: str
    attribution: Optional[str] = None


@dataclass(frozen=True)
class AttributedQuote:
    quote: str
    attribution: str


@dataclass(frozen=True)
class QuotedVoice:
    name: str
    role: str


@dataclass
class SynthesisResult:
    """Ordered content blocks (factual, then opinion, then interpretation) and voices."""

    full_content: list[ContentBlock] = field(default_factory=list)
    quoted_voices: list[QuotedVoice] = field(default_factory=list)
    used_external_analysis: bool = False

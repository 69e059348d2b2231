"""Story response models for the serving layer."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class TransparencySignalsResponse(BaseModel):
    has_attribution_clarity: bool
    source_diversity: Literal["low", "moderate", "high"]
    has_primary_data: bool
    sensational_language_detected: bool


class ContentBreakdownResponse(BaseModel):
    factual: int
    opinion: int
    interpretation: int


class StorySummaryResponse(BaseModel):
    """Story (or single document) as shown in a feed."""

    id: str
    title: str
    summary: str
    topic: str
    region: str
    sources: int
    time_ago: str
    representative_id: Optional[str] = None
    url: Optional[str] = None
    transparency_signals: TransparencySignalsResponse
    content_breakdown: ContentBreakdownResponse


class SourceDetail(BaseModel):
    name: str
    type: str


class QuotedVoiceResponse(BaseModel):
    name: str
    role: str


class ContentBlockResponse(BaseModel):
    type: Literal["factual", "opinion", "interpretation"]
    text: str
    attribution: Optional[str] = None


class StoryDetailResponse(StorySummaryResponse):
    sources_detail: list[SourceDetail] = Field(default_factory=list)
    quoted_voices: list[QuotedVoiceResponse] = Field(default_factory=list)
    full_content: Optional[list[ContentBlockResponse]] = None

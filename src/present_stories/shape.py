"""Convert stories and their members into response shapes."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from load_documents.models import Document
from present_stories.models import (
    ContentBlockResponse,
    ContentBreakdownResponse,
    QuotedVoiceResponse,
    SourceDetail,
    StoryDetailResponse,
    StorySummaryResponse,
    TransparencySignalsResponse,
)
from score_stories.signals import compute_story_signals
from story_db.stories import StoredStory
from synthesize_stories.models import SynthesisResult

WIRE_SERVICES = frozenset({"Reuters", "AP", "AFP", "Associated Press", "BBC"})
INSTITUTIONS = frozenset({"NASA", "European Commission", "WTO", "IEA", "CDC", "NASA Climate"})

EXCERPT_LENGTH = 150
DEFAULT_FEED_LIMIT = 15
MAX_FEED_LIMIT = 30
MIN_FEED_STORIES = 8


def infer_source_type(publisher: str) -> str:
    if publisher in WIRE_SERVICES:
        return "Wire Service"
    if publisher in INSTITUTIONS:
        return "Institution"
    return "Publication"


def format_time_ago(published_at: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    minutes = max(0, int((now - published_at).total_seconds() // 60))
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return f"{days // 7}w ago"


def pick_story_summary(documents: list[Document]) -> str:
    """Longest member summary plus up to two excerpts from other members."""
    ordered = sorted(documents, key=lambda d: len(d.summary), reverse=True)
    if not ordered:
        return ""
    best = ordered[0].summary
    parts = [best]
    for document in ordered[1:3]:
        if document.summary == best or len(document.summary) <= 50:
            continue
        excerpt = document.summary[:EXCERPT_LENGTH].strip()
        if excerpt and not any(excerpt[:30] in part for part in parts):
            parts.append(excerpt + ("…" if len(document.summary) > EXCERPT_LENGTH else ""))
    return " ".join(parts)


def _signal_fields(documents: list[Document]) -> dict:
    signals = compute_story_signals(documents)
    return {
        "transparency_signals": TransparencySignalsResponse(**asdict(signals.transparency_signals)),
        "content_breakdown": ContentBreakdownResponse(**asdict(signals.content_breakdown)),
    }


def story_to_summary(
    story: StoredStory,
    documents: list[Document],
    now: datetime | None = None,
) -> StorySummaryResponse:
    newest = max(documents, key=lambda d: d.published_at)
    return StorySummaryResponse(
        id=story.id,
        title=story.title,
        summary=pick_story_summary(documents),
        topic=story.topic,
        region=story.region,
        sources=len(documents),
        time_ago=format_time_ago(newest.published_at, now),
        representative_id=story.representative_document_id,
        **_signal_fields(documents),
    )


def story_to_detail(
    story: StoredStory,
    documents: list[Document],
    synthesis: SynthesisResult | None = None,
    now: datetime | None = None,
) -> StoryDetailResponse:
    """Detail shape; full content is only included for stories of 3 or 4 members."""
    summary = story_to_summary(story, documents, now)
    publishers = list(dict.fromkeys(d.publisher for d in documents))

    quoted_voices = []
    full_content = None
    if synthesis is not None:
        quoted_voices = [QuotedVoiceResponse(name=v.name, role=v.role) for v in synthesis.quoted_voices]
        if len(documents) in (3, 4):
            full_content = [
                ContentBlockResponse(type=b.type, text=b.text, attribution=b.attribution)
                for b in synthesis.full_content
            ]

    return StoryDetailResponse(
        **summary.model_dump(),
        sources_detail=[SourceDetail(name=p, type=infer_source_type(p)) for p in publishers],
        quoted_voices=quoted_voices,
        full_content=full_content,
    )


def document_to_summary(document: Document, now: datetime | None = None) -> StorySummaryResponse:
    """Flat (unclustered) shape used when no stories are available."""
    return StorySummaryResponse(
        id=document.id,
        title=document.title,
        summary=document.summary,
        topic=document.topic,
        region=document.region,
        sources=1,
        time_ago=format_time_ago(document.published_at, now),
        representative_id=document.id,
        url=document.url,
        **_signal_fields([document]),
    )


def document_to_detail(document: Document, now: datetime | None = None) -> StoryDetailResponse:
    """Detail shape for a single unclustered document from the flat listing."""
    summary = document_to_summary(document, now)
    return StoryDetailResponse(
        **summary.model_dump(),
        sources_detail=[SourceDetail(name=document.publisher, type=infer_source_type(document.publisher))],
    )


def select_feed_stories(
    candidates: list[tuple[StoredStory, list[Document]]],
    limit: int = DEFAULT_FEED_LIMIT,
) -> list[tuple[StoredStory, list[Document]]]:
    """
    Choose the stories shown in the main feed.

    Keeps stories with 2-4 members, widening to 2-5 when fewer than eight
    qualify, then orders by member count and most recent member.
    """
    limit = min(MAX_FEED_LIMIT, max(1, limit))
    candidates = [(story, documents) for story, documents in candidates if documents]

    def in_range(low: int, high: int) -> list[tuple[StoredStory, list[Document]]]:
        return [c for c in candidates if low <= len(c[1]) <= high]

    selected = in_range(2, 4)
    if len(selected) < MIN_FEED_STORIES:
        selected = in_range(2, 5)

    selected.sort(
        key=lambda c: (len(c[1]), max(d.published_at for d in c[1])),
        reverse=True,
    )
    return selected[:limit]

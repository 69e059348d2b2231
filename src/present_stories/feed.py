"""Feed and story lookups for the serving layer."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from present_stories.models import StoryDetailResponse, StorySummaryResponse
from present_stories.shape import (
    DEFAULT_FEED_LIMIT,
    document_to_detail,
    document_to_summary,
    select_feed_stories,
    story_to_detail,
    story_to_summary,
)
from story_db.documents import fetch_documents_by_ids, list_recent_documents
from story_db.stories import get_story, list_stories_with_members
from synthesize_stories.analysis import AnalysisGenerator
from synthesize_stories.synthesize import synthesize_story_detail

logger = logging.getLogger(__name__)


def load_feed(
    session: Session,
    limit: int = DEFAULT_FEED_LIMIT,
    now: datetime | None = None,
) -> list[StorySummaryResponse]:
    """Feed of clustered stories, falling back to a flat document listing."""
    candidates = []
    for story, member_ids in list_stories_with_members(session):
        documents = fetch_documents_by_ids(session, member_ids)
        if documents:
            candidates.append((story, documents))

    selected = select_feed_stories(candidates, limit=limit)
    if selected:
        return [story_to_summary(story, documents, now) for story, documents in selected]

    logger.info("No stories to show, falling back to flat document listing")
    return [document_to_summary(document, now) for document in list_recent_documents(session, limit)]


def load_story_detail(
    session: Session,
    story_id: str,
    analysis: AnalysisGenerator | None = None,
    now: datetime | None = None,
) -> StoryDetailResponse | None:
    """Detail for a story ID, or None when the story or its members are gone.

    IDs from the flat document listing resolve to a single-document detail.
    """
    found = get_story(session, story_id)
    if found is None:
        documents = fetch_documents_by_ids(session, [story_id])
        return document_to_detail(documents[0], now) if documents else None
    story, member_ids = found
    documents = fetch_documents_by_ids(session, member_ids)
    if not documents:
        return None
    synthesis = synthesize_story_detail(documents, analysis=analysis)
    return story_to_detail(story, documents, synthesis, now)

"""Tests for present_stories.feed module."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine

from load_documents.models import Document
from present_stories.feed import load_feed, load_story_detail
from story_db.connection import get_session, init_db
from story_db.documents import insert_documents
from story_db.stories import replace_stories

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _document(doc_id: str, publisher: str = "NPR", minutes_ago: int = 0) -> Document:
    return Document(
        id=doc_id,
        title="Senate passes infrastructure bill",
        summary=f"The Senate voted 52-48 on Tuesday, {publisher} reported.",
        topic="Politics",
        region="US",
        publisher=publisher,
        published_at=NOW - timedelta(minutes=minutes_ago),
        ingested_at=NOW,
    )


def _story(story_id: str, member_ids: list[str]) -> dict:
    return {
        "id": story_id,
        "title": "Senate passes infrastructure bill",
        "topic": "Politics",
        "region": "US",
        "representative_id": member_ids[0],
        "member_ids": member_ids,
    }


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    init_db(engine)
    with get_session(engine) as session:
        insert_documents(
            session,
            [_document("a"), _document("b", "BBC", 5), _document("c", "AP", 10), _document("d", "NPR", 20)],
        )
        yield session


class TestLoadFeed:
    def test_clustered_stories(self, session) -> None:
        replace_stories(session, [_story("s1", ["a", "b", "c"]), _story("s2", ["d"])], now=NOW)
        feed = load_feed(session, now=NOW)
        assert [item.id for item in feed] == ["s1"]
        assert feed[0].sources == 3
        assert feed[0].transparency_signals.source_diversity == "moderate"

    def test_falls_back_to_flat_listing(self, session) -> None:
        replace_stories(session, [_story("s1", ["a"])], now=NOW)
        feed = load_feed(session, limit=2, now=NOW)
        assert [item.id for item in feed] == ["a", "b"]
        assert all(item.sources == 1 for item in feed)


class TestLoadStoryDetail:
    def test_detail_with_synthesis(self, session) -> None:
        replace_stories(session, [_story("s1", ["a", "b", "c"])], now=NOW)
        detail = load_story_detail(session, "s1", now=NOW)
        assert detail is not None
        assert detail.sources == 3
        assert detail.full_content is not None
        assert detail.full_content[-1].type == "interpretation"

    def test_unknown_story(self, session) -> None:
        assert load_story_detail(session, "missing") is None

    def test_flat_listing_items_resolve_to_document_detail(self, session) -> None:
        feed = load_feed(session, limit=1, now=NOW)
        assert [item.id for item in feed] == ["a"]

        detail = load_story_detail(session, feed[0].id, now=NOW)

        assert detail is not None
        assert detail.id == "a"
        assert detail.sources == 1
        assert [(s.name, s.type) for s in detail.sources_detail] == [("NPR", "Publication")]
        assert detail.quoted_voices == []
        assert detail.full_content is None

"""Shared fixtures for cluster_stories tests."""

from datetime import datetime, timedelta, timezone

import pytest

from load_documents.models import Document

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_document():
    """Factory for Documents with sensible defaults."""

    def _make(doc_id: str, title: str, minutes_ago: int = 0, **overrides) -> Document:
        fields = {
            "id": doc_id,
            "title": title,
            "summary": title,
            "topic": "Politics",
            "region": "US",
            "publisher": "NPR",
            "published_at": NOW - timedelta(minutes=minutes_ago),
            "ingested_at": NOW,
        }
        fields.update(overrides)
        return Document(**fields)

    return _make

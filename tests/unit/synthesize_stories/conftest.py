"""Shared fixtures for synthesize_stories tests."""

from datetime import datetime, timezone

import pytest

from load_documents.models import Document

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_document():
    """Factory for Documents with sensible defaults."""

    def _make(doc_id: str, title: str, summary: str, publisher: str = "NPR") -> Document:
        return Document(
            id=doc_id,
            title=title,
            summary=summary,
            topic="Politics",
            region="US",
            publisher=publisher,
            published_at=NOW,
            ingested_at=NOW,
        )

    return _make

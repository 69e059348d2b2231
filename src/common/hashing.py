"""Hashing utilities."""

import hashlib
from datetime import datetime


def generate_document_id(title: str, publisher: str, published_at: datetime) -> str:
    """Generate a unique document ID from title, publisher and publish time."""
    key = f"{title}|{publisher}|{published_at.isoformat()}"
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def generate_story_id(document_ids: list[str]) -> str:
    """Generate a story ID from its member document IDs.

    The IDs are sorted first so the result depends only on membership.
    """
    key = "|".join(sorted(document_ids))
    return hashlib.sha256(key.encode()).hexdigest()[:16]

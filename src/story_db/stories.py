"""Story and membership persistence.

A clustering run replaces the whole story set: clear_all_stories followed by
insert_story/link_member for every new cluster. replace_stories wraps that
sequence in a single transaction so readers never see a partially cleared set.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.datetime import ensure_utc
from common.utils import get_value
from story_db.models import StoryDocumentRow, StoryRow

logger = logging.getLogger(__name__)


class StoryPersistenceError(RuntimeError):
    """The story set could not be replaced; the previous set is still in place."""


@dataclass(frozen=True)
class StoredStory:
    id: str
    title: str
    topic: str
    region: str
    representative_document_id: str | None
    created_at: datetime
    updated_at: datetime


def _row_to_story(row: StoryRow) -> StoredStory:
    return StoredStory(
        id=row.id,
        title=row.title,
        topic=row.topic,
        region=row.region,
        representative_document_id=row.representative_document_id,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


def clear_all_stories(session: Session) -> None:
    """Delete every membership and story row (not committed)."""
    session.execute(delete(StoryDocumentRow))
    session.execute(delete(StoryRow))


def insert_story(
    session: Session,
    story_id: str,
    title: str,
    topic: str,
    region: str,
    representative_document_id: str | None,
    now: datetime | None = None,
) -> None:
    """Add a story row (not committed)."""
    now = now or datetime.now(timezone.utc)
    session.add(
        StoryRow(
            id=story_id,
            title=title,
            topic=topic,
            region=region,
            representative_document_id=representative_document_id,
            created_at=now,
            updated_at=now,
        )
    )
    # Membership rows reference the story, so it must exist first.
    session.flush()


def link_member(session: Session, story_id: str, document_id: str) -> None:
    """Add a membership row (not committed)."""
    session.add(StoryDocumentRow(story_id=story_id, document_id=document_id))


def replace_stories(session: Session, stories: Iterable[Any], now: datetime | None = None) -> int:
    """Atomically replace all stored stories with the given ones.

    Args:
        session: SQLAlchemy session with no pending work.
        stories: Objects with id, title, topic, region, representative_id and
            member_ids attributes (or keys).
        now: Timestamp recorded as created_at/updated_at.

    Returns:
        Number of stories written.

    Raises:
        StoryPersistenceError: If any statement fails. The transaction is rolled
            back so the previous story set remains visible.
    """
    now = now or datetime.now(timezone.utc)
    written = 0
    try:
        clear_all_stories(session)
        for story in stories:
            story_id = get_value(story, "id")
            insert_story(
                session,
                story_id,
                get_value(story, "title"),
                get_value(story, "topic"),
                get_value(story, "region"),
                get_value(story, "representative_id"),
                now=now,
            )
            for document_id in get_value(story, "member_ids"):
                link_member(session, story_id, document_id)
            written += 1
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Story replacement failed after %d stories, rolled back: %s", written, exc)
        raise StoryPersistenceError("Failed to replace stories") from exc

    logger.info("Saved %d stories", written)
    return written


def _members_by_story(session: Session, story_ids: list[str]) -> dict[str, list[str]]:
    members: dict[str, list[str]] = defaultdict(list)
    if not story_ids:
        return members
    stmt = (
        select(StoryDocumentRow.story_id, StoryDocumentRow.document_id)
        .where(StoryDocumentRow.story_id.in_(story_ids))
        .order_by(StoryDocumentRow.story_id, StoryDocumentRow.document_id)
    )
    for story_id, document_id in session.execute(stmt):
        members[story_id].append(document_id)
    return members


def list_stories_with_members(session: Session) -> list[tuple[StoredStory, list[str]]]:
    """Return every story with its member document IDs, most recently updated first."""
    rows = session.execute(select(StoryRow).order_by(StoryRow.updated_at.desc(), StoryRow.id)).scalars().all()
    members = _members_by_story(session, [row.id for row in rows])
    return [(_row_to_story(row), members.get(row.id, [])) for row in rows]


def get_story(session: Session, story_id: str) -> tuple[StoredStory, list[str]] | None:
    """Return a story and its member document IDs, or None if absent."""
    row = session.get(StoryRow, story_id)
    if row is None:
        return None
    members = _members_by_story(session, [story_id])
    return _row_to_story(row), members.get(story_id, [])


def count_stories(session: Session) -> int:
    return session.execute(select(func.count()).select_from(StoryRow)).scalar_one()

"""Document reads and writes."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from common.datetime import ensure_utc
from load_documents.models import Document
from story_db.models import DocumentRow

logger = logging.getLogger(__name__)


def _row_to_document(row: DocumentRow) -> Document:
    return Document(
        id=row.id,
        title=row.title,
        summary=row.summary,
        topic=row.topic,
        region=row.region,
        publisher=row.publisher,
        published_at=ensure_utc(row.published_at),
        ingested_at=ensure_utc(row.ingested_at),
        url=row.url,
    )


def insert_documents(session: Session, documents: Iterable[Document]) -> int:
    """Insert documents, skipping IDs that already exist. Returns the insert count."""
    batch: dict[str, Document] = {}
    for document in documents:
        batch.setdefault(document.id, document)
    if not batch:
        return 0

    existing = set(
        session.execute(select(DocumentRow.id).where(DocumentRow.id.in_(list(batch)))).scalars()
    )
    inserted = 0
    for document_id, document in batch.items():
        if document_id in existing:
            logger.debug("Skipped duplicate document: id=%s", document_id)
            continue
        session.add(
            DocumentRow(
                id=document.id,
                title=document.title,
                summary=document.summary,
                topic=document.topic,
                region=document.region,
                publisher=document.publisher,
                published_at=document.published_at,
                ingested_at=document.ingested_at,
                url=document.url,
            )
        )
        inserted += 1

    session.commit()
    logger.info("Inserted %d documents (%d skipped as duplicates)", inserted, len(batch) - inserted)
    return inserted


def fetch_candidate_documents(
    session: Session,
    window_hours: int,
    now: datetime | None = None,
) -> list[Document]:
    """Return documents published within the last window_hours, most recent first."""
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(hours=window_hours)
    stmt = (
        select(DocumentRow)
        .where(DocumentRow.published_at >= since)
        .order_by(DocumentRow.published_at.desc(), DocumentRow.id)
    )
    documents = [_row_to_document(row) for row in session.execute(stmt).scalars()]
    logger.info("Loaded %d candidate documents published since %s", len(documents), since.isoformat())
    return documents


def fetch_documents_by_ids(session: Session, document_ids: list[str]) -> list[Document]:
    """Return documents for the given IDs in the order requested; unknown IDs are skipped."""
    if not document_ids:
        return []
    rows = session.execute(select(DocumentRow).where(DocumentRow.id.in_(document_ids))).scalars()
    by_id = {row.id: _row_to_document(row) for row in rows}
    return [by_id[document_id] for document_id in document_ids if document_id in by_id]


def list_recent_documents(session: Session, limit: int = 50) -> list[Document]:
    """Return the most recently published documents (flat listing)."""
    stmt = select(DocumentRow).order_by(DocumentRow.published_at.desc()).limit(limit)
    return [_row_to_document(row) for row in session.execute(stmt).scalars()]


def count_documents(session: Session) -> int:
    return session.execute(select(func.count()).select_from(DocumentRow)).scalar_one()

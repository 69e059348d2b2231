"""Build cleaned Documents from raw records."""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from common.datetime import parse_datetime
from common.hashing import generate_document_id
from common.utils import get_value
from load_documents.models import Document

logger = logging.getLogger(__name__)

SUMMARY_MAX_LENGTH = 500


def clean_text(text: Optional[str]) -> Optional[str]:
    """Clean text by stripping HTML, fixing escapes, and collapsing whitespace."""
    if not text:
        return None
    # Strip HTML tags (keep text content)
    text = re.sub(r"<[^>]+>", " ", text)
    # Remove escaped quotes
    text = text.replace('\\"', '"')
    # Collapse whitespace
    text = re.sub(r"\s+", " ", text).strip()
    return text if text else None


def truncate_summary(text: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    """Cut cleaned text at max_length, marking the cut with an ellipsis."""
    stripped = clean_text(text) or ""
    if len(stripped) <= max_length:
        return stripped
    return stripped[:max_length].strip() + "..."


def build_document(
    raw: Any,
    defaults: Optional[dict[str, str]] = None,
    ingested_at: Optional[datetime] = None,
) -> Optional[Document]:
    """Build a Document from a raw dict or object, or None if it is unusable.

    Records without a title, publisher, topic or region, or with an unparseable
    published_at, are skipped.
    """
    defaults = defaults or {}

    def field(key: str) -> Any:
        value = get_value(raw, key)
        return value if value else defaults.get(key)

    title = clean_text(field("title"))
    publisher = clean_text(field("publisher"))
    topic = field("topic")
    region = field("region")
    if not title or not publisher or not topic or not region:
        logger.warning("Skipping document with missing fields: title=%r publisher=%r", title, publisher)
        return None

    try:
        published_at = parse_datetime(field("published_at")).astimezone(timezone.utc)
    except (TypeError, ValueError):
        logger.warning("Skipping document with invalid published_at: %r", field("published_at"))
        return None

    summary = truncate_summary(field("summary") or "") or truncate_summary(title)
    url = (field("url") or "").strip() or None

    return Document(
        id=generate_document_id(title, publisher, published_at),
        title=title,
        summary=summary,
        topic=topic,
        region=region,
        publisher=publisher,
        published_at=published_at,
        ingested_at=ingested_at or datetime.now(timezone.utc),
        url=url,
    )


def build_documents(
    raw_records: list[Any],
    defaults: Optional[dict[str, str]] = None,
) -> list[Document]:
    """Build Documents from raw records, deduplicated by ID in first-seen order."""
    if not raw_records:
        logger.warning("No records to load")
        return []

    now = datetime.now(timezone.utc)
    seen: set[str] = set()
    documents = []
    for raw in raw_records:
        document = build_document(raw, defaults=defaults, ingested_at=now)
        if document is None or document.id in seen:
            continue
        seen.add(document.id)
        documents.append(document)

    logger.info("Built %d documents from %d records", len(documents), len(raw_records))
    return documents

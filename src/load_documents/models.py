"""Data models for the load_documents stage."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Document:
    """A single cleaned news item from one publisher."""

    id: str
    title: str
    summary: str
    topic: str
    region: str
    publisher: str
    published_at: datetime
    ingested_at: datetime
    url: Optional[str] = None

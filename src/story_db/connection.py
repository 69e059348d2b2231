"""Engine and session management."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from common.config import get_config
from story_db.models import Base

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def get_engine(database_url: str | None = None) -> Engine:
    """Return a (cached) engine for the configured or given database URL."""
    url = make_url(database_url or get_config().database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    logger.info("Connecting to %s database", url.get_backend_name())
    return create_engine(url)


def init_db(engine: Engine | None = None) -> None:
    """Create tables if they do not exist."""
    Base.metadata.create_all(engine or get_engine())


@contextmanager
def get_session(engine: Engine | None = None) -> Iterator[Session]:
    """Yield a session bound to the engine; the caller commits."""
    factory = sessionmaker(bind=engine or get_engine(), expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()

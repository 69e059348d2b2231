"""Run a full clustering pass: load the window, cluster, replace stored stories."""

from __future__ import annotations

import logging
import threading
from contextlib import AbstractContextManager
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.orm import Session

from cluster_stories.canonical import build_story
from cluster_stories.cluster_stories import DEFAULT_POOL_SIZE, cluster_documents
from cluster_stories.models import ClusteringResult, StoryRecord
from story_db.connection import get_session
from story_db.documents import fetch_candidate_documents
from story_db.stories import replace_stories

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HOURS = 48

SessionFactory = Callable[[], AbstractContextManager[Session]]

_run_lock = threading.Lock()


class ClusteringInProgressError(RuntimeError):
    """Another clustering run is already in flight."""


def run_clustering(
    session_factory: SessionFactory = get_session,
    window_hours: int = DEFAULT_WINDOW_HOURS,
    pool_size: int = DEFAULT_POOL_SIZE,
    now: datetime | None = None,
) -> tuple[ClusteringResult, list[StoryRecord]]:
    """
    Recompute the story partition for the current window and persist it.

    Only one run may be in flight per process; a concurrent trigger is rejected.
    When the window is empty the stored stories are left untouched.

    Returns:
        The run counts and the stories written.

    Raises:
        ClusteringInProgressError: If a run is already in progress.
        StoryPersistenceError: If the stories could not be replaced.
    """
    if not _run_lock.acquire(blocking=False):
        raise ClusteringInProgressError("A clustering run is already in progress")
    try:
        now = now or datetime.now(timezone.utc)
        with session_factory() as session:
            documents = fetch_candidate_documents(session, window_hours, now=now)
        if not documents:
            logger.warning("No documents published in the last %d hours", window_hours)
            return ClusteringResult(), []

        clusters = cluster_documents(documents, pool_size=pool_size)
        stories = [build_story(cluster) for cluster in clusters]

        with session_factory() as session:
            replace_stories(session, stories, now=now)

        assigned = sum(len(story.member_ids) for story in stories)
        logger.info("Clustering run saved %d stories covering %d documents", len(stories), assigned)
        return ClusteringResult(
            stories_created=len(stories),
            documents_assigned=assigned,
            clusters_updated=len(stories),
        ), stories
    finally:
        _run_lock.release()

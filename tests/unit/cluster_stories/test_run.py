"""Tests for cluster_stories.run module."""

from datetime import timedelta

import pytest
from sqlalchemy import create_engine

from cluster_stories import run as run_module
from cluster_stories.run import ClusteringInProgressError, run_clustering
from story_db.connection import get_session, init_db
from story_db.documents import insert_documents
from story_db.stories import list_stories_with_members, replace_stories


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://")
    init_db(engine)
    return lambda: get_session(engine)


class TestRunClustering:
    def test_clusters_window_and_persists(self, session_factory, make_document, now) -> None:
        with session_factory() as session:
            insert_documents(
                session,
                [
                    make_document("a", "Senate Passes Infrastructure Bill After Close Vote"),
                    make_document("b", "Infrastructure Bill Clears Senate in Narrow Vote", minutes_ago=5),
                    make_document("c", "Fed Holds Rates Steady", minutes_ago=10),
                    make_document("old", "Fed Holds Rates Steady", published_at=now - timedelta(hours=72)),
                ],
            )

        result, stories = run_clustering(session_factory, window_hours=48, now=now)

        assert result.stories_created == 2
        assert result.documents_assigned == 3
        assert sorted(story.member_ids for story in stories) == [["a", "b"], ["c"]]
        with session_factory() as session:
            persisted = list_stories_with_members(session)
        assert sorted(members for _, members in persisted) == [["a", "b"], ["c"]]

    def test_rerun_replaces_stories(self, session_factory, make_document, now) -> None:
        with session_factory() as session:
            insert_documents(session, [make_document("a", "Fed Holds Rates Steady")])
        run_clustering(session_factory, now=now)
        with session_factory() as session:
            insert_documents(session, [make_document("b", "Fed Holds Rates Steady Again", minutes_ago=1)])
        result, _ = run_clustering(session_factory, now=now)

        assert result.stories_created == 1
        with session_factory() as session:
            assert [members for _, members in list_stories_with_members(session)] == [["a", "b"]]

    def test_empty_window_leaves_stories_untouched(self, session_factory, make_document, now) -> None:
        with session_factory() as session:
            insert_documents(session, [make_document("a", "Fed Holds Rates Steady")])
            replace_stories(
                session,
                [{"id": "s1", "title": "T", "topic": "Politics", "region": "US",
                  "representative_id": "a", "member_ids": ["a"]}],
                now=now,
            )

        result, stories = run_clustering(session_factory, window_hours=1, now=now + timedelta(hours=5))

        assert result.stories_created == 0
        assert stories == []
        with session_factory() as session:
            assert [story.id for story, _ in list_stories_with_members(session)] == ["s1"]

    def test_concurrent_run_rejected(self, session_factory, now) -> None:
        assert run_module._run_lock.acquire(blocking=False)
        try:
            with pytest.raises(ClusteringInProgressError):
                run_clustering(session_factory, now=now)
        finally:
            run_module._run_lock.release()

    def test_lock_released_after_run(self, session_factory, now) -> None:
        run_clustering(session_factory, now=now)
        assert not run_module._run_lock.locked()

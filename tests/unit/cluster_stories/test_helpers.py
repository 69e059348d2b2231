"""Tests for cluster_stories.helpers module."""

from cluster_stories.helpers import build_story_records
from cluster_stories.models import StoryRecord


class TestBuildStoryRecords:
    def test_adds_member_count(self) -> None:
        story = StoryRecord(
            id="abc",
            title="Senate passes bill",
            topic="Politics",
            region="US",
            representative_id="a",
            member_ids=["a", "b"],
        )
        assert build_story_records([story]) == [
            {
                "id": "abc",
                "title": "Senate passes bill",
                "topic": "Politics",
                "region": "US",
                "representative_id": "a",
                "member_ids": ["a", "b"],
                "member_count": 2,
            }
        ]

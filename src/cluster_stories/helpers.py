"""Helper functions for cluster_stories CLI."""

from __future__ import annotations

import argparse
from typing import Any

from common.serialization import serialize_dataclass
from cluster_stories.models import StoryRecord


def parse_cluster_stories_args() -> argparse.Namespace:
    """Parse CLI arguments for cluster_stories."""

    parser = argparse.ArgumentParser(description="Cluster recent documents into stories.")

    # Input options
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")
    parser.add_argument(
        "--window-hours",
        type=int,
        default=None,
        help="Cluster documents published within this many hours (default: from config)",
    )
    parser.add_argument(
        "--pool-size",
        type=int,
        default=None,
        help="Maximum documents compared per topic/region group (default: from config)",
    )

    # Output options
    parser.add_argument("--load-s3", action="store_true", help="Upload story records to S3")
    parser.add_argument("--load-local", action="store_true", help="Save story records to local file")

    return parser.parse_args()


def build_story_records(stories: list[StoryRecord]) -> list[dict[str, Any]]:
    """Serialize stories for JSONL output."""
    records = []
    for story in stories:
        record = serialize_dataclass(story)
        record["member_count"] = len(story.member_ids)
        records.append(record)
    return records

"""Helper functions for synthesize_stories CLI."""

from __future__ import annotations

import argparse
from datetime import datetime
from typing import Any

from common.serialization import serialize_dataclass
from score_stories.models import StorySignals
from synthesize_stories.models import SynthesisResult


def parse_synthesize_stories_args() -> argparse.Namespace:
    """Parse CLI arguments for synthesize_stories."""

    parser = argparse.ArgumentParser(description="Score and synthesize stored stories.")

    # Input options
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")
    parser.add_argument("--story-id", default=None, help="Only synthesize this story")
    parser.add_argument(
        "--analysis",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Use external analysis when OPENAI_API_KEY is set (default: True)",
    )

    # Output options
    parser.add_argument("--load-s3", action="store_true", help="Upload results to S3")
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")

    return parser.parse_args()


def build_synthesis_record(
    story_id: str,
    title: str,
    signals: StorySignals,
    synthesis: SynthesisResult,
    generated_at: datetime,
) -> dict[str, Any]:
    """Build an output record for a synthesized story."""
    return {
        "story_id": story_id,
        "title": title,
        **serialize_dataclass(signals),
        **serialize_dataclass(synthesis),
        "generated_at": generated_at.isoformat(),
    }

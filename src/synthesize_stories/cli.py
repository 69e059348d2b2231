"""CLI for scoring and synthesizing stored stories."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dotenv import load_dotenv

from common.aws import upload_records_to_s3
from common.cli_helpers import save_jsonl_local, setup_logging
from common.config import load_config, set_config
from score_stories.signals import compute_story_signals
from story_db.connection import get_session, init_db
from story_db.documents import fetch_documents_by_ids
from story_db.stories import get_story, list_stories_with_members
from synthesize_stories.analysis import get_analysis_generator
from synthesize_stories.helpers import build_synthesis_record, parse_synthesize_stories_args
from synthesize_stories.synthesize import synthesize_stories

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_synthesize_stories_args()

    load_dotenv()
    config = load_config(args.config)
    set_config(config)
    init_db()

    with get_session() as session:
        if args.story_id:
            found = get_story(session, args.story_id)
            stories = [found] if found else []
        else:
            stories = list_stories_with_members(session)
        members = {story.id: fetch_documents_by_ids(session, ids) for story, ids in stories}

    if not stories:
        logger.warning("No stories found")
        return

    analysis = get_analysis_generator(config.synthesis) if args.analysis else None
    results = synthesize_stories(
        members,
        analysis=analysis,
        max_workers=config.synthesis.max_workers,
        max_input_chars=config.synthesis.max_input_chars,
        max_tokens=config.synthesis.max_tokens,
    )

    now = datetime.now(timezone.utc)
    records = [
        build_synthesis_record(
            story.id,
            story.title,
            compute_story_signals(members[story.id]),
            results[story.id],
            now,
        )
        for story, _ in stories
    ]
    logger.info("Built %d story synthesis records", len(records))

    if args.load_s3:
        upload_records_to_s3(records, "story_synthesis")

    if args.load_local:
        filepath = save_jsonl_local(records, "story_synthesis", now)
        logger.info("Saved %d records to %s", len(records), filepath)


if __name__ == "__main__":
    main()

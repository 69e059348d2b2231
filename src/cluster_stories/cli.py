"""CLI for clustering documents into stories."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dotenv import load_dotenv

from common.aws import upload_records_to_s3
from common.cli_helpers import save_jsonl_local, setup_logging
from common.config import load_config, set_config
from cluster_stories.helpers import build_story_records, parse_cluster_stories_args
from cluster_stories.run import run_clustering
from story_db.connection import init_db

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_cluster_stories_args()

    load_dotenv()
    config = load_config(args.config)
    set_config(config)
    init_db()

    window_hours = args.window_hours or config.clustering.window_hours
    pool_size = args.pool_size or config.clustering.pool_size
    now = datetime.now(timezone.utc)

    result, stories = run_clustering(window_hours=window_hours, pool_size=pool_size, now=now)
    logger.info(
        "Created %d stories, assigned %d documents",
        result.stories_created,
        result.documents_assigned,
    )
    if not stories:
        return

    records = build_story_records(stories)

    if args.load_s3:
        upload_records_to_s3(records, "stories")

    if args.load_local:
        filepath = save_jsonl_local(records, "stories", now)
        logger.info("Saved %d stories to %s", len(records), filepath)


if __name__ == "__main__":
    main()

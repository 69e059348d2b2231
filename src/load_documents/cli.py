"""CLI for loading documents from a JSONL file into the story database."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from common.cli_helpers import read_jsonl, setup_logging
from common.config import get_config, load_config, set_config
from load_documents.clean import build_documents
from story_db.connection import get_session, init_db
from story_db.documents import insert_documents

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Load documents into the story database.")
    parser.add_argument("--path", type=Path, required=True, help="JSONL file of raw documents")
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")
    parser.add_argument("--topic", default=None, help="Topic for records that have none")
    parser.add_argument("--region", default=None, help="Region for records that have none")
    parser.add_argument("--publisher", default=None, help="Publisher for records that have none")
    args = parser.parse_args()

    load_dotenv()
    set_config(load_config(args.config))

    defaults = {
        key: value
        for key, value in {"topic": args.topic, "region": args.region, "publisher": args.publisher}.items()
        if value
    }
    documents = build_documents(read_jsonl(args.path), defaults=defaults)
    if not documents:
        logger.warning("No usable documents in %s", args.path)
        return

    init_db()
    with get_session() as session:
        inserted = insert_documents(session, documents)
    logger.info("Loaded %d new documents into %s", inserted, get_config().database_url)


if __name__ == "__main__":
    main()

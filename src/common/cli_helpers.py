"""Common CLI helper utilities."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def read_jsonl(path: Path) -> list[dict[str, Any]]:
    """Read JSON objects from a JSONL file, skipping blank and malformed lines."""
    records = []
    with path.open(encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                logger.warning("Skipping malformed line %d in %s: %s", line_number, path, exc)
                continue
            if isinstance(record, dict):
                records.append(record)
            else:
                logger.warning("Skipping non-object line %d in %s", line_number, path)
    return records


def save_jsonl_local(
    records: list[dict[str, Any]],
    prefix: str,
    timestamp: datetime,
    output_dir: str | Path = "output",
) -> Path:
    """Write records to <output_dir>/<prefix>_<YYYY_MM_DD_HH_MM>.jsonl.

    Returns:
        Path to the created file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / f"{prefix}_{timestamp.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, default=str, ensure_ascii=False) + "\n")
    return filepath

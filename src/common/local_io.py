"""Local JSONL output for CLI result records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from common.serialization import jsonl_filename, to_jsonl

logger = logging.getLogger(__name__)


def save_jsonl_records_local(
    records: list[Any],
    prefix: str,
    output_dir: str = "output",
) -> Path:
    """Write records to ``<output_dir>/<prefix>_<timestamp>.jsonl``.

    Returns:
        Path to the created file.
    """
    filepath = Path(output_dir) / jsonl_filename(prefix, datetime.now(timezone.utc))
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(to_jsonl(records), encoding="utf-8")

    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath

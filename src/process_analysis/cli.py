"""CLI for source-name and score maintenance."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import get_config
from content_store.connection import create_tables, get_session_factory
from content_store.store import SqlContentStore
from process_analysis.helpers import parse_process_analysis_args
from process_analysis.maintenance import backfill_source_names, reprocess_missing_scores
from process_analysis.process_analysis import DataProcessor
from process_analysis.scores import SCORE_TITLES

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_process_analysis_args(argv)
    config = get_config()
    setup_logging(config.log_level)

    create_tables()
    store = SqlContentStore(get_session_factory())

    if args.command == "backfill-sources":
        backfill_source_names(store, batch_size=args.batch_size, process_all=args.all)

    elif args.command == "update-missing-fields":
        processor = DataProcessor(store, config.report.tag_url_template)
        reprocess_missing_scores(store, processor, args.field, limit=None if args.all else args.limit)

    elif args.command == "source-stats":
        stats = store.source_statistics()
        logger.info(
            "Total=%d with_source=%d without_source=%d scraped_without_source=%d",
            stats["total"],
            stats["with_source"],
            stats["without_source"],
            stats["scraped_without_source"],
        )
        for name, count in stats["top_sources"]:
            logger.info("  %s | %d", name, count)

    elif args.command == "assessment-status":
        for field, (present, total) in store.score_coverage().items():
            percentage = round(present / total * 100, 1) if total else 0
            logger.info("%s: present=%d (%s%%) missing=%d", SCORE_TITLES[field], present, percentage, total - present)


if __name__ == "__main__":
    main()

"""CLI for daily quota reporting and maintenance."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.aws import upload_jsonl_records_to_s3
from common.cli_helpers import setup_logging
from common.config import get_config
from common.local_io import save_jsonl_records_local
from content_store.connection import create_tables, get_session_factory
from daily_quota.helpers import build_quota_tracker, parse_daily_quota_args

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_daily_quota_args(argv)
    config = get_config()
    setup_logging(config.log_level)

    create_tables()
    tracker = build_quota_tracker(config, get_session_factory())

    if args.command == "counts":
        counts = tracker.get_all_counts(args.date)
        if not counts:
            logger.info("No articles processed on this day")
        for c in counts:
            logger.info(
                "  %s | %d/%d | remaining=%d%s",
                c.source_name,
                c.count,
                c.limit,
                c.remaining,
                " | AT LIMIT" if c.at_limit else "",
            )

    elif args.command == "stats":
        statistics = tracker.get_statistics(args.days)
        for day in statistics:
            logger.info(
                "%s | processed=%d | sources=%d | at_limit=%d",
                day.quota_date,
                day.total_processed,
                len(day.sources),
                day.sources_at_limit,
            )
        if args.load_s3:
            upload_jsonl_records_to_s3(statistics, "quota_statistics")
        if args.load_local:
            save_jsonl_records_local(statistics, "quota_statistics")

    elif args.command == "cleanup":
        deleted = tracker.reset_and_cleanup()
        logger.info("Deleted %d old quota records", deleted)

    elif args.command == "set-limit":
        tracker.set_limit(args.source, args.limit)


if __name__ == "__main__":
    main()

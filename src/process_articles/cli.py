"""CLI for running the article pipeline."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.aws import upload_jsonl_records_to_s3
from common.cli_helpers import setup_logging
from common.config import get_config
from common.errors import ConfigurationError, ValidationError
from common.local_io import save_jsonl_records_local
from content_store.connection import create_tables, get_session_factory
from process_articles.helpers import build_article_processor, parse_process_articles_args
from process_articles.process_articles import enqueue_article, process_pending_articles

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_process_articles_args(argv)
    config = get_config()
    setup_logging(config.log_level)

    create_tables()
    processor = build_article_processor(config, get_session_factory())
    store = processor.store

    try:
        if args.command == "run":
            results = process_pending_articles(store, processor, processor.quota_tracker, args.limit)
            if not results:
                logger.warning("No pending articles to process")
                return

            for result in results:
                logger.info(
                    "  %s | %s | source=%s | %s",
                    result.item_id,
                    result.title or "untitled",
                    result.source_name,
                    "skipped (quota)" if result.skipped else result.publish_state if result.success else "failed",
                )

            if args.load_s3:
                upload_jsonl_records_to_s3(results, "processed_articles")

            if args.load_local:
                save_jsonl_records_local(results, "processed_articles")
            return

        if args.command == "add":
            try:
                enqueue_article(store, args.url, title=args.title, source_name=args.source)
            except ValidationError as exc:
                logger.error("Not queued: %s", exc)
                sys.exit(1)
            return

        item = store.load(args.item_id)
        if item is None:
            logger.error("Item not found: id=%s", args.item_id)
            sys.exit(1)

        if args.command == "status":
            status = processor.get_processing_status(item)
            logger.info(
                "id=%s scraped=%s analyzed=%s structured=%s tagged=%s tags=%d state=%s analysis=%s",
                status.item_id,
                status.scraped,
                status.analyzed,
                status.structured,
                status.tagged,
                status.tag_count,
                status.publish_state.value,
                status.analysis_status.value,
            )
            return

        if args.command == "reprocess":
            ok = processor.reprocess_article(item)
        elif args.command == "scrape":
            ok = processor.scrape_article_only(item, item.source_url or "")
        else:
            ok = processor.analyze_article_only(item)

        if not ok:
            logger.error("Command %s failed for id=%s", args.command, item.id)
            sys.exit(1)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(2)


if __name__ == "__main__":
    main()

"""Helper functions for process_articles CLI."""

from __future__ import annotations

import argparse

from sqlalchemy.orm import Session, sessionmaker

from analyze_content.analyze_content import AnalysisEngine
from common.cli_helpers import positive_int
from common.config import PipelineConfig
from content_store.store import SqlContentStore
from daily_quota.helpers import build_quota_tracker
from extract_content.extract_content import ContentExtractor
from extract_content.rate_limiter import RateLimiter
from process_analysis.process_analysis import DataProcessor
from process_articles.process_articles import ArticleProcessor


def build_extractor(config: PipelineConfig, session_factory: sessionmaker[Session]) -> ContentExtractor:
    limiter = RateLimiter(
        session_factory,
        key=config.extraction.rate_limit_key,
        min_interval=config.extraction.min_interval_seconds,
        cooldown=config.extraction.rate_limit_cooldown_seconds,
    )
    return ContentExtractor(
        token=config.extraction.token,
        rate_limiter=limiter,
        api_url=config.extraction.api_url,
        timeout=config.extraction.timeout,
    )


def build_article_processor(config: PipelineConfig, session_factory: sessionmaker[Session]) -> ArticleProcessor:
    """Wire the pipeline components from config."""
    store = SqlContentStore(session_factory)
    analyzer = AnalysisEngine(
        model=config.analysis.model,
        api_key=config.analysis.api_key,
        timeout=config.analysis.timeout,
        max_tokens=config.analysis.max_tokens,
    )
    return ArticleProcessor(
        extractor=build_extractor(config, session_factory),
        analyzer=analyzer,
        data_processor=DataProcessor(store, config.report.tag_url_template),
        store=store,
        quota_tracker=build_quota_tracker(config, session_factory),
    )


def parse_process_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for process_articles."""

    parser = argparse.ArgumentParser(description="Extract, analyze and publish articles")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Process pending items")
    run.add_argument(
        "--limit",
        type=positive_int,
        default=None,
        help="Max items to process (default: all pending)",
    )
    run.add_argument("--load-s3", action="store_true", help="Upload results to S3")
    run.add_argument("--load-local", action="store_true", help="Save results to local file")

    add = subparsers.add_parser("add", help="Queue a URL for processing")
    add.add_argument("url", help="Article URL")
    add.add_argument("--title", default="", help="Headline, if known")
    add.add_argument("--source", default=None, help="News source name, if known")

    reprocess = subparsers.add_parser("reprocess", help="Rebuild analysis for one item from stored data")
    reprocess.add_argument("item_id", help="Content item id")

    scrape = subparsers.add_parser("scrape", help="Run extraction only for one item")
    scrape.add_argument("item_id", help="Content item id")

    analyze = subparsers.add_parser("analyze", help="Run analysis only for one item")
    analyze.add_argument("item_id", help="Content item id")

    status = subparsers.add_parser("status", help="Show which stages have produced data for one item")
    status.add_argument("item_id", help="Content item id")

    return parser.parse_args(argv)

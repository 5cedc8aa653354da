"""Helper functions for daily_quota CLI."""

from __future__ import annotations

import argparse

from sqlalchemy.orm import Session, sessionmaker

from common.cli_helpers import non_negative_int, parse_date, positive_int
from common.config import PipelineConfig
from daily_quota.daily_quota import QuotaTracker


def build_quota_tracker(config: PipelineConfig, session_factory: sessionmaker[Session]) -> QuotaTracker:
    return QuotaTracker(
        session_factory,
        enabled=config.quota.enabled,
        default_limit=config.quota.default_limit,
        retention_days=config.quota.retention_days,
    )


def parse_daily_quota_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for daily_quota."""

    parser = argparse.ArgumentParser(description="Inspect and manage per-source daily quotas")
    subparsers = parser.add_subparsers(dest="command", required=True)

    counts = subparsers.add_parser("counts", help="Show per-source counts for one day")
    counts.add_argument(
        "--date",
        type=lambda v: parse_date(v, "date"),
        default=None,
        help="Day to report (UTC, YYYY-MM-DD, default: today)",
    )

    stats = subparsers.add_parser("stats", help="Aggregate statistics over recent days")
    stats.add_argument("--days", type=positive_int, default=7, help="Days to include (default: 7)")
    stats.add_argument("--load-s3", action="store_true", help="Upload statistics to S3")
    stats.add_argument("--load-local", action="store_true", help="Save statistics to local file")

    subparsers.add_parser("cleanup", help="Delete records older than the retention window")

    set_limit = subparsers.add_parser("set-limit", help="Set a custom daily limit for a source")
    set_limit.add_argument("source", help="News source name")
    set_limit.add_argument("limit", type=non_negative_int, help="Articles per day (0 blocks the source)")

    return parser.parse_args(argv)

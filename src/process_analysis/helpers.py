"""Helper functions for process_analysis CLI."""

from __future__ import annotations

import argparse

from analyze_content.models import SCORE_FIELDS
from common.cli_helpers import positive_int

# CLI short names for the score fields
FIELD_ALIASES = {
    "credibility": "credibility_score",
    "bias": "bias_rating",
    "sentiment": "sentiment_score",
    "authoritarianism": "authoritarianism_score",
}


def parse_score_field(value: str) -> str:
    field = FIELD_ALIASES.get(value, value)
    if field not in SCORE_FIELDS:
        raise argparse.ArgumentTypeError(f"field must be one of: {', '.join(FIELD_ALIASES)}")
    return field


def parse_process_analysis_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for process_analysis maintenance commands."""

    parser = argparse.ArgumentParser(description="Maintenance over stored analysis data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    backfill = subparsers.add_parser("backfill-sources", help="Fill missing source names from stored data")
    backfill.add_argument("--batch-size", type=positive_int, default=50, help="Items per batch (default: 50)")
    backfill.add_argument("--all", action="store_true", help="Keep going until no items remain")

    missing = subparsers.add_parser("update-missing-fields", help="Re-parse stored AI responses for a missing score")
    missing.add_argument(
        "--field",
        type=parse_score_field,
        required=True,
        help=f"Score to fill ({', '.join(FIELD_ALIASES)})",
    )
    missing.add_argument("--limit", type=positive_int, default=50, help="Max items (default: 50)")
    missing.add_argument("--all", action="store_true", help="Process every item missing the score")

    subparsers.add_parser("source-stats", help="Show source name coverage")
    subparsers.add_parser("assessment-status", help="Show score coverage over published items")

    return parser.parse_args(argv)

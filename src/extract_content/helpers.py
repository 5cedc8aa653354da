"""Helper functions for extract_content CLI."""

from __future__ import annotations

import argparse


def parse_extract_content_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for extract_content."""

    parser = argparse.ArgumentParser(description="Test full-text extraction for a single URL")
    parser.add_argument("url", help="Article URL to extract")
    parser.add_argument(
        "--skip-rate-limit",
        action="store_true",
        help="Do not reserve a slot on the shared rate-limit clock",
    )
    parser.add_argument(
        "--preview-chars",
        type=int,
        default=300,
        help="Characters of extracted text to log (default: 300)",
    )

    return parser.parse_args(argv)

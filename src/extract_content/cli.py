"""CLI for testing content extraction on one URL."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import get_config
from common.errors import ConfigurationError, PipelineError, ValidationError
from content_store.connection import create_tables, get_session_factory
from extract_content.extract_content import ContentExtractor
from extract_content.helpers import parse_extract_content_args
from extract_content.rate_limiter import RateLimiter

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_extract_content_args(argv)
    config = get_config()
    setup_logging(config.log_level)

    limiter = None
    if not args.skip_rate_limit:
        create_tables()
        limiter = RateLimiter(
            get_session_factory(),
            key=config.extraction.rate_limit_key,
            min_interval=config.extraction.min_interval_seconds,
            cooldown=config.extraction.rate_limit_cooldown_seconds,
        )

    extractor = ContentExtractor(
        token=config.extraction.token,
        rate_limiter=limiter,
        api_url=config.extraction.api_url,
        timeout=config.extraction.timeout,
    )

    try:
        extraction = extractor.extract_content(args.url)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(2)
    except ValidationError as exc:
        logger.warning("URL rejected: %s", exc)
        sys.exit(1)
    except PipelineError as exc:
        logger.error("Extraction failed: %s", exc)
        sys.exit(1)

    logger.info("Title: %s", extraction.title)
    logger.info("Site name: %s", extraction.site_name)
    logger.info("Author: %s", extraction.author)
    logger.info("Published: %s", extraction.published_at)
    logger.info("Words: %s", extraction.word_count)
    logger.info("Text preview: %s", extraction.text[: args.preview_chars])


if __name__ == "__main__":
    main()

"""URL filtering ahead of extraction calls."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

BLOCKED_DOMAINS = (
    "comparecards.com",
    "fool.com",
    "lendingtree.com",
)

# Pattern -> reason, matched case-insensitively against the full URL
SKIP_PATTERNS = {
    r"/ads?/": "advertisements",
    r"/advertisement": "advertisement pages",
    r"/sponsored": "sponsored content",
    r"/podcast": "podcast pages",
    r"/video": "video content",
    r"/gallery": "image galleries",
    r"financial.*markets": "financial markets",
    r"stock.*price": "stock prices",
    r"\.pdf$": "PDF files",
    r"/audio/": "audio content",
    r"/interactive/": "interactive content",
    r"/live-news/": "live news feeds",
    r"/live-tv/": "live TV",
    r"/newsletters?/": "newsletters",
    r"/weather/": "weather pages",
    r"/specials/": "special sections",
    r"/coupons?/": "coupons",
    r"/profiles?/": "profile pages",
}

_COMPILED_PATTERNS = [(re.compile(pattern, re.IGNORECASE), reason) for pattern, reason in SKIP_PATTERNS.items()]


def rejection_reason(url: str) -> str | None:
    """Return why ``url`` should not be extracted, or None if it looks like an article."""
    if not url or not isinstance(url, str):
        return "empty url"

    parts = urlsplit(url.strip())
    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        return "not an http(s) url"

    host = parts.hostname.lower()
    for domain in BLOCKED_DOMAINS:
        if host == domain or host.endswith("." + domain):
            return f"blocked domain {domain}"

    for pattern, reason in _COMPILED_PATTERNS:
        if pattern.search(url):
            return reason

    return None


def is_valid_article_url(url: str) -> bool:
    """Denylist check: anything not rejected is accepted."""
    reason = rejection_reason(url)
    if reason is not None:
        logger.info("Skipping url=%s reason=%s", url, reason)
        return False
    return True

"""News source name cleanup and normalization."""

from __future__ import annotations

import json
import logging
import re
from urllib.parse import urlsplit

from process_analysis.models import SCRAPED_DATA_UNAVAILABLE, SOURCE_UNAVAILABLE, ContentItem

logger = logging.getLogger(__name__)

# Feed decorations stripped from raw source names
_DECORATION_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^RSS:\s*",
        r"^Feed:\s*",
        r"\s*-\s*RSS\b.*$",
        r"\s+RSS\b.*$",
        r"\s*-\s*Politics\b.*$",
        r"\s*Breaking News.*$",
        r"\s*Latest News.*$",
        r"\s*News Feed.*$",
        r"\s*\|.*$",
        r"\s*::.*$",
        r"\s*\(.*\).*$",
    )
]
_TRAILING_PUNCTUATION = re.compile(r"[\s\-|:]+$")

# Sub-brand merges, evaluated in order, first match wins
CANONICAL_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(pattern, re.IGNORECASE), canonical)
    for pattern, canonical in (
        (r"^CNN Politics$", "CNN"),
        (r"^CNN\.com.*$", "CNN"),
        (r"^CNN International.*$", "CNN"),
        (r"^Fox News Politics.*$", "Fox News"),
        (r"^FOX News.*$", "Fox News"),
        (r"^The New York Times.*$", "New York Times"),
        (r"^The Washington Post.*$", "Washington Post"),
        (r"^The Wall Street Journal.*$", "Wall Street Journal"),
        (r"^The Guardian.*$", "The Guardian"),
        (r"^BBC News.*$", "BBC News"),
        (r"^Reuters.*$", "Reuters"),
        (r"^Associated Press.*$", "Associated Press"),
        (r"^AP News.*$", "Associated Press"),
        (r"^NBC News.*$", "NBC News"),
        (r"^ABC News.*$", "ABC News"),
        (r"^CBS News.*$", "CBS News"),
    )
]

SOURCE_MAP = {
    "CNN": "CNN",
    "CNN.com": "CNN",
    "Fox News": "Fox News",
    "Reuters.com": "Reuters",
    "AP News": "Associated Press",
    "NPR.org": "NPR",
    "BBC News": "BBC News",
    "WSJ.com": "Wall Street Journal",
    "The New York Times": "New York Times",
    "The Washington Post": "Washington Post",
    "POLITICO": "Politico",
    "The Hill": "The Hill",
}

DOMAIN_MAP = {
    "cnn.com": "CNN",
    "foxnews.com": "Fox News",
    "reuters.com": "Reuters",
    "ap.org": "Associated Press",
    "apnews.com": "Associated Press",
    "npr.org": "NPR",
    "bbc.com": "BBC News",
    "bbc.co.uk": "BBC News",
    "wsj.com": "Wall Street Journal",
    "nytimes.com": "New York Times",
    "washingtonpost.com": "Washington Post",
    "politico.com": "Politico",
    "thehill.com": "The Hill",
}


def clean_source_name(source: str | None) -> str:
    """Strip feed decorations ("- RSS", "| Section", "(US)") until nothing changes."""
    if not source:
        return ""

    cleaned = source.strip()
    while True:
        previous = cleaned
        for pattern in _DECORATION_PATTERNS:
            cleaned = pattern.sub("", cleaned).strip()
        cleaned = _TRAILING_PUNCTUATION.sub("", cleaned).strip()
        if cleaned == previous:
            return cleaned


def normalize_source_name(source: str | None) -> str:
    """Map a raw source name to its canonical form.

    Cleans decorations, then applies the canonical merge rules, then the
    exact-name map. Unknown names are returned cleaned but otherwise
    unchanged. normalize(normalize(x)) == normalize(x).
    """
    cleaned = clean_source_name(source)
    if not cleaned:
        return ""

    for pattern, canonical in CANONICAL_RULES:
        if pattern.match(cleaned):
            return canonical

    return SOURCE_MAP.get(cleaned, cleaned)


def extract_source_from_url(url: str | None) -> str | None:
    """Derive a source name from a URL host. None when the URL has no host."""
    if not url:
        return None
    host = (urlsplit(url.strip()).hostname or "").lower()
    if not host:
        return None
    host = re.sub(r"^www\.", "", host)

    for domain, name in DOMAIN_MAP.items():
        if host == domain or host.endswith("." + domain):
            return name

    label = host.split(".")[0]
    return re.sub(r"[-_]+", " ", label).title()


def extract_source_from_scraped_data(raw_scraped_data: str | None) -> str | None:
    """Read siteName from a stored extraction response."""
    if not raw_scraped_data or not raw_scraped_data.strip():
        return None
    if _is_unavailable_sentinel(raw_scraped_data):
        return SOURCE_UNAVAILABLE

    try:
        data = json.loads(raw_scraped_data)
    except ValueError:
        logger.warning("Stored scraped data is not valid JSON")
        return None

    objects = data.get("objects") if isinstance(data, dict) else None
    for obj in objects or []:
        if isinstance(obj, dict) and isinstance(obj.get("siteName"), str) and obj["siteName"].strip():
            return normalize_source_name(obj["siteName"])
    return None


def resolve_source_name(item: ContentItem) -> str | None:
    """Best available source name: site name, stored response, then URL.

    Items whose scraped data is the unavailable marker always resolve to
    SOURCE_UNAVAILABLE."""
    if item.raw_scraped_data and _is_unavailable_sentinel(item.raw_scraped_data):
        return SOURCE_UNAVAILABLE

    if item.site_name and item.site_name.strip():
        return normalize_source_name(item.site_name)

    from_data = extract_source_from_scraped_data(item.raw_scraped_data)
    if from_data:
        return from_data

    return extract_source_from_url(item.source_url)


def _is_unavailable_sentinel(value: str) -> bool:
    return value.strip() in (SCRAPED_DATA_UNAVAILABLE, SCRAPED_DATA_UNAVAILABLE.rstrip("."))

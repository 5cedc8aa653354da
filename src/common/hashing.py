"""Article id derivation for queued URLs."""

import hashlib
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# Query parameters that only track the referrer, never select content
TRACKING_PARAM_PREFIXES = ("utm_", "fbclid", "gclid", "mc_", "cmpid", "smid")

ARTICLE_ID_LENGTH = 16


def canonical_url(url: str) -> str:
    """Collapse variants of the same article URL onto one form.

    Lowercases the scheme and host, drops a leading ``www.``, the fragment,
    tracking parameters and any trailing slash on the path.
    """
    parts = urlsplit(url.strip())
    host = parts.netloc.lower()
    if host.startswith("www."):
        host = host[4:]
    query = urlencode(
        [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if not key.lower().startswith(TRACKING_PARAM_PREFIXES)
        ]
    )
    path = parts.path.rstrip("/") or "/"
    return urlunsplit((parts.scheme.lower(), host, path, query, ""))


def article_id(url: str) -> str:
    """Stable id for an article URL; variants of one URL share an id."""
    digest = hashlib.sha256(canonical_url(url).encode()).hexdigest()
    return digest[:ARTICLE_ID_LENGTH]

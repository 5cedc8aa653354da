"""Data models for extract_content pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from common.datetime import parse_publish_date

# Response keys tried in order when resolving the publication date
DATE_FIELDS = ("estimatedDate", "date", "publishedAt", "created")


@dataclass
class RawExtraction:
    """First article object returned by the extraction API, plus the full response."""
    url: str
    text: str
    title: str | None = None
    site_name: str | None = None
    author: str | None = None
    breadcrumb: str | None = None
    word_count: int | None = None
    language: str | None = None
    images: list[str] = field(default_factory=list)
    published_at: datetime | None = None
    response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, url: str, response: dict[str, Any]) -> RawExtraction:
        article = response["objects"][0]
        return cls(
            url=url,
            text=_text(article.get("text")) or "",
            title=_text(article.get("title")),
            site_name=_text(article.get("siteName")),
            author=_text(article.get("author")),
            breadcrumb=_join_breadcrumb(article.get("breadcrumb")),
            word_count=_to_int(article.get("wordCount")),
            language=_language(article),
            images=_image_urls(article.get("images")),
            published_at=resolve_published_at(article),
            response=response,
        )


def resolve_published_at(article: dict[str, Any]) -> datetime | None:
    """First date field that parses wins."""
    for key in DATE_FIELDS:
        parsed = parse_publish_date(article.get(key))
        if parsed is not None:
            return parsed
    return None


def _join_breadcrumb(value: Any) -> str | None:
    if isinstance(value, str):
        return value or None
    if not isinstance(value, list):
        return None
    names = []
    for crumb in value:
        name = crumb.get("name") if isinstance(crumb, dict) else crumb
        if name:
            names.append(str(name))
    return " > ".join(names) or None


def _text(value: Any) -> str | None:
    # Non-string values in the response are treated as missing
    return value if isinstance(value, str) and value else None


def _image_urls(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [img["url"] for img in value if isinstance(img, dict) and isinstance(img.get("url"), str) and img["url"]]


def _to_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _language(article: dict[str, Any]) -> str | None:
    for key in ("humanLanguage", "naturalLanguage", "language"):
        value = article.get(key)
        if isinstance(value, str) and value:
            return value
    return None

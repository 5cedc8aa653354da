"""Full-text extraction through the Diffbot article API."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from common.errors import (
    ConfigurationError,
    InvalidURLError,
    NoContentError,
    RateLimitError,
    UpstreamError,
)
from extract_content.models import RawExtraction
from extract_content.rate_limiter import RateLimiter
from extract_content.url_filter import is_valid_article_url, rejection_reason
from process_analysis.models import SOURCE_UNAVAILABLE, ContentItem
from process_analysis.sources import clean_source_name, extract_source_from_url

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.diffbot.com/v3/article"


class ContentExtractor:
    def __init__(
        self,
        token: str | None,
        rate_limiter: RateLimiter | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 30,
        session: requests.Session | None = None,
    ):
        self.token = token
        self.rate_limiter = rate_limiter
        self.api_url = api_url
        self.timeout = timeout
        self._http = session or requests.Session()

    def extract_content(self, url: str) -> RawExtraction:
        """Extract the article at ``url``.

        Raises:
            ConfigurationError: No API token configured.
            InvalidURLError: URL is blocked or not article-like; no call is made.
            RateLimitError: Upstream answered 429.
            UpstreamError: Transport failure, non-2xx status or undecodable body.
            NoContentError: Upstream returned no article objects.
        """
        if not self.token:
            raise ConfigurationError("Diffbot API token is not configured", stage="extract")

        if not is_valid_article_url(url):
            raise InvalidURLError(url, rejection_reason(url) or "url rejected by filter")

        if self.rate_limiter is not None:
            self.rate_limiter.acquire()

        logger.info("Making Diffbot API call to url=%s", url)
        try:
            response = self._http.get(
                self.api_url,
                params={"token": self.token, "url": url, "naturalLanguage": "summary"},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamError(f"Diffbot request failed: {exc}", stage="extract") from exc

        if response.status_code == 429:
            retry_after = self.rate_limiter.penalize() if self.rate_limiter is not None else 0.0
            raise RateLimitError("Diffbot rate limit exceeded", retry_after=retry_after, stage="extract")

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                f"Diffbot returned HTTP {response.status_code}",
                status_code=response.status_code,
                response_data=response.text[:500],
                stage="extract",
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Diffbot returned invalid JSON",
                status_code=response.status_code,
                response_data=response.text[:500],
                stage="extract",
            ) from exc

        objects = data.get("objects") if isinstance(data, dict) else None
        if not isinstance(objects, list) or not objects or not isinstance(objects[0], dict):
            logger.warning("Diffbot returned no article data for url=%s", url)
            raise NoContentError(
                "Diffbot returned no article objects",
                status_code=response.status_code,
                response_data=data,
                stage="extract",
            )

        extraction = RawExtraction.from_response(url, data)
        logger.info("Extracted %d chars from url=%s", len(extraction.text), url)
        return extraction


def store_scraped_data(item: ContentItem, extraction: RawExtraction) -> None:
    """Keep the full extraction response on the item as pretty-printed JSON."""
    item.raw_scraped_data = json.dumps(extraction.response, indent=2, ensure_ascii=False)


def get_stored_scraped_data(item: ContentItem) -> dict[str, Any] | None:
    """Decode the stored extraction response, or None if absent or not JSON."""
    if not item.raw_scraped_data:
        return None
    try:
        data = json.loads(item.raw_scraped_data)
    except ValueError:
        logger.warning("Invalid JSON in stored scraped data for id=%s", item.id)
        return None
    return data if isinstance(data, dict) else None


def update_basic_fields(item: ContentItem, extraction: RawExtraction) -> bool:
    """Copy extracted text and metadata onto the item.

    Returns:
        True if the body text or title changed.
    """
    updated = False

    if extraction.text:
        item.body_text = extraction.text
        updated = True

    if not item.title and extraction.title:
        item.title = extraction.title
        updated = True

    if extraction.author:
        item.author = extraction.author
    if extraction.site_name:
        item.site_name = extraction.site_name
    if extraction.breadcrumb:
        item.breadcrumb = extraction.breadcrumb
    if extraction.word_count:
        item.word_count = extraction.word_count
    if extraction.language:
        item.language = extraction.language
    if not item.image_url and extraction.images:
        item.image_url = extraction.images[0]
    if item.published_at is None and extraction.published_at is not None:
        item.published_at = extraction.published_at

    _update_source_name(item, extraction)
    return updated


def _update_source_name(item: ContentItem, extraction: RawExtraction) -> None:
    if extraction.site_name:
        new_source = clean_source_name(extraction.site_name)
    else:
        new_source = extract_source_from_url(item.source_url or extraction.url)

    if new_source:
        if new_source != item.source_name:
            logger.info("Updated news source id=%s old=%s new=%s", item.id, item.source_name or "EMPTY", new_source)
            item.source_name = new_source
    elif not item.source_name:
        logger.warning("Could not extract news source for id=%s, set to unavailable", item.id)
        item.source_name = SOURCE_UNAVAILABLE

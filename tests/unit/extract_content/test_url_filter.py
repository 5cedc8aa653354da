"""Tests for extract_content.url_filter module."""

import pytest

from extract_content.url_filter import is_valid_article_url, rejection_reason


class TestRejectionReason:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.reuters.com/world/europe/some-story-2024-01-01/",
            "https://apnews.com/article/abc123",
            "http://example.org/news/politics/story.html",
        ],
    )
    def test_article_urls_pass(self, url) -> None:
        assert rejection_reason(url) is None
        assert is_valid_article_url(url) is True

    @pytest.mark.parametrize(
        "url,reason",
        [
            ("https://cnn.com/videos/world/clip", "video content"),
            ("https://example.com/podcasts/episode-1", "podcast pages"),
            ("https://example.com/report.PDF", "PDF files"),
            ("https://example.com/Financial-Markets/today", "financial markets"),
            ("https://example.com/newsletters/signup", "newsletters"),
            ("https://example.com/ad/banner", "advertisements"),
            ("https://cnn.com/live-news/ukraine", "live news feeds"),
        ],
    )
    def test_skip_patterns(self, url, reason) -> None:
        assert rejection_reason(url) == reason
        assert is_valid_article_url(url) is False

    def test_blocked_domain_and_subdomain(self) -> None:
        assert rejection_reason("https://www.fool.com/investing/story") == "blocked domain fool.com"
        assert rejection_reason("https://fool.com/a") == "blocked domain fool.com"

    def test_blocked_domain_needs_host_match(self) -> None:
        assert rejection_reason("https://notfool.com/investing/story") is None

    @pytest.mark.parametrize("url", ["", None, "ftp://example.com/file", "not a url", "https:///path"])
    def test_malformed_urls(self, url) -> None:
        assert rejection_reason(url) is not None
        assert is_valid_article_url(url) is False

"""Tests for common.hashing module."""

import pytest

from common.hashing import article_id, canonical_url


class TestCanonicalUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.cnn.com/2024/politics/story/",
            "HTTPS://CNN.com/2024/politics/story",
            "  https://cnn.com/2024/politics/story#comments ",
            "https://cnn.com/2024/politics/story?utm_source=rss&utm_medium=feed",
        ],
    )
    def test_variants_collapse(self, url) -> None:
        assert canonical_url(url) == "https://cnn.com/2024/politics/story"

    def test_keeps_content_parameters(self) -> None:
        assert canonical_url("https://example.com/read?id=42&fbclid=abc") == "https://example.com/read?id=42"

    def test_path_case_is_kept(self) -> None:
        assert canonical_url("https://example.com/Story") == "https://example.com/Story"

    def test_bare_host(self) -> None:
        assert canonical_url("https://example.com") == "https://example.com/"


class TestArticleId:
    def test_returns_16_char_hex_string(self) -> None:
        result = article_id("https://cnn.com/a")
        assert len(result) == 16
        int(result, 16)

    def test_url_variants_share_id(self) -> None:
        assert article_id("https://www.cnn.com/a/?utm_campaign=x") == article_id("https://cnn.com/a")

    def test_different_articles_differ(self) -> None:
        assert article_id("https://example.com/a") != article_id("https://example.com/b")

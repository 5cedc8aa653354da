"""Tests for the CLI argument parsers."""

import argparse
from datetime import date

import pytest

from common.cli_helpers import non_negative_int, parse_date, positive_int
from daily_quota.helpers import parse_daily_quota_args
from extract_content.helpers import parse_extract_content_args
from process_analysis.helpers import parse_process_analysis_args, parse_score_field
from process_articles.helpers import parse_process_articles_args


class TestCommonParsers:
    def test_parse_date(self) -> None:
        assert parse_date("2024-03-10") == date(2024, 3, 10)
        with pytest.raises(argparse.ArgumentTypeError):
            parse_date("10/03/2024")

    def test_positive_int(self) -> None:
        assert positive_int("5") == 5
        for value in ("0", "-1", "five"):
            with pytest.raises(argparse.ArgumentTypeError):
                positive_int(value)

    def test_non_negative_int(self) -> None:
        assert non_negative_int("0") == 0
        assert non_negative_int("7") == 7
        for value in ("-1", "1.5"):
            with pytest.raises(argparse.ArgumentTypeError):
                non_negative_int(value)


class TestProcessArticlesArgs:
    def test_run_defaults(self) -> None:
        args = parse_process_articles_args(["run"])
        assert (args.command, args.limit, args.load_s3, args.load_local) == ("run", None, False, False)

    def test_add(self) -> None:
        args = parse_process_articles_args(["add", "https://example.com/a", "--source", "CNN"])
        assert (args.url, args.title, args.source) == ("https://example.com/a", "", "CNN")

    def test_item_commands(self) -> None:
        for command in ("reprocess", "scrape", "analyze", "status"):
            args = parse_process_articles_args([command, "abc123"])
            assert (args.command, args.item_id) == (command, "abc123")

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_process_articles_args([])


class TestProcessAnalysisArgs:
    def test_field_aliases(self) -> None:
        assert parse_score_field("bias") == "bias_rating"
        assert parse_score_field("credibility_score") == "credibility_score"
        with pytest.raises(argparse.ArgumentTypeError):
            parse_score_field("title")

    def test_update_missing_fields(self) -> None:
        args = parse_process_analysis_args(["update-missing-fields", "--field", "sentiment", "--all"])
        assert (args.field, args.all, args.limit) == ("sentiment_score", True, 50)

    def test_backfill(self) -> None:
        args = parse_process_analysis_args(["backfill-sources", "--batch-size", "10"])
        assert (args.batch_size, args.all) == (10, False)


class TestDailyQuotaArgs:
    def test_counts_date(self) -> None:
        assert parse_daily_quota_args(["counts", "--date", "2024-03-10"]).date == date(2024, 3, 10)

    def test_set_limit(self) -> None:
        args = parse_daily_quota_args(["set-limit", "CNN", "8"])
        assert (args.source, args.limit) == ("CNN", 8)

    def test_set_limit_zero_blocks(self) -> None:
        assert parse_daily_quota_args(["set-limit", "CNN", "0"]).limit == 0

    def test_set_limit_rejects_negative(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_daily_quota_args(["set-limit", "CNN", "-1"])
        assert exc_info.value.code == 2


class TestExtractContentArgs:
    def test_defaults(self) -> None:
        args = parse_extract_content_args(["https://example.com/a"])
        assert (args.url, args.skip_rate_limit, args.preview_chars) == ("https://example.com/a", False, 300)

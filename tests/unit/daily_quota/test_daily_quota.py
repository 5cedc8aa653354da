"""Tests for daily_quota.daily_quota module."""

import threading
from datetime import date, timedelta

import pytest

from daily_quota.daily_quota import QuotaTracker

TODAY = date(2024, 3, 10)


@pytest.fixture
def tracker(session_factory):
    return QuotaTracker(session_factory, default_limit=3, retention_days=7, today=lambda: TODAY)


class TestIncrementCount:
    def test_creates_then_increments(self, tracker) -> None:
        assert tracker.get_count("CNN") == 0
        assert tracker.increment_count("CNN") == 1
        assert tracker.increment_count("CNN") == 2
        assert tracker.get_count("CNN") == 2

    def test_days_and_sources_are_separate(self, tracker) -> None:
        tracker.increment_count("CNN")
        tracker.increment_count("CNN", on=TODAY - timedelta(days=1))
        tracker.increment_count("Reuters")

        assert tracker.get_count("CNN") == 1
        assert tracker.get_count("CNN", TODAY - timedelta(days=1)) == 1
        assert tracker.get_count("Reuters") == 1

    def test_concurrent_increments_are_not_lost(self, tracker) -> None:
        barrier = threading.Barrier(2)
        results = []
        errors = []

        def worker() -> None:
            try:
                barrier.wait()
                results.append(tracker.increment_count("Example News"))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert sorted(results) == [1, 2]
        assert tracker.get_count("Example News") == 2


class TestIsAllowed:
    def test_blocks_at_limit(self, tracker) -> None:
        for _ in range(2):
            tracker.increment_count("Example News")
        assert tracker.is_allowed("Example News") is True

        tracker.increment_count("Example News")
        assert tracker.is_allowed("Example News") is False
        assert tracker.get_count("Example News") == 3

    def test_disabled_always_allows(self, session_factory) -> None:
        tracker = QuotaTracker(session_factory, enabled=False, default_limit=0, today=lambda: TODAY)
        assert tracker.is_allowed("Anything") is True

    def test_new_day_resets(self, tracker) -> None:
        for _ in range(3):
            tracker.increment_count("CNN", on=TODAY - timedelta(days=1))
        assert tracker.is_allowed("CNN") is True


class TestLimits:
    def test_default_limit(self, tracker) -> None:
        assert tracker.get_limit("Unknown") == 3

    def test_custom_limit_keeps_count(self, tracker) -> None:
        tracker.increment_count("CNN")
        tracker.set_limit("CNN", 1)

        assert tracker.get_limit("CNN") == 1
        assert tracker.get_count("CNN") == 1
        assert tracker.is_allowed("CNN") is False

    def test_custom_limit_carries_to_next_day(self, tracker) -> None:
        tracker.set_limit("CNN", 10, on=TODAY - timedelta(days=1))
        tracker.increment_count("CNN")

        assert tracker.get_all_counts()[0].limit == 10

    def test_zero_limit_blocks(self, tracker) -> None:
        tracker.set_limit("Blocked", 0)
        assert tracker.is_allowed("Blocked") is False

    def test_negative_limit_rejected(self, tracker) -> None:
        with pytest.raises(ValueError):
            tracker.set_limit("CNN", -1)


class TestReporting:
    def test_get_all_counts_sorted(self, tracker) -> None:
        tracker.increment_count("A")
        for _ in range(3):
            tracker.increment_count("B")

        counts = tracker.get_all_counts()

        assert [c.source_name for c in counts] == ["B", "A"]
        assert (counts[0].count, counts[0].remaining, counts[0].at_limit) == (3, 0, True)
        assert (counts[1].count, counts[1].remaining, counts[1].at_limit) == (1, 2, False)

    def test_statistics_by_day(self, tracker) -> None:
        yesterday = TODAY - timedelta(days=1)
        tracker.increment_count("A")
        for _ in range(3):
            tracker.increment_count("B", on=yesterday)
        tracker.increment_count("C", on=yesterday)
        tracker.increment_count("Old", on=TODAY - timedelta(days=30))

        stats = tracker.get_statistics(days=7)

        assert [s.quota_date for s in stats] == [TODAY, yesterday]
        assert stats[0].total_processed == 1
        assert stats[1].total_processed == 4
        assert stats[1].sources_at_limit == 1

    def test_cleanup_removes_old_rows(self, tracker) -> None:
        tracker.increment_count("A", on=TODAY - timedelta(days=8))
        tracker.increment_count("A", on=TODAY - timedelta(days=7))
        tracker.increment_count("A")

        assert tracker.reset_and_cleanup() == 1
        assert tracker.get_count("A", TODAY - timedelta(days=8)) == 0
        assert tracker.get_count("A", TODAY - timedelta(days=7)) == 1

"""Per-source daily processing quotas."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from common.errors import StoreError
from content_store.connection import insert_for
from content_store.models import DailyQuota
from daily_quota.models import DailyStatistics, SourceCount

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class QuotaTracker:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        enabled: bool = True,
        default_limit: int = 5,
        retention_days: int = 7,
        today: Callable[[], date] = utc_today,
    ):
        self._session_factory = session_factory
        self.enabled = enabled
        self.default_limit = default_limit
        self.retention_days = retention_days
        self._today = today

    def is_allowed(self, source: str, on: date | None = None) -> bool:
        """True when quotas are disabled or the source is under its limit for the day."""
        if not self.enabled:
            return True

        on = on or self._today()
        count = self.get_count(source, on)
        limit = self.get_limit(source)
        allowed = count < limit
        if not allowed:
            logger.info("Daily limit reached for source=%s date=%s count=%d limit=%d", source, on, count, limit)
        return allowed

    def increment_count(self, source: str, on: date | None = None) -> int:
        """Atomically add one to the (source, day) counter, creating it at 1.

        Returns:
            The counter value after the increment.
        """
        on = on or self._today()
        limit = self.get_limit(source)
        now = datetime.now(timezone.utc)

        try:
            with self._session_factory.begin() as session:
                insert = insert_for(session)
                stmt = insert(DailyQuota).values(
                    source_name=source,
                    quota_date=on,
                    article_count=1,
                    daily_limit=limit,
                    created_at=now,
                    updated_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["source_name", "quota_date"],
                    set_={
                        "article_count": DailyQuota.article_count + 1,
                        "daily_limit": limit,
                        "updated_at": now,
                    },
                ).returning(DailyQuota.article_count)
                new_count = session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to increment daily count for {source}: {exc}", stage="quota") from exc

        logger.info("Incremented daily count source=%s date=%s count=%d limit=%d", source, on, new_count, limit)
        return new_count

    def get_count(self, source: str, on: date | None = None) -> int:
        on = on or self._today()
        try:
            with self._session_factory() as session:
                count = session.execute(
                    select(DailyQuota.article_count).where(
                        DailyQuota.source_name == source,
                        DailyQuota.quota_date == on,
                    )
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to read daily count for {source}: {exc}", stage="quota") from exc
        return count or 0

    def get_limit(self, source: str) -> int:
        """The limit stored on the source's most recent row, else the default."""
        try:
            with self._session_factory() as session:
                limit = session.execute(
                    select(DailyQuota.daily_limit)
                    .where(DailyQuota.source_name == source)
                    .order_by(DailyQuota.quota_date.desc(), DailyQuota.updated_at.desc())
                    .limit(1)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to read daily limit for {source}: {exc}", stage="quota") from exc
        return self.default_limit if limit is None else limit

    def set_limit(self, source: str, limit: int, on: date | None = None) -> None:
        """Record a custom limit for ``source`` on today's row without touching its count."""
        if limit < 0:
            raise ValueError("limit must be non-negative")

        on = on or self._today()
        now = datetime.now(timezone.utc)
        try:
            with self._session_factory.begin() as session:
                insert = insert_for(session)
                session.execute(
                    insert(DailyQuota)
                    .values(
                        source_name=source,
                        quota_date=on,
                        article_count=0,
                        daily_limit=limit,
                        created_at=now,
                        updated_at=now,
                    )
                    .on_conflict_do_update(
                        index_elements=["source_name", "quota_date"],
                        set_={"daily_limit": limit, "updated_at": now},
                    )
                )
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to set daily limit for {source}: {exc}", stage="quota") from exc
        logger.info("Set daily limit source=%s limit=%d", source, limit)

    def get_all_counts(self, on: date | None = None) -> list[SourceCount]:
        on = on or self._today()
        rows = self._select_rows(
            select(DailyQuota)
            .where(DailyQuota.quota_date == on)
            .order_by(DailyQuota.article_count.desc(), DailyQuota.source_name)
        )
        return [self._to_source_count(row) for row in rows]

    def get_statistics(self, days: int = 7) -> list[DailyStatistics]:
        """Per-day totals for the last ``days`` days, newest first."""
        start = self._today() - timedelta(days=days)
        rows = self._select_rows(
            select(DailyQuota)
            .where(DailyQuota.quota_date >= start)
            .order_by(DailyQuota.quota_date.desc(), DailyQuota.article_count.desc(), DailyQuota.source_name)
        )

        by_date: dict[date, DailyStatistics] = {}
        for row in rows:
            stats = by_date.setdefault(row.quota_date, DailyStatistics(quota_date=row.quota_date))
            source_count = self._to_source_count(row)
            stats.sources.append(source_count)
            stats.total_processed += source_count.count
            if source_count.at_limit:
                stats.sources_at_limit += 1
        return list(by_date.values())

    def reset_and_cleanup(self, today: date | None = None) -> int:
        """Delete rows older than the retention window.

        Returns:
            Number of rows deleted.
        """
        cutoff = (today or self._today()) - timedelta(days=self.retention_days)
        try:
            with self._session_factory.begin() as session:
                result = session.execute(
                    delete(DailyQuota)
                    .where(DailyQuota.quota_date < cutoff)
                    .execution_options(synchronize_session=False)
                )
                deleted = result.rowcount or 0
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to clean up daily counts: {exc}", stage="quota") from exc

        logger.info("Cleaned up %d daily quota records older than %s", deleted, cutoff)
        return deleted

    def _select_rows(self, stmt) -> list[DailyQuota]:
        try:
            with self._session_factory() as session:
                return list(session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to read daily counts: {exc}", stage="quota") from exc

    def _to_source_count(self, row: DailyQuota) -> SourceCount:
        limit = self.default_limit if row.daily_limit is None else row.daily_limit
        return SourceCount(
            source_name=row.source_name,
            count=row.article_count,
            limit=limit,
            remaining=max(0, limit - row.article_count),
            at_limit=row.article_count >= limit,
        )

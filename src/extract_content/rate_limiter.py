"""Shared minimum-interval rate limiter backed by the database.

Every worker reserves its call slot with a single ``UPDATE ... RETURNING`` on
the ``rate_limit_state`` row, so concurrent callers are spaced at least
``min_interval`` seconds apart even across processes.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import case, literal, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from common.errors import StoreError
from content_store.connection import insert_for
from content_store.models import RateLimitState

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        key: str = "diffbot",
        min_interval: float = 13.0,
        cooldown: float = 60.0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._session_factory = session_factory
        self.key = key
        self.min_interval = min_interval
        self.cooldown = cooldown
        self._clock = clock
        self._sleep = sleep

    def acquire(self) -> float:
        """Reserve the next call slot and block until it starts.

        Returns:
            Seconds waited.
        """
        now = self._clock()
        slot_start = self._reserve(now)
        wait = max(0.0, slot_start - now)
        if wait > 0:
            logger.info("Rate limiting: waiting %.1f seconds before key=%s call", wait, self.key)
            self._sleep(wait)
        return wait

    def penalize(self, cooldown: float | None = None) -> float:
        """Push the shared clock to at least now + cooldown (after a 429).

        Returns:
            The epoch time before which no caller may proceed.
        """
        until = self._clock() + (self.cooldown if cooldown is None else cooldown)
        column = RateLimitState.next_allowed_at
        try:
            with self._session_factory.begin() as session:
                self._ensure_row(session)
                session.execute(
                    update(RateLimitState)
                    .where(RateLimitState.key == self.key)
                    .values(
                        next_allowed_at=case((column > until, column), else_=literal(until)),
                        updated_at=datetime.now(timezone.utc),
                    )
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to update rate limit state: {exc}", stage="rate_limit") from exc
        logger.warning("Rate limit hit for key=%s, next call not before %.0f", self.key, until)
        return until

    def next_allowed_at(self) -> float:
        try:
            with self._session_factory() as session:
                row = session.get(RateLimitState, self.key)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to read rate limit state: {exc}", stage="rate_limit") from exc
        return row.next_allowed_at if row is not None else 0.0

    def _reserve(self, now: float) -> float:
        """Atomically claim max(next_allowed_at, now) and advance the clock by one interval."""
        column = RateLimitState.next_allowed_at
        try:
            with self._session_factory.begin() as session:
                self._ensure_row(session)
                new_next = session.execute(
                    update(RateLimitState)
                    .where(RateLimitState.key == self.key)
                    .values(
                        next_allowed_at=case((column > now, column), else_=literal(now)) + self.min_interval,
                        updated_at=datetime.now(timezone.utc),
                    )
                    .returning(RateLimitState.next_allowed_at)
                    .execution_options(synchronize_session=False)
                ).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to reserve rate limit slot: {exc}", stage="rate_limit") from exc
        return new_next - self.min_interval

    def _ensure_row(self, session: Session) -> None:
        insert = insert_for(session)
        session.execute(
            insert(RateLimitState)
            .values(key=self.key, next_allowed_at=0.0, updated_at=datetime.now(timezone.utc))
            .on_conflict_do_nothing(index_elements=["key"])
        )

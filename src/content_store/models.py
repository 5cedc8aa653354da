"""SQLAlchemy models for the content store, quota counters and rate-limit clock."""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


article_tags = Table(
    "article_tags",
    Base.metadata,
    Column("article_id", ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("name", "category", name="uq_tags_name_category"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(32))


class Article(Base):
    __tablename__ = "articles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, default="")
    source_url: Mapped[str | None] = mapped_column(Text)
    body_text: Mapped[str | None] = mapped_column(Text)
    publish_state: Mapped[str] = mapped_column(String(16), default="unpublished")
    raw_scraped_data: Mapped[str | None] = mapped_column(Text)
    raw_analysis_response: Mapped[str | None] = mapped_column(Text)
    structured_analysis: Mapped[dict | None] = mapped_column(JSON)
    analysis_text: Mapped[str | None] = mapped_column(Text)
    analysis_status: Mapped[str] = mapped_column(String(16), default="none")
    source_name: Mapped[str | None] = mapped_column(String(255))

    credibility_score: Mapped[int | None] = mapped_column(Integer)
    bias_rating: Mapped[int | None] = mapped_column(Integer)
    sentiment_score: Mapped[int | None] = mapped_column(Integer)
    authoritarianism_score: Mapped[int | None] = mapped_column(Integer)
    bias_analysis: Mapped[str | None] = mapped_column(Text)

    site_name: Mapped[str | None] = mapped_column(String(255))
    author: Mapped[str | None] = mapped_column(String(255))
    breadcrumb: Mapped[str | None] = mapped_column(Text)
    word_count: Mapped[int | None] = mapped_column(Integer)
    language: Mapped[str | None] = mapped_column(String(16))
    image_url: Mapped[str | None] = mapped_column(Text)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)

    tags: Mapped[list[Tag]] = relationship(secondary=article_tags, lazy="selectin")


class DailyQuota(Base):
    __tablename__ = "daily_quotas"
    __table_args__ = (UniqueConstraint("source_name", "quota_date", name="uq_daily_quotas_source_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_name: Mapped[str] = mapped_column(String(255))
    quota_date: Mapped[date] = mapped_column(Date)
    article_count: Mapped[int] = mapped_column(Integer, default=0)
    daily_limit: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)


class RateLimitState(Base):
    __tablename__ = "rate_limit_state"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    next_allowed_at: Mapped[float] = mapped_column(Float, default=0.0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)

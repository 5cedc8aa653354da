"""Content store: persists ContentItem records and resolves tags."""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from analyze_content.models import SCORE_FIELDS, StructuredAnalysis
from common.errors import StoreError
from content_store.connection import insert_for
from content_store.models import Article, Tag
from process_analysis.models import (
    SOURCE_UNAVAILABLE,
    AnalysisStatus,
    ContentItem,
    PublishState,
    TagCategory,
    TagRef,
)

logger = logging.getLogger(__name__)

# Columns copied one-to-one between ContentItem and Article
_PLAIN_FIELDS = (
    "title",
    "source_url",
    "body_text",
    "raw_scraped_data",
    "raw_analysis_response",
    "analysis_text",
    "source_name",
    "credibility_score",
    "bias_rating",
    "sentiment_score",
    "authoritarianism_score",
    "bias_analysis",
    "site_name",
    "author",
    "breadcrumb",
    "word_count",
    "language",
    "image_url",
    "published_at",
)


class ContentStore(Protocol):
    """What the pipeline needs from the persistent store."""

    def save(self, item: ContentItem) -> None: ...

    def find_tag(self, name: str, category: TagCategory) -> TagRef | None: ...

    def get_or_create_tag(self, name: str, category: TagCategory) -> TagRef: ...


class SqlContentStore:
    """ContentStore backed by SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def add(self, item: ContentItem) -> None:
        """Insert a new item (ingestion and tooling entry point)."""
        try:
            with self._session_factory.begin() as session:
                row = Article(id=item.id, created_at=item.created_at)
                _copy_to_row(item, row, session)
                session.add(row)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to add item: {exc}", stage="store", item_id=item.id) from exc

    def save(self, item: ContentItem) -> None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(Article, item.id)
                if row is None:
                    row = Article(id=item.id, created_at=item.created_at)
                    session.add(row)
                _copy_to_row(item, row, session)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to save item: {exc}", stage="store", item_id=item.id) from exc
        logger.debug("Saved item id=%s tags=%d", item.id, len(item.tags))

    def load(self, item_id: str) -> ContentItem | None:
        try:
            with self._session_factory() as session:
                row = session.get(Article, item_id)
                return _row_to_item(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load item: {exc}", stage="store", item_id=item_id) from exc

    def find_tag(self, name: str, category: TagCategory) -> TagRef | None:
        category = TagCategory(category)
        try:
            with self._session_factory() as session:
                tag_id = session.execute(
                    select(Tag.id).where(Tag.name == name, Tag.category == category.value)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to look up tag {name!r}: {exc}", stage="store") from exc
        if tag_id is None:
            return None
        return TagRef(name=name, category=category, store_id=tag_id)

    def get_or_create_tag(self, name: str, category: TagCategory) -> TagRef:
        category = TagCategory(category)
        try:
            with self._session_factory.begin() as session:
                insert = insert_for(session)
                session.execute(
                    insert(Tag)
                    .values(name=name, category=category.value)
                    .on_conflict_do_nothing(index_elements=["name", "category"])
                )
                tag_id = session.execute(
                    select(Tag.id).where(Tag.name == name, Tag.category == category.value)
                ).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to resolve tag {name!r}: {exc}", stage="store") from exc
        return TagRef(name=name, category=category, store_id=tag_id)

    def list_pending(self, limit: int | None = None) -> list[ContentItem]:
        """Items with a source URL and no stored analysis response, oldest first."""
        stmt = (
            select(Article)
            .where(Article.source_url.is_not(None), Article.raw_analysis_response.is_(None))
            .order_by(Article.created_at, Article.id)
        )
        return self._list(stmt, limit)

    def list_missing_source(self, limit: int | None = None, after_id: str | None = None) -> list[ContentItem]:
        """Items with stored scraped data but no usable source name, ordered by id."""
        stmt = (
            select(Article)
            .where(
                Article.raw_scraped_data.is_not(None),
                or_(
                    Article.source_name.is_(None),
                    Article.source_name == "",
                    Article.source_name == SOURCE_UNAVAILABLE,
                ),
            )
            .order_by(Article.id)
        )
        if after_id is not None:
            stmt = stmt.where(Article.id > after_id)
        return self._list(stmt, limit)

    def list_missing_score(self, field: str, limit: int | None = None) -> list[ContentItem]:
        """Items with a stored AI response whose score ``field`` is empty."""
        if field not in SCORE_FIELDS:
            raise ValueError(f"Unknown score field: {field}")
        column = getattr(Article, field)
        stmt = (
            select(Article)
            .where(column.is_(None), Article.raw_analysis_response.is_not(None))
            .order_by(Article.created_at, Article.id)
        )
        return self._list(stmt, limit)

    def source_statistics(self, top: int = 20) -> dict:
        """Counts of items with and without a source name, plus the most common sources."""
        missing = or_(Article.source_name.is_(None), Article.source_name == "")
        try:
            with self._session_factory() as session:
                total = session.execute(select(func.count()).select_from(Article)).scalar_one()
                without_source = session.execute(
                    select(func.count()).select_from(Article).where(missing)
                ).scalar_one()
                scraped_without_source = session.execute(
                    select(func.count())
                    .select_from(Article)
                    .where(missing, Article.raw_scraped_data.is_not(None))
                ).scalar_one()
                top_sources = session.execute(
                    select(Article.source_name, func.count().label("n"))
                    .where(~missing)
                    .group_by(Article.source_name)
                    .order_by(func.count().desc(), Article.source_name)
                    .limit(top)
                ).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to compute source statistics: {exc}", stage="store") from exc
        return {
            "total": total,
            "with_source": total - without_source,
            "without_source": without_source,
            "scraped_without_source": scraped_without_source,
            "top_sources": [(name, count) for name, count in top_sources],
        }

    def score_coverage(self) -> dict[str, tuple[int, int]]:
        """Per score field, (items with the score, total published items)."""
        published = Article.publish_state == PublishState.PUBLISHED.value
        try:
            with self._session_factory() as session:
                total = session.execute(select(func.count()).select_from(Article).where(published)).scalar_one()
                coverage = {}
                for name in SCORE_FIELDS:
                    present = session.execute(
                        select(func.count())
                        .select_from(Article)
                        .where(published, getattr(Article, name).is_not(None))
                    ).scalar_one()
                    coverage[name] = (present, total)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to compute score coverage: {exc}", stage="store") from exc
        return coverage

    def _list(self, stmt, limit: int | None) -> list[ContentItem]:
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            with self._session_factory() as session:
                return [_row_to_item(row) for row in session.execute(stmt).scalars().all()]
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to list items: {exc}", stage="store") from exc


def _copy_to_row(item: ContentItem, row: Article, session: Session) -> None:
    for name in _PLAIN_FIELDS:
        setattr(row, name, getattr(item, name))
    row.publish_state = PublishState(item.publish_state).value
    row.analysis_status = AnalysisStatus(item.analysis_status).value
    row.structured_analysis = item.structured_analysis.to_dict() if item.structured_analysis else None

    tags = []
    for ref in item.tags:
        tag = session.get(Tag, ref.store_id) if ref.store_id is not None else None
        if tag is None:
            tag = session.execute(
                select(Tag).where(Tag.name == ref.name, Tag.category == TagCategory(ref.category).value)
            ).scalar_one_or_none()
        if tag is None:
            tag = Tag(name=ref.name, category=TagCategory(ref.category).value)
            session.add(tag)
        tags.append(tag)
    row.tags = tags


def _row_to_item(row: Article) -> ContentItem:
    item = ContentItem(
        id=row.id,
        publish_state=PublishState(row.publish_state),
        analysis_status=AnalysisStatus(row.analysis_status),
        structured_analysis=(
            StructuredAnalysis.from_dict(row.structured_analysis) if row.structured_analysis else None
        ),
        tags=[TagRef(name=t.name, category=TagCategory(t.category), store_id=t.id) for t in row.tags],
        created_at=row.created_at,
    )
    for name in _PLAIN_FIELDS:
        setattr(item, name, getattr(row, name))
    return item

"""Tests for content_store.connection module."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import inspect, select
from sqlalchemy.dialects import postgresql, sqlite

from content_store.connection import create_tables, get_engine, get_session_factory, insert_for
from content_store.models import Tag


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'connection.db'}"


class TestGetEngine:
    def test_engine_is_cached_per_url(self, db_url) -> None:
        assert get_engine(db_url) is get_engine(db_url)

    def test_create_tables(self, db_url) -> None:
        engine = get_engine(db_url)
        create_tables(engine)

        tables = set(inspect(engine).get_table_names())
        assert {"articles", "tags", "article_tags", "daily_quotas", "rate_limit_state"} <= tables


class TestGetSessionFactory:
    def test_sessions_bind_cached_engine(self, db_url) -> None:
        factory = get_session_factory(db_url)

        with factory() as session:
            assert session.get_bind() is get_engine(db_url)

    def test_objects_stay_loaded_after_commit(self, db_url) -> None:
        create_tables(get_engine(db_url))
        factory = get_session_factory(db_url)

        with factory() as session:
            tag = Tag(name="Power", category="general")
            session.add(tag)
            session.commit()
        assert tag.name == "Power"

        with factory() as session:
            assert session.execute(select(Tag.name)).scalars().all() == ["Power"]


class TestInsertFor:
    def _session(self, dialect_name: str) -> MagicMock:
        session = MagicMock()
        session.get_bind.return_value.dialect.name = dialect_name
        return session

    def test_dialects(self) -> None:
        assert insert_for(self._session("sqlite")) is sqlite.insert
        assert insert_for(self._session("postgresql")) is postgresql.insert

    def test_unsupported_dialect(self) -> None:
        with pytest.raises(NotImplementedError):
            insert_for(self._session("mysql"))

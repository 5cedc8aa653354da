"""Shared fixtures: a file-backed SQLite database per test."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from content_store.models import Base
from content_store.store import SqlContentStore


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"timeout": 30, "check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    return SqlContentStore(session_factory)

"""Database engine and session helpers."""

from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from common.config import get_config
from content_store.models import Base

logger = logging.getLogger(__name__)

_engines: dict[str, Engine] = {}


def get_engine(url: str | None = None) -> Engine:
    """Return a cached engine for the configured (or given) database URL."""
    echo = False
    if url is None:
        database = get_config().database
        url, echo = database.url, database.echo

    engine = _engines.get(url)
    if engine is None:
        connect_args = {"timeout": 30} if url.startswith("sqlite") else {}
        engine = create_engine(
            url,
            echo=echo,
            connect_args=connect_args,
            pool_pre_ping=not url.startswith("sqlite"),
        )
        _engines[url] = engine
    return engine


def get_session_factory(url: str | None = None) -> sessionmaker[Session]:
    """Session factory shared by the store, quota tracker and rate limiter."""
    return sessionmaker(bind=get_engine(url), expire_on_commit=False)


def create_tables(engine: Engine | None = None) -> None:
    """Create any missing tables."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Ensured tables exist on %s", engine.url.render_as_string(hide_password=True))


def insert_for(session: Session):
    """Return the dialect-specific ``insert`` supporting ON CONFLICT for this session's bind."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"Upserts are not supported on dialect {dialect!r}")
    return insert

"""Database setup helpers (SQLAlchemy engine/session)."""
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    SQLite gets ``check_same_thread=False`` because handlers run on several
    threads, and in-memory SQLite a single shared connection.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, future=True, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        return create_engine(database_url, future=True, connect_args=connect_args, poolclass=StaticPool)

    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, future=True, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create missing tables."""
    # Imported for its side effect of registering the tables on Base.metadata.
    from animerate.infrastructure.persistence import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

"""Database connection and session management using SQLAlchemy.

The FastAPI dependency get_db() yields a session per request; services own
their transactions.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from gridiron_draft.config import get_settings
from gridiron_draft.database.models import Base
from gridiron_draft.logging import logger


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, allowing SQLite connections to cross threads."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


_settings = get_settings()

engine = build_engine(_settings.database_url, _settings.database_echo)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions.

    Does not commit: services own their transactions.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("database_initialized", url=target.url.render_as_string(hide_password=True))

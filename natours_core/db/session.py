"""
Database Session Management for Natours

A ``Database`` owns one engine and its session factory. The application
factory builds it from its settings and keeps it on ``app.state``; the
``get_db`` dependency opens per-request sessions from there.
"""

import logging
from typing import Optional, Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from natours_core.config import NatoursSettings
from .models import Base

log = logging.getLogger(__name__)


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for a database URL.

    SQLite connections are shared across threads, and an in-memory SQLite
    database is pinned to a single connection so every session sees it.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != 'sqlite':
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs = {'connect_args': {'check_same_thread': False}}
    if parsed.database in (None, '', ':memory:'):
        kwargs['poolclass'] = StaticPool
    return create_engine(url, echo=echo, **kwargs)


class Database:
    """
    Engine plus session factory for one configured database.

    The engine is created on first use, so building the app does not
    need the database driver until a request or startup touches it.

    Usage:
        database = Database.from_settings(settings)
        database.create_all()
        session = database.session()
    """

    def __init__(self, url: Optional[str] = None, echo: bool = False, engine: Optional[Engine] = None):
        if url is None and engine is None:
            raise ValueError("Database needs a URL or an engine")
        self.url = url if url is not None else engine.url.render_as_string(hide_password=False)
        self.echo = echo
        self._engine = engine
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, settings: NatoursSettings) -> "Database":
        return cls(url=settings.DATABASE_URL, echo=settings.DB_ECHO)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_db_engine(self.url, echo=self.echo)
            log.info(f"Created database engine for: {self.url.split('@')[-1]}")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = get_session_factory(self.engine)
        return self._session_factory

    def session(self) -> Session:
        """New session; the caller closes it."""
        return self.session_factory()

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)
        log.info("Database tables created successfully")

    def dispose(self) -> None:
        """Release pooled connections. The engine is rebuilt on next use."""
        if self._engine is not None:
            self._engine.dispose()
            log.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


def get_session_factory(engine: Engine) -> sessionmaker:
    """
    Session factory bound to an engine.

    Objects stay usable after commit so flows can keep returning the
    user they just updated.
    """
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_database(request: Request) -> Database:
    """The database built by the application factory."""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Yields a session from the application's database and closes it after
    the request.

    Usage:
        @router.get("/me")
        async def me(db: Session = Depends(get_db)):
            ...
    """
    session = get_database(request).session()
    try:
        yield session
    finally:
        session.close()

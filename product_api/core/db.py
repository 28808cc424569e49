from __future__ import annotations

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from product_api.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for the SQLAlchemy models."""


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


class Database:
    """
    Process-wide handle on the product store.

    Built once at application startup and disposed at shutdown; request
    handlers only ever see the sessions it hands out.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine: Engine = self._create_engine(url)
        self._sessionmaker = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            class_=Session,
        )

    @staticmethod
    def _create_engine(url: str) -> Engine:
        if make_url(url).get_backend_name() == "sqlite":
            kwargs = {"connect_args": {"check_same_thread": False}}
            if _is_memory_sqlite(url):
                # one shared connection, otherwise each checkout sees an empty database
                kwargs["poolclass"] = StaticPool
            return create_engine(url, **kwargs)

        # pool_pre_ping drops connections the server closed while idle
        return create_engine(url, pool_pre_ping=True)

    def create_all(self) -> None:
        # Register the models on Base.metadata before creating tables.
        from product_api import models  # noqa: F401

        Base.metadata.create_all(self.engine)
        logger.info("Database schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")

    def session(self) -> Session:
        return self._sessionmaker()

    def session_scope(self) -> Generator[Session, None, None]:
        db = self.session()
        try:
            yield db
        finally:
            db.close()

"""Database configuration, session management and transaction scopes."""

from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from functools import lru_cache

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from roles_admin.config import Settings, get_settings
from roles_admin.domain.exceptions import ConflictError, TransientStoreError


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)

_UNIT_OF_WORK_DEPTH = "roles_admin.unit_of_work_depth"

# serialization_failure, deadlock_detected, lock_not_available
_TRANSIENT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
# ER_LOCK_WAIT_TIMEOUT, ER_LOCK_DEADLOCK
_TRANSIENT_MYSQL_ERRNOS = frozenset({1205, 1213})
_TRANSIENT_MESSAGES = (
    "database is locked",
    "database table is locked",
    "deadlock",
    "lock wait timeout",
    "could not serialize access",
    "lock timeout",
)


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine described by ``settings``."""

    url = settings.database_url
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.database_lock_timeout_seconds,
            },
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, pool_pre_ping=True)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide engine built from the cached settings."""

    return build_engine(get_settings())


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    """Return the session factory bound to :func:`get_engine`."""

    return build_session_factory(get_engine())


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def initialize_database(engine: Engine | None = None) -> None:
    """Ensure all ORM models have tables and the hierarchy lock row exists."""

    from roles_admin.infrastructure import models  # noqa: F401  # ensure models are imported
    from roles_admin.infrastructure.repositories import (
        ROLE_CLASS,
        ObjectMetaRepository,
        RoleHierarchyRepository,
    )

    bind = engine if engine is not None else get_engine()
    Base.metadata.create_all(bind=bind, checkfirst=True)

    with Session(bind) as session, unit_of_work(session):
        ObjectMetaRepository(session).get_class_id(ROLE_CLASS)
        RoleHierarchyRepository(session).ensure_revision_row()


def dispose_engine() -> None:
    """Release pooled connections and forget the cached engine."""

    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_session_factory.cache_clear()
    get_engine.cache_clear()


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Run the enclosed block as one transaction on ``session``.

    The outermost scope commits on success and rolls back on any exception;
    nested scopes join it. Store failures are translated into
    :class:`TransientStoreError` (lock timeouts, deadlocks, serialization
    failures) or :class:`ConflictError` (integrity violations).
    """

    depth = session.info.get(_UNIT_OF_WORK_DEPTH, 0)
    session.info[_UNIT_OF_WORK_DEPTH] = depth + 1
    try:
        yield session
        if depth == 0:
            session.commit()
    except DBAPIError as exc:
        if depth == 0:
            session.rollback()
        translated = translate_store_error(exc)
        if translated is None:
            raise
        raise translated from exc
    except BaseException:
        if depth == 0:
            session.rollback()
        raise
    finally:
        session.info[_UNIT_OF_WORK_DEPTH] = depth


def translate_store_error(exc: DBAPIError) -> Exception | None:
    """Map a driver error onto the error kinds callers can act upon.

    Returns ``None`` for errors that should propagate unchanged.
    """

    if isinstance(exc, IntegrityError):
        return ConflictError(
            "The change conflicts with a concurrent modification of the same roles"
        )
    if is_transient_store_error(exc):
        logger.warning("Transient store failure, the operation may be retried: %s", exc.orig)
        return TransientStoreError(
            "The role store is busy (lock timeout or deadlock); retry the operation"
        )
    return None


def is_transient_store_error(exc: DBAPIError) -> bool:
    original = exc.orig
    sqlstate = getattr(original, "pgcode", None) or getattr(original, "sqlstate", None)
    if sqlstate in _TRANSIENT_SQLSTATES:
        return True
    args = getattr(original, "args", ())
    if args and args[0] in _TRANSIENT_MYSQL_ERRNOS:
        return True
    message = str(original).lower()
    return any(marker in message for marker in _TRANSIENT_MESSAGES)


__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "dispose_engine",
    "get_db",
    "get_engine",
    "get_session_factory",
    "initialize_database",
    "is_transient_store_error",
    "translate_store_error",
    "unit_of_work",
]

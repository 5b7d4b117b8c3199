"""Shared fixtures: a fresh SQLite database per test and helpers to build roles."""

from __future__ import annotations

import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from roles_admin.application.use_cases.roles import create_role  # noqa: E402
from roles_admin.config import reset_settings_cache  # noqa: E402
from roles_admin.domain.entities import Role  # noqa: E402
from roles_admin.infrastructure.database import (  # noqa: E402
    dispose_engine,
    get_session_factory,
    initialize_database,
    unit_of_work,
)
from roles_admin.infrastructure.repositories import RoleRepository  # noqa: E402
from roles_admin.utils.datetime import get_app_timezone  # noqa: E402


def _clear_caches() -> None:
    dispose_engine()
    reset_settings_cache()
    get_app_timezone.cache_clear()


@pytest.fixture()
def database_url(tmp_path, monkeypatch):
    """Point the settings at an empty SQLite file for the duration of a test."""

    url = f"sqlite:///{tmp_path / 'roles.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("APP_TIMEZONE", "UTC")
    monkeypatch.delenv("ROLE_SEARCH_CASE_SENSITIVE", raising=False)
    monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)
    _clear_caches()
    yield url
    _clear_caches()


@pytest.fixture()
def session(database_url):
    initialize_database()
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_role(session):
    """Create a system role granted the given roles."""

    def _make(name: str, *granted: Role, description: str | None = None) -> Role:
        return create_role(
            session,
            name=name,
            description=description,
            granted_role_uuids=[role.uuid for role in granted],
        )

    return _make


@pytest.fixture()
def make_user_role(session):
    """Insert a role owned by a user account, which the admin API never creates."""

    def _make(name: str) -> Role:
        role = Role(
            id=None,
            uuid=None,
            name=name,
            description=None,
            is_user_role=True,
            created_at=None,
            updated_at=None,
            created_by=None,
            updated_by=None,
        )
        with unit_of_work(session):
            return RoleRepository(session).create(role)

    return _make

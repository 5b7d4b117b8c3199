"""Tests for role lookups and their object class bookkeeping."""

from __future__ import annotations

from sqlalchemy import event, func, select
from sqlalchemy.orm import Session

from roles_admin.infrastructure.database import Base, get_engine
from roles_admin.infrastructure.models import ObjectClassModel
from roles_admin.infrastructure.repositories import (
    ROLE_CLASS,
    ObjectMetaRepository,
    RoleQuery,
    RoleRepository,
)


def test_reads_do_not_register_the_role_class(database_url):
    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    with Session(engine) as session:
        repository = RoleRepository(session)

        assert repository.search(RoleQuery()) == ([], 0)
        assert repository.get_by_name("Admin") is None
        assert repository.get_by_uuid("00000000-0000-0000-0000-000000000000") is None

        assert session.scalar(select(func.count()).select_from(ObjectClassModel)) == 0
        assert ObjectMetaRepository(session).find_class_id(ROLE_CLASS) is None


def test_role_class_id_is_looked_up_once(session, make_role):
    make_role("Viewer")
    make_role("Editor")
    repository = RoleRepository(session)
    statements: list[str] = []

    def record(_conn, _cursor, statement, *_args):
        statements.append(statement)

    event.listen(get_engine(), "before_cursor_execute", record)
    try:
        repository.search(RoleQuery())
        repository.get_by_name("Editor")
        repository.granted_roles_of_many([1, 2])
    finally:
        event.remove(get_engine(), "before_cursor_execute", record)

    class_lookups = [s for s in statements if "FROM object_classes" in s]
    assert len(class_lookups) == 1

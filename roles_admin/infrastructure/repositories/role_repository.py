"""Persistence layer for roles data."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from roles_admin.domain.entities import GrantedRole, Role
from roles_admin.infrastructure.models import (
    ObjectMetaModel,
    RoleHierarchyModel,
    RoleModel,
)
from roles_admin.utils import localize

from .object_meta_repository import ObjectMetaRepository

ROLE_CLASS = "role"

SORTABLE_COLUMNS = {
    "role_id": RoleModel.role_id,
    "role_name": RoleModel.role_name,
    "role_description": RoleModel.role_description,
    "role_uuid": ObjectMetaModel.meta_object_uuid,
    "meta_object_uuid": ObjectMetaModel.meta_object_uuid,
    "created_at": ObjectMetaModel.meta_object_create_time,
    "updated_at": ObjectMetaModel.meta_object_last_update_time,
}


@dataclass(frozen=True)
class RoleQuery:
    """Resolved search conditions, combined with AND.

    ``role_ids`` restricts the result to an explicit id set and carries the
    outcome of hierarchy filters computed before the query runs.
    """

    role_id: int | None = None
    uuid_contains: str | None = None
    name_contains: str | None = None
    description_contains: str | None = None
    role_ids: frozenset[int] | None = None
    system_roles_only: bool = True
    case_sensitive: bool = False
    order_by: str = "role_name"
    descending: bool = False
    offset: int = 0
    limit: int = 0


class RoleRepository:
    """Provide CRUD and search access to roles stored in the database."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.meta = ObjectMetaRepository(session)
        self._class_id: int | None = None

    def get(self, role_id: int) -> Role | None:
        row = self.session.execute(
            self._select_roles().where(RoleModel.role_id == role_id)
        ).first()
        return self._to_entity(*row) if row else None

    def get_by_uuid(self, role_uuid: UUID | str) -> Role | None:
        normalized = _normalize_uuid(role_uuid)
        if normalized is None:
            return None
        row = self.session.execute(
            self._select_roles().where(ObjectMetaModel.meta_object_uuid == normalized)
        ).first()
        return self._to_entity(*row) if row else None

    def get_by_name(self, name: str) -> Role | None:
        row = self.session.execute(
            self._select_roles().where(RoleModel.role_name == name)
        ).first()
        return self._to_entity(*row) if row else None

    def get_many_by_uuids(self, role_uuids: Collection[UUID | str]) -> dict[UUID, Role]:
        """Return the roles found for ``role_uuids`` keyed by UUID. Unknown ones are skipped."""

        normalized = {_normalize_uuid(value) for value in role_uuids} - {None}
        if not normalized:
            return {}
        rows = self.session.execute(
            self._select_roles().where(ObjectMetaModel.meta_object_uuid.in_(sorted(normalized)))
        ).all()
        roles = [self._to_entity(*row) for row in rows]
        return {role.uuid: role for role in roles}

    def get_many(self, role_ids: Collection[int]) -> dict[int, Role]:
        if not role_ids:
            return {}
        rows = self.session.execute(
            self._select_roles().where(RoleModel.role_id.in_(sorted(set(role_ids))))
        ).all()
        roles = [self._to_entity(*row) for row in rows]
        return {role.id: role for role in roles}

    def lock(self, role_ids: Collection[int]) -> list[int]:
        """Lock the rows of ``role_ids`` until the transaction ends.

        Rows are locked in id order so concurrent callers cannot deadlock on
        each other. Returns the ids that exist.
        """

        if not role_ids:
            return []
        stmt = (
            select(RoleModel.role_id)
            .where(RoleModel.role_id.in_(sorted(set(role_ids))))
            .order_by(RoleModel.role_id)
            .with_for_update()
        )
        return list(self.session.scalars(stmt))

    def create(self, role: Role) -> Role:
        model = RoleModel(
            role_name=role.name,
            role_description=role.description,
            role_is_user=role.is_user_role,
        )
        self.session.add(model)
        self.session.flush()
        meta = self.meta.create(
            ROLE_CLASS,
            model.role_id,
            created_by=role.created_by,
            created_at=role.created_at,
        )
        self._class_id = meta.meta_class_id
        return self._to_entity(model, meta)

    def update(self, role: Role) -> Role:
        """Persist the editable attributes of ``role``. ``is_user_role`` is left as stored."""

        model = self.session.get(RoleModel, role.id)
        if model is None:
            msg = f"Role with id {role.id} not found"
            raise LookupError(msg)
        model.role_name = role.name
        model.role_description = role.description
        self.session.add(model)
        self.session.flush()
        meta = self.meta.touch(
            ROLE_CLASS,
            model.role_id,
            updated_by=role.updated_by,
            updated_at=role.updated_at,
        )
        return self._to_entity(model, meta)

    def search(self, query: RoleQuery) -> tuple[list[Role], int]:
        """Return one page of roles matching ``query`` and the total match count."""

        conditions = self._conditions(query)
        if conditions is None:
            return [], 0

        matching_ids = self._join_meta(select(RoleModel.role_id)).where(*conditions)
        total = self.session.scalar(
            select(func.count()).select_from(matching_ids.subquery())
        )

        sort_column = SORTABLE_COLUMNS[query.order_by]
        page = (
            self._select_roles()
            .where(*conditions)
            .order_by(
                sort_column.desc() if query.descending else sort_column.asc(),
                RoleModel.role_id.asc(),
            )
        )
        if query.offset:
            page = page.offset(query.offset)
        if query.limit:
            page = page.limit(query.limit)

        rows = self.session.execute(page).all()
        return [self._to_entity(*row) for row in rows], int(total or 0)

    def granted_roles_of_many(self, role_ids: Collection[int]) -> dict[int, list[GrantedRole]]:
        """Return the directly granted roles of each id, ordered by name."""

        if not role_ids:
            return {}
        stmt = (
            select(
                RoleHierarchyModel.role_id,
                RoleModel.role_id,
                RoleModel.role_name,
                ObjectMetaModel.meta_object_uuid,
            )
            .select_from(RoleHierarchyModel)
            .join(RoleModel, RoleModel.role_id == RoleHierarchyModel.inherited_role_id)
            .join(
                ObjectMetaModel,
                and_(
                    ObjectMetaModel.meta_object_id == RoleModel.role_id,
                    ObjectMetaModel.meta_class_id == self._role_class_id(),
                ),
            )
            .where(RoleHierarchyModel.role_id.in_(sorted(set(role_ids))))
            .order_by(RoleModel.role_name, RoleModel.role_id)
        )
        granted: dict[int, list[GrantedRole]] = {role_id: [] for role_id in role_ids}
        for owner_id, granted_id, granted_name, granted_uuid in self.session.execute(stmt):
            granted[owner_id].append(
                GrantedRole(id=granted_id, uuid=UUID(granted_uuid), name=granted_name)
            )
        return granted

    def _conditions(self, query: RoleQuery) -> list | None:
        conditions: list = []
        if query.system_roles_only:
            conditions.append(RoleModel.role_is_user.is_(False))
        if query.role_id is not None:
            conditions.append(RoleModel.role_id == query.role_id)
        if query.uuid_contains is not None:
            conditions.append(
                ObjectMetaModel.meta_object_uuid.contains(
                    query.uuid_contains.lower(), autoescape=True
                )
            )
        for column, value in (
            (RoleModel.role_name, query.name_contains),
            (RoleModel.role_description, query.description_contains),
        ):
            if value is None:
                continue
            conditions.append(self._contains(column, value, case_sensitive=query.case_sensitive))
        if query.role_ids is not None:
            if not query.role_ids:
                return None
            conditions.append(RoleModel.role_id.in_(sorted(query.role_ids)))
        return conditions

    def _contains(self, column, value: str, *, case_sensitive: bool):
        if not case_sensitive:
            return func.lower(column).contains(value.lower(), autoescape=True)
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            # LIKE ignores ASCII case in SQLite.
            return func.instr(column, value) > 0
        if dialect in ("mysql", "mariadb"):
            return func.binary(column).contains(value, autoescape=True)
        return column.contains(value, autoescape=True)

    def _select_roles(self) -> Select:
        return self._join_meta(select(RoleModel, ObjectMetaModel))

    def _join_meta(self, stmt: Select) -> Select:
        return stmt.join(
            ObjectMetaModel,
            and_(
                ObjectMetaModel.meta_object_id == RoleModel.role_id,
                ObjectMetaModel.meta_class_id == self._role_class_id(),
            ),
        )

    def _role_class_id(self) -> int | None:
        # Registered by initialize_database; until then no role has meta data to join.
        if self._class_id is None:
            self._class_id = self.meta.find_class_id(ROLE_CLASS)
        return self._class_id

    @staticmethod
    def _to_entity(model: RoleModel, meta: ObjectMetaModel) -> Role:
        return Role(
            id=model.role_id,
            uuid=UUID(meta.meta_object_uuid),
            name=model.role_name,
            description=model.role_description,
            is_user_role=bool(model.role_is_user),
            created_at=localize(meta.meta_object_create_time),
            updated_at=localize(meta.meta_object_last_update_time),
            created_by=meta.meta_object_create_role_id,
            updated_by=meta.meta_object_last_update_role_id,
        )


def _normalize_uuid(value: UUID | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, UUID):
        return str(value)
    try:
        return str(UUID(str(value).strip()))
    except ValueError:
        return None


__all__ = ["ROLE_CLASS", "SORTABLE_COLUMNS", "RoleQuery", "RoleRepository"]

"""Persistence layer for the role grant hierarchy."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from roles_admin.domain import hierarchy
from roles_admin.domain.exceptions import CycleError, DuplicateEdgeError, NotFoundError
from roles_admin.infrastructure.models import (
    HierarchyRevisionModel,
    RoleHierarchyModel,
    RoleModel,
)

REVISION_ROW_ID = 1


class RoleHierarchyRepository:
    """Store grant edges and answer adjacency and reachability questions.

    Mutations must run inside :func:`~roles_admin.infrastructure.database.unit_of_work`.
    :meth:`lock_hierarchy` serialises hierarchy writers; :meth:`add_edge` and
    :meth:`remove_edge` take the lock themselves, callers that read the graph
    before writing should take it first.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def ensure_revision_row(self) -> None:
        if self.session.get(HierarchyRevisionModel, REVISION_ROW_ID) is None:
            self.session.add(HierarchyRevisionModel(revision_id=REVISION_ROW_ID, revision=0))
            self.session.flush()

    def lock_hierarchy(self) -> None:
        """Bump the hierarchy revision, holding its row lock until commit."""

        result = self.session.execute(
            update(HierarchyRevisionModel)
            .where(HierarchyRevisionModel.revision_id == REVISION_ROW_ID)
            .values(revision=HierarchyRevisionModel.revision + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.session.add(HierarchyRevisionModel(revision_id=REVISION_ROW_ID, revision=1))
            self.session.flush()

    def revision(self) -> int:
        value = self.session.scalar(
            select(HierarchyRevisionModel.revision).where(
                HierarchyRevisionModel.revision_id == REVISION_ROW_ID
            )
        )
        return int(value or 0)

    def has_edge(self, role_id: int, granted_role_id: int) -> bool:
        stmt = select(RoleHierarchyModel.role_id).where(
            RoleHierarchyModel.role_id == role_id,
            RoleHierarchyModel.inherited_role_id == granted_role_id,
        )
        return self.session.scalar(stmt) is not None

    def add_edge(self, role_id: int, granted_role_id: int) -> None:
        """Store the edge ``role_id -> granted_role_id``.

        Raises ``NotFoundError`` for unknown endpoints, ``DuplicateEdgeError``
        when the edge exists and ``CycleError`` when ``role_id`` is already
        reachable from ``granted_role_id``.
        """

        self.lock_hierarchy()
        existing = set(
            self.session.scalars(
                select(RoleModel.role_id).where(
                    RoleModel.role_id.in_([role_id, granted_role_id])
                )
            )
        )
        for endpoint in (role_id, granted_role_id):
            if endpoint not in existing:
                raise NotFoundError(f"There is no role with id {endpoint}")
        if self.has_edge(role_id, granted_role_id):
            raise DuplicateEdgeError(
                f"Role {role_id} is already granted role {granted_role_id}"
            )
        if hierarchy.creates_cycle(role_id, granted_role_id, self.direct_grants_of_many):
            raise CycleError(
                f"Granting role {granted_role_id} to role {role_id} would create a cycle"
            )
        self.session.add(
            RoleHierarchyModel(role_id=role_id, inherited_role_id=granted_role_id)
        )
        self.session.flush()

    def remove_edge(self, role_id: int, granted_role_id: int) -> bool:
        """Delete the edge if present. Returns whether an edge was removed."""

        self.lock_hierarchy()
        result = self.session.execute(
            delete(RoleHierarchyModel)
            .where(
                RoleHierarchyModel.role_id == role_id,
                RoleHierarchyModel.inherited_role_id == granted_role_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def direct_grants_of(self, role_id: int) -> set[int]:
        return self.direct_grants_of_many([role_id]).get(role_id, set())

    def direct_grantees_of(self, role_id: int) -> set[int]:
        return self.direct_grantees_of_many([role_id]).get(role_id, set())

    def direct_grants_of_many(self, role_ids: Collection[int]) -> dict[int, set[int]]:
        """Map each of ``role_ids`` to the ids it is directly granted."""

        adjacency: dict[int, set[int]] = {role_id: set() for role_id in role_ids}
        if not adjacency:
            return adjacency
        stmt = select(
            RoleHierarchyModel.role_id, RoleHierarchyModel.inherited_role_id
        ).where(RoleHierarchyModel.role_id.in_(sorted(adjacency)))
        for role_id, granted_role_id in self.session.execute(stmt):
            adjacency[role_id].add(granted_role_id)
        return adjacency

    def direct_grantees_of_many(self, role_ids: Collection[int]) -> dict[int, set[int]]:
        """Map each of ``role_ids`` to the ids directly granted it."""

        adjacency: dict[int, set[int]] = {role_id: set() for role_id in role_ids}
        if not adjacency:
            return adjacency
        stmt = select(
            RoleHierarchyModel.inherited_role_id, RoleHierarchyModel.role_id
        ).where(RoleHierarchyModel.inherited_role_id.in_(sorted(adjacency)))
        for granted_role_id, grantee_id in self.session.execute(stmt):
            adjacency[granted_role_id].add(grantee_id)
        return adjacency

    def transitive_grants_of(self, role_id: int) -> set[int]:
        return hierarchy.walk(role_id, self.direct_grants_of_many)

    def transitive_grantees_of(self, role_id: int) -> set[int]:
        return hierarchy.walk(role_id, self.direct_grantees_of_many)

    def edges(self) -> set[tuple[int, int]]:
        stmt = select(RoleHierarchyModel.role_id, RoleHierarchyModel.inherited_role_id)
        return {(role_id, granted) for role_id, granted in self.session.execute(stmt)}


__all__ = ["REVISION_ROW_ID", "RoleHierarchyRepository"]

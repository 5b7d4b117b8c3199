"""SQLAlchemy models for role grant edges and the hierarchy revision."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer

from roles_admin.infrastructure.database import Base


class RoleHierarchyModel(Base):
    """A grant edge: ``role_id`` inherits the permissions of ``inherited_role_id``."""

    __tablename__ = "roles_hierarchy"

    role_id = Column(
        Integer,
        ForeignKey("roles.role_id", ondelete="CASCADE"),
        primary_key=True,
    )
    inherited_role_id = Column(
        Integer,
        ForeignKey("roles.role_id", ondelete="CASCADE"),
        primary_key=True,
    )

    __table_args__ = (
        CheckConstraint(
            "role_id <> inherited_role_id", name="ck_roles_hierarchy_no_self_grant"
        ),
        Index("ix_roles_hierarchy_inherited_role_id", "inherited_role_id"),
    )


class HierarchyRevisionModel(Base):
    """Single-row counter bumped by every hierarchy mutation.

    Updating the row takes a write lock that is held until commit, so the
    cycle check and the edge insertion of concurrent grants never interleave.
    """

    __tablename__ = "roles_hierarchy_revision"

    revision_id = Column(Integer, primary_key=True, autoincrement=False)
    revision = Column(Integer, nullable=False, default=0)


__all__ = ["HierarchyRevisionModel", "RoleHierarchyModel"]

"""SQLAlchemy model for roles."""

from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.sql import expression

from roles_admin.infrastructure.database import Base


class RoleModel(Base):
    """Database representation of system and user roles."""

    __tablename__ = "roles"

    role_id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(255), nullable=False, unique=True, index=True)
    role_description = Column(Text, nullable=True)
    role_is_user = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
        index=True,
    )


__all__ = ["RoleModel"]

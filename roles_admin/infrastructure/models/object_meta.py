"""SQLAlchemy models correlating surrogate ids with external UUIDs."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from roles_admin.infrastructure.database import Base


class ObjectClassModel(Base):
    """Registered object classes whose records carry meta data."""

    __tablename__ = "object_classes"

    class_id = Column(Integer, primary_key=True, autoincrement=True)
    class_name = Column(String(100), nullable=False, unique=True)


class ObjectMetaModel(Base):
    """UUID and audit data for one record of one object class."""

    __tablename__ = "object_meta"

    meta_id = Column(Integer, primary_key=True, autoincrement=True)
    meta_object_id = Column(Integer, nullable=False)
    meta_class_id = Column(
        Integer, ForeignKey("object_classes.class_id"), nullable=False
    )
    meta_object_uuid = Column(String(36), nullable=False, unique=True, index=True)
    meta_object_create_time = Column(DateTime, nullable=False)
    meta_object_last_update_time = Column(DateTime, nullable=True)
    meta_object_create_role_id = Column(Integer, nullable=True)
    meta_object_last_update_role_id = Column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "meta_class_id", "meta_object_id", name="uq_object_meta_class_object"
        ),
    )


__all__ = ["ObjectClassModel", "ObjectMetaModel"]

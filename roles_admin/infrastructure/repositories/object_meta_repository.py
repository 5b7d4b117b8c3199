"""Persistence helpers for object UUIDs and audit meta data."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from roles_admin.infrastructure.models import ObjectClassModel, ObjectMetaModel
from roles_admin.utils import localize, now_in_app_timezone


class ObjectMetaRepository:
    """Create and update ``object_meta`` rows for any registered object class."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_class_id(self, class_name: str) -> int | None:
        """Return the id of ``class_name``, or ``None`` when it is not registered."""

        return self.session.scalar(
            select(ObjectClassModel.class_id).where(
                ObjectClassModel.class_name == class_name
            )
        )

    def get_class_id(self, class_name: str) -> int:
        """Return the id of ``class_name``, registering the class on first use."""

        class_id = self.find_class_id(class_name)
        if class_id is None:
            model = ObjectClassModel(class_name=class_name)
            self.session.add(model)
            self.session.flush()
            class_id = model.class_id
        return class_id

    def get(self, class_name: str, object_id: int) -> ObjectMetaModel | None:
        return self.session.scalar(
            select(ObjectMetaModel).where(
                ObjectMetaModel.meta_class_id == self.find_class_id(class_name),
                ObjectMetaModel.meta_object_id == object_id,
            )
        )

    def create(
        self,
        class_name: str,
        object_id: int,
        *,
        created_by: int | None = None,
        created_at: datetime | None = None,
    ) -> ObjectMetaModel:
        model = ObjectMetaModel(
            meta_object_id=object_id,
            meta_class_id=self.get_class_id(class_name),
            meta_object_uuid=str(uuid4()),
            meta_object_create_time=localize(created_at or now_in_app_timezone(), naive=True),
            meta_object_create_role_id=created_by,
        )
        self.session.add(model)
        self.session.flush()
        return model

    def touch(
        self,
        class_name: str,
        object_id: int,
        *,
        updated_by: int | None = None,
        updated_at: datetime | None = None,
    ) -> ObjectMetaModel:
        model = self.get(class_name, object_id)
        if model is None:
            msg = f"No meta data for {class_name} with id {object_id}"
            raise LookupError(msg)
        model.meta_object_last_update_time = localize(
            updated_at or now_in_app_timezone(), naive=True
        )
        model.meta_object_last_update_role_id = updated_by
        self.session.add(model)
        self.session.flush()
        return model


__all__ = ["ObjectMetaRepository"]

"""Response envelope shared by every route."""

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    data: DataT | None = None
    message: str | None = None

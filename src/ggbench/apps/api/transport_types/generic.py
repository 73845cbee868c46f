from typing import Generic, List, TypeVar

import humps
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Base(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=humps.camelize,
        populate_by_name=True,
    )


class ListResponse(Base, Generic[T]):
    data: List[T]
    total: int

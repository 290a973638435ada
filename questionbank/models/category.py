import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import StringConstraints

from questionbank.models.base import CamelModel

CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
CategoryColor = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


class CategoryBase(CamelModel):
    name: CategoryName
    color: CategoryColor
    icon: Optional[Annotated[str, StringConstraints(max_length=255)]] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryRead(CategoryBase):
    id: uuid.UUID
    question_count: int
    created_at: datetime

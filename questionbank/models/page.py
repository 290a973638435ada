from __future__ import annotations

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel

from questionbank.models.base import CamelModel

T = TypeVar("T")


class PageRequest(BaseModel):
    page: int = 0
    size: int = 20
    sort_by: str = "created_at"
    descending: bool = True

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(CamelModel, Generic[T]):
    content: List[T]
    number: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool
    empty: bool

    @classmethod
    def build(cls, content: List[T], request: PageRequest, total: int) -> "Page[T]":
        total_pages = math.ceil(total / request.size) if request.size else 0
        return cls(
            content=content,
            number=request.page,
            size=request.size,
            total_elements=total,
            total_pages=total_pages,
            first=request.page == 0,
            last=request.page + 1 >= total_pages,
            empty=not content,
        )

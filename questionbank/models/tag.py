import uuid
from datetime import datetime
from typing import Annotated

from pydantic import StringConstraints

from questionbank.models.base import CamelModel

TAG_NAME_MIN_LENGTH = 2
TAG_NAME_MAX_LENGTH = 50


class TagCreate(CamelModel):
    name: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True,
            min_length=TAG_NAME_MIN_LENGTH,
            max_length=TAG_NAME_MAX_LENGTH,
        ),
    ]


class TagUpdate(TagCreate):
    pass


class TagRead(CamelModel):
    id: uuid.UUID
    name: str
    created_at: datetime

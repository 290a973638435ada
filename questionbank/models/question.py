import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, StringConstraints, field_validator

from questionbank.core.errors import ValidationError
from questionbank.models.base import CamelModel
from questionbank.models.difficulty import Difficulty, parse_difficulty


class QuestionBase(CamelModel):
    question: Annotated[str, StringConstraints(min_length=1, max_length=1000)]
    answer: Annotated[str, StringConstraints(min_length=1, max_length=5000)]
    code_snippet: Optional[Annotated[str, StringConstraints(max_length=10000)]] = None
    difficulty: Difficulty

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def _parse_difficulty(cls, value):
        if isinstance(value, str):
            try:
                return parse_difficulty(value)
            except ValidationError as exc:
                raise ValueError(exc.message) from exc
        return value


class QuestionCreate(QuestionBase):
    category_id: uuid.UUID
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value):
        return [] if value is None else value


class QuestionUpdate(QuestionCreate):
    """PUT payload: every field is replaced, including the tag set."""


class QuestionRead(QuestionBase):
    id: uuid.UUID
    category_id: uuid.UUID
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Enum as SAEnum
from sqlmodel import Field, SQLModel

from questionbank.models.difficulty import Difficulty


class Question(SQLModel, table=True):
    __tablename__ = "questions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    question: str = Field(max_length=1000)
    answer: str = Field(max_length=5000)
    code_snippet: Optional[str] = Field(default=None, max_length=10000)
    difficulty: Difficulty = Field(
        sa_column=Column(
            SAEnum(Difficulty, name="difficulty_level", native_enum=False, length=20),
            nullable=False,
            index=True,
        )
    )
    category_id: uuid.UUID = Field(foreign_key="categories.id", index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )


class QuestionTag(SQLModel, table=True):
    __tablename__ = "question_tags"

    question_id: uuid.UUID = Field(foreign_key="questions.id", primary_key=True)
    tag_id: uuid.UUID = Field(foreign_key="tags.id", primary_key=True, index=True)

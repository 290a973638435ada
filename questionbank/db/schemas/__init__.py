from .category import Category
from .tag import Tag
from .question import Question, QuestionTag

__all__ = [
    "Category",
    "Tag",
    "Question",
    "QuestionTag",
]

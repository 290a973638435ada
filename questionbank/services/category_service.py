from __future__ import annotations

import uuid
from typing import List, Tuple

from sqlalchemy import case, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from questionbank.core.errors import ConflictError, DuplicateResourceError, NotFoundError
from questionbank.core.logging import get_logger
from questionbank.db.schemas import Category, Question
from questionbank.models.category import CategoryCreate, CategoryRead, CategoryUpdate

logger = get_logger(__name__)


class CategoryService:
    """Category CRUD plus the denormalized ``question_count`` bookkeeping.

    The counter helpers never commit: they run inside the transaction of the
    question write that calls them, so both land or neither does.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_categories(self) -> List[CategoryRead]:
        categories = self.session.exec(select(Category).order_by(Category.name)).all()
        return [CategoryRead.model_validate(category) for category in categories]

    def get_category(self, category_id: uuid.UUID) -> CategoryRead:
        return CategoryRead.model_validate(self.get_category_entity(category_id))

    def create_category(self, data: CategoryCreate) -> CategoryRead:
        if self._name_taken(data.name):
            raise DuplicateResourceError("Category", "name", data.name)
        category = Category(name=data.name, color=data.color, icon=data.icon, question_count=0)
        self.session.add(category)
        self._commit_named(data.name)
        self.session.refresh(category)
        logger.info("category_created", category_id=str(category.id), name=category.name)
        return CategoryRead.model_validate(category)

    def update_category(self, category_id: uuid.UUID, data: CategoryUpdate) -> CategoryRead:
        category = self.get_category_entity(category_id)
        if category.name != data.name and self._name_taken(data.name):
            raise DuplicateResourceError("Category", "name", data.name)
        category.name = data.name
        category.color = data.color
        category.icon = data.icon
        self.session.add(category)
        self._commit_named(data.name)
        self.session.refresh(category)
        return CategoryRead.model_validate(category)

    def delete_category(self, category_id: uuid.UUID) -> None:
        category = self.get_category_entity(category_id)
        self.ensure_deletable(category)
        name = category.name
        self.session.delete(category)
        self.session.commit()
        logger.info("category_deleted", category_id=str(category_id), name=name)

    def ensure_deletable(self, category: Category) -> None:
        if category.question_count > 0:
            raise ConflictError(
                f"Cannot delete category '{category.name}' because it contains "
                f"{category.question_count} question(s)"
            )

    def increment_question_count(self, category_id: uuid.UUID) -> None:
        category = self.get_category_entity(category_id)
        self.session.exec(
            update(Category)
            .where(Category.id == category_id)
            .values(question_count=Category.question_count + 1)
        )
        self.session.expire(category, ["question_count"])

    def decrement_question_count(self, category_id: uuid.UUID) -> None:
        category = self.get_category_entity(category_id)
        if category.question_count <= 0:
            logger.warning("question_count_floor_hit", category_id=str(category_id))
        # Floors at zero; the CASE keeps concurrent decrements from going negative.
        self.session.exec(
            update(Category)
            .where(Category.id == category_id)
            .values(
                question_count=case(
                    (Category.question_count > 0, Category.question_count - 1),
                    else_=0,
                )
            )
        )
        self.session.expire(category, ["question_count"])

    def recount_question_counts(self) -> List[CategoryRead]:
        """Rewrite every counter from the questions table.

        Returns the categories whose stored counter had drifted, with their
        corrected values.
        """
        repaired: List[Category] = []
        for category, actual in self.find_drifted():
            logger.warning(
                "question_count_drift_repaired",
                category_id=str(category.id),
                stored=category.question_count,
                actual=actual,
            )
            category.question_count = actual
            self.session.add(category)
            repaired.append(category)
        self.session.commit()
        return [CategoryRead.model_validate(category) for category in repaired]

    def find_drifted(self) -> List[Tuple[Category, int]]:
        """Categories whose stored counter differs from the live count, by name."""
        live_counts = dict(
            self.session.exec(
                select(Question.category_id, func.count(Question.id)).group_by(Question.category_id)
            ).all()
        )
        drifted = []
        for category in self.session.exec(select(Category).order_by(Category.name)).all():
            actual = live_counts.get(category.id, 0)
            if category.question_count != actual:
                drifted.append((category, actual))
        return drifted

    def get_category_entity(self, category_id: uuid.UUID) -> Category:
        category = self.session.get(Category, category_id)
        if not category:
            raise NotFoundError("Category", "id", category_id)
        return category

    def _commit_named(self, name: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateResourceError("Category", "name", name) from exc

    def _name_taken(self, name: str) -> bool:
        statement = select(Category.id).where(Category.name == name)
        return self.session.exec(statement).first() is not None

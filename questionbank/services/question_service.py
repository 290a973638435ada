from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Iterator, List

from pydantic.alias_generators import to_snake
from sqlalchemy import func
from sqlmodel import Session, select

from questionbank.core.errors import NotFoundError, ValidationError
from questionbank.core.logging import get_logger
from questionbank.db.schemas import Category, Question, QuestionTag, Tag
from questionbank.models.difficulty import Difficulty
from questionbank.models.page import Page, PageRequest
from questionbank.models.question import QuestionCreate, QuestionRead, QuestionUpdate
from questionbank.services.category_service import CategoryService
from questionbank.services.tag_service import TagService

logger = get_logger(__name__)

RANDOM_SAMPLE_MIN = 1
RANDOM_SAMPLE_MAX = 100

SORTABLE_COLUMNS = {
    "created_at": Question.created_at,
    "question": Question.question,
    "difficulty": Question.difficulty,
}


class QuestionService:
    def __init__(self, session: Session):
        self.session = session
        self.categories = CategoryService(session)
        self.tags = TagService(session)

    # Reads
    def list_questions(self, page_request: PageRequest) -> Page[QuestionRead]:
        return self._paginate(select(Question), page_request)

    def list_by_category(self, category_id: uuid.UUID, page_request: PageRequest) -> Page[QuestionRead]:
        self.categories.get_category_entity(category_id)
        statement = select(Question).where(Question.category_id == category_id)
        return self._paginate(statement, page_request)

    def list_by_difficulty(self, difficulty: Difficulty, page_request: PageRequest) -> Page[QuestionRead]:
        statement = select(Question).where(Question.difficulty == difficulty)
        return self._paginate(statement, page_request)

    def list_by_category_and_difficulty(
        self, category_id: uuid.UUID, difficulty: Difficulty, page_request: PageRequest
    ) -> Page[QuestionRead]:
        self.categories.get_category_entity(category_id)
        statement = (
            select(Question)
            .where(Question.category_id == category_id)
            .where(Question.difficulty == difficulty)
        )
        return self._paginate(statement, page_request)

    def list_by_tag(self, tag_id: uuid.UUID, page_request: PageRequest) -> Page[QuestionRead]:
        self.tags.get_tag_entity(tag_id)
        statement = (
            select(Question)
            .join(QuestionTag, QuestionTag.question_id == Question.id)
            .where(QuestionTag.tag_id == tag_id)
        )
        return self._paginate(statement, page_request)

    def sample_random(
        self, category_id: uuid.UUID, difficulty: Difficulty, limit: int
    ) -> List[QuestionRead]:
        """Uniform random sample of up to ``limit`` matching questions.

        Selection happens in the database (``ORDER BY random()``); fewer
        matches than ``limit`` simply returns them all.
        """
        self.categories.get_category_entity(category_id)
        if limit < RANDOM_SAMPLE_MIN or limit > RANDOM_SAMPLE_MAX:
            raise ValidationError(
                f"Limit must be between {RANDOM_SAMPLE_MIN} and {RANDOM_SAMPLE_MAX}"
            )
        statement = (
            select(Question)
            .where(Question.category_id == category_id)
            .where(Question.difficulty == difficulty)
            .order_by(func.random())
            .limit(limit)
        )
        return self._to_read_models(self.session.exec(statement).all())

    def get_question(self, question_id: uuid.UUID) -> QuestionRead:
        return self._to_read_models([self._get_question_entity(question_id)])[0]

    def count_all(self) -> int:
        return self.session.exec(select(func.count()).select_from(Question)).one()

    def count_by_category(self, category_id: uuid.UUID) -> int:
        statement = select(func.count()).select_from(Question).where(Question.category_id == category_id)
        return self.session.exec(statement).one()

    def count_by_category_and_difficulty(self, category_id: uuid.UUID, difficulty: Difficulty) -> int:
        statement = (
            select(func.count())
            .select_from(Question)
            .where(Question.category_id == category_id)
            .where(Question.difficulty == difficulty)
        )
        return self.session.exec(statement).one()

    # Writes
    def create_question(self, data: QuestionCreate) -> QuestionRead:
        with self._atomic():
            category = self.categories.get_category_entity(data.category_id)
            tags = self.tags.resolve_tags(data.tags)
            question = Question(
                question=data.question,
                answer=data.answer,
                code_snippet=data.code_snippet,
                difficulty=data.difficulty,
                category_id=category.id,
            )
            self.session.add(question)
            self.session.flush()
            self._sync_tags(question.id, tags)
            self.categories.increment_question_count(category.id)
        self.session.refresh(question)
        logger.info(
            "question_created",
            question_id=str(question.id),
            category_id=str(question.category_id),
            tags=len(tags),
        )
        return self.get_question(question.id)

    def update_question(self, question_id: uuid.UUID, data: QuestionUpdate) -> QuestionRead:
        with self._atomic():
            question = self._get_question_entity(question_id)
            old_category_id = question.category_id
            if data.category_id != old_category_id:
                new_category = self.categories.get_category_entity(data.category_id)
                question.category_id = new_category.id
                self.categories.decrement_question_count(old_category_id)
                self.categories.increment_question_count(new_category.id)
                logger.info(
                    "question_moved",
                    question_id=str(question_id),
                    from_category_id=str(old_category_id),
                    to_category_id=str(new_category.id),
                )
            question.question = data.question
            question.answer = data.answer
            question.code_snippet = data.code_snippet
            question.difficulty = data.difficulty
            self.session.add(question)
            tags = self.tags.resolve_tags(data.tags)
            self._sync_tags(question.id, tags)
        self.session.refresh(question)
        return self.get_question(question.id)

    def delete_question(self, question_id: uuid.UUID) -> None:
        with self._atomic():
            question = self._get_question_entity(question_id)
            category_id = question.category_id
            self._sync_tags(question.id, [])
            self.session.flush()
            self.session.delete(question)
            self.session.flush()
            self.categories.decrement_question_count(category_id)
        logger.info("question_deleted", question_id=str(question_id), category_id=str(category_id))

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        """Commit everything done in the block, or roll all of it back."""
        try:
            yield
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _get_question_entity(self, question_id: uuid.UUID) -> Question:
        question = self.session.get(Question, question_id)
        if not question:
            raise NotFoundError("Question", "id", question_id)
        return question

    def _sync_tags(self, question_id: uuid.UUID, tags: List[Tag]) -> None:
        wanted = {tag.id for tag in tags}
        existing = self.session.exec(
            select(QuestionTag).where(QuestionTag.question_id == question_id)
        ).all()
        existing_ids = {link.tag_id for link in existing}
        for link in existing:
            if link.tag_id not in wanted:
                self.session.delete(link)
        for tag_id in wanted - existing_ids:
            self.session.add(QuestionTag(question_id=question_id, tag_id=tag_id))

    def _paginate(self, statement, page_request: PageRequest) -> Page[QuestionRead]:
        total = self.session.exec(select(func.count()).select_from(statement.subquery())).one()
        rows = self.session.exec(
            statement.order_by(*self._order_by(page_request))
            .offset(page_request.offset)
            .limit(page_request.size)
        ).all()
        return Page[QuestionRead].build(self._to_read_models(rows), page_request, total)

    def _order_by(self, page_request: PageRequest) -> list:
        key = to_snake(page_request.sort_by)
        column = SORTABLE_COLUMNS.get(key)
        if column is None:
            valid = ", ".join(sorted(SORTABLE_COLUMNS))
            raise ValidationError(f"Invalid sort field: {page_request.sort_by}. Valid values are: {valid}")
        if page_request.descending:
            return [column.desc(), Question.id.desc()]
        return [column.asc(), Question.id.asc()]

    def _to_read_models(self, questions: List[Question]) -> List[QuestionRead]:
        if not questions:
            return []
        question_ids = [question.id for question in questions]
        category_ids = list({question.category_id for question in questions})
        categories = {
            category.id: category
            for category in self.session.exec(
                select(Category).where(Category.id.in_(category_ids))
            ).all()
        }
        tag_map: dict[uuid.UUID, list[str]] = {question_id: [] for question_id in question_ids}
        tag_rows = self.session.exec(
            select(QuestionTag.question_id, Tag.name)
            .join(Tag, Tag.id == QuestionTag.tag_id)
            .where(QuestionTag.question_id.in_(question_ids))
            .order_by(Tag.name)
        ).all()
        for question_id, tag_name in tag_rows:
            tag_map.setdefault(question_id, []).append(tag_name)
        reads = []
        for question in questions:
            data = question.model_dump()
            category = categories.get(question.category_id)
            data["category_name"] = category.name if category else None
            data["category_color"] = category.color if category else None
            data["tags"] = tag_map.get(question.id, [])
            reads.append(QuestionRead(**data))
        return reads

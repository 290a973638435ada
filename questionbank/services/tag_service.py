from __future__ import annotations

import uuid
from typing import Iterable, List, Optional

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from questionbank.core.errors import DuplicateResourceError, NotFoundError, ValidationError
from questionbank.core.logging import get_logger
from questionbank.db.schemas import QuestionTag, Tag
from questionbank.models.tag import TAG_NAME_MAX_LENGTH, TagCreate, TagRead, TagUpdate

logger = get_logger(__name__)


def normalize_tag_name(name: str) -> str:
    return name.strip().lower()


class TagService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_tags(self) -> List[TagRead]:
        tags = self.session.exec(select(Tag).order_by(Tag.name)).all()
        return [TagRead.model_validate(tag) for tag in tags]

    def get_tag(self, tag_id: uuid.UUID) -> TagRead:
        return TagRead.model_validate(self.get_tag_entity(tag_id))

    def get_tag_by_name(self, name: str) -> TagRead:
        tag = self._find_by_name(normalize_tag_name(name))
        if not tag:
            raise NotFoundError("Tag", "name", name)
        return TagRead.model_validate(tag)

    def create_tag(self, data: TagCreate) -> TagRead:
        normalized = normalize_tag_name(data.name)
        if self._find_by_name(normalized):
            raise DuplicateResourceError("Tag", "name", normalized)
        tag = Tag(name=normalized)
        self.session.add(tag)
        self._commit_named(normalized)
        self.session.refresh(tag)
        logger.info("tag_created", tag_id=str(tag.id), name=tag.name)
        return TagRead.model_validate(tag)

    def update_tag(self, tag_id: uuid.UUID, data: TagUpdate) -> TagRead:
        tag = self.get_tag_entity(tag_id)
        normalized = normalize_tag_name(data.name)
        if tag.name != normalized and self._find_by_name(normalized):
            raise DuplicateResourceError("Tag", "name", normalized)
        tag.name = normalized
        self.session.add(tag)
        self._commit_named(normalized)
        self.session.refresh(tag)
        return TagRead.model_validate(tag)

    def delete_tag(self, tag_id: uuid.UUID) -> None:
        tag = self.get_tag_entity(tag_id)
        name = tag.name
        self.session.exec(delete(QuestionTag).where(QuestionTag.tag_id == tag_id))
        self.session.delete(tag)
        self.session.commit()
        logger.info("tag_deleted", tag_id=str(tag_id), name=name)

    def get_or_create(self, name: str) -> Tag:
        """Return the tag called ``name`` (case-insensitively), creating it if needed.

        The insert is flushed right away inside a SAVEPOINT so that a
        concurrent creator of the same name surfaces here, not at the
        caller's commit. On a unique violation the SAVEPOINT is rolled back
        and the winner's row is fetched instead.
        """
        normalized = normalize_tag_name(name)
        if not normalized or len(normalized) > TAG_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Tag name must be between 1 and {TAG_NAME_MAX_LENGTH} characters: '{name}'"
            )
        existing = self._find_by_name(normalized)
        if existing:
            return existing
        tag = Tag(name=normalized)
        try:
            with self.session.begin_nested():
                self.session.add(tag)
        except IntegrityError as exc:
            winner = self._find_by_name(normalized)
            if winner is None:
                raise DuplicateResourceError("Tag", "name", normalized) from exc
            logger.info("tag_create_race_recovered", name=normalized, tag_id=str(winner.id))
            return winner
        logger.info("tag_created", tag_id=str(tag.id), name=normalized)
        return tag

    def resolve_tags(self, names: Optional[Iterable[str]]) -> List[Tag]:
        """Map raw names to tags, skipping blanks and collapsing duplicates."""
        resolved: dict[uuid.UUID, Tag] = {}
        for name in names or []:
            if name is None or not name.strip():
                continue
            tag = self.get_or_create(name)
            resolved.setdefault(tag.id, tag)
        return list(resolved.values())

    def get_tag_entity(self, tag_id: uuid.UUID) -> Tag:
        tag = self.session.get(Tag, tag_id)
        if not tag:
            raise NotFoundError("Tag", "id", tag_id)
        return tag

    def _commit_named(self, normalized: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateResourceError("Tag", "name", normalized) from exc

    def _find_by_name(self, normalized: str) -> Optional[Tag]:
        statement = select(Tag).where(func.lower(Tag.name) == normalized)
        return self.session.exec(statement).first()

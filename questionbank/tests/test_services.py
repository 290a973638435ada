import pytest
from sqlalchemy import update
from sqlmodel import Session, select

from questionbank.core.errors import ValidationError
from questionbank.db.schemas import Category, Tag
from questionbank.models.category import CategoryCreate
from questionbank.models.difficulty import Difficulty, parse_difficulty
from questionbank.models.question import QuestionCreate
from questionbank.services.category_service import CategoryService
from questionbank.services.question_service import QuestionService
from questionbank.services.tag_service import TagService


def make_category(session: Session, name: str = "Java") -> Category:
    created = CategoryService(session).create_category(CategoryCreate(name=name, color="#000"))
    return session.get(Category, created.id)


def test_get_or_create_is_idempotent(session: Session) -> None:
    service = TagService(session)
    first = service.get_or_create("  Records ")
    second = service.get_or_create("RECORDS")
    session.commit()
    assert first.id == second.id
    assert first.name == "records"
    assert len(session.exec(select(Tag)).all()) == 1


def test_get_or_create_rejects_blank_and_long_names(session: Session) -> None:
    service = TagService(session)
    with pytest.raises(ValidationError):
        service.get_or_create("   ")
    with pytest.raises(ValidationError):
        service.get_or_create("y" * 51)


def test_get_or_create_recovers_when_insert_loses(session: Session, monkeypatch) -> None:
    service = TagService(session)
    session.add(Tag(name="optional"))
    session.commit()

    real_find = service._find_by_name
    calls = []

    def miss_first_lookup(normalized):
        calls.append(normalized)
        if len(calls) == 1:
            return None
        return real_find(normalized)

    monkeypatch.setattr(service, "_find_by_name", miss_first_lookup)
    tag = service.get_or_create("Optional")
    session.commit()
    assert tag.name == "optional"
    assert len(calls) == 2
    assert len(session.exec(select(Tag)).all()) == 1


def test_resolve_tags_skips_blanks_and_duplicates(session: Session) -> None:
    tags = TagService(session).resolve_tags(["x", " X", "", None, "y"])
    assert sorted(tag.name for tag in tags) == ["x", "y"]


def test_decrement_never_goes_below_zero(session: Session) -> None:
    category = make_category(session)
    service = CategoryService(session)
    service.decrement_question_count(category.id)
    session.commit()
    session.refresh(category)
    assert category.question_count == 0


def test_increment_and_decrement(session: Session) -> None:
    category = make_category(session)
    service = CategoryService(session)
    service.increment_question_count(category.id)
    service.increment_question_count(category.id)
    service.decrement_question_count(category.id)
    session.commit()
    assert service.get_category(category.id).question_count == 1


def test_recount_repairs_drifted_counters(session: Session) -> None:
    java = make_category(session, "Java")
    go = make_category(session, "Go")
    questions = QuestionService(session)
    for text in ("one", "two"):
        questions.create_question(
            QuestionCreate(
                question=text, answer="a", difficulty=Difficulty.BEGINNER, category_id=java.id
            )
        )
    session.exec(update(Category).where(Category.id == java.id).values(question_count=7))
    session.exec(update(Category).where(Category.id == go.id).values(question_count=3))
    session.commit()

    drifted = CategoryService(session).find_drifted()
    assert [(category.name, actual) for category, actual in drifted] == [("Go", 0), ("Java", 2)]

    repaired = CategoryService(session).recount_question_counts()
    assert {category.name: category.question_count for category in repaired} == {"Java": 2, "Go": 0}

    assert CategoryService(session).recount_question_counts() == []


def test_parse_difficulty() -> None:
    assert parse_difficulty(" intermediate ") is Difficulty.INTERMEDIATE
    assert Difficulty.SENIOR.display_name == "Senior"
    with pytest.raises(ValidationError, match="cannot be null"):
        parse_difficulty(None)
    with pytest.raises(ValidationError, match="Valid values are: BEGINNER, INTERMEDIATE, SENIOR"):
        parse_difficulty("easy")

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from questionbank.api.dependencies import get_page_request, get_session
from questionbank.config.settings import Settings, get_settings
from questionbank.models.difficulty import parse_difficulty
from questionbank.models.page import Page, PageRequest
from questionbank.models.question import QuestionCreate, QuestionRead, QuestionUpdate
from questionbank.services.question_service import QuestionService


router = APIRouter(prefix="/questions", tags=["questions"])


def get_question_service(session=Depends(get_session)) -> QuestionService:
    return QuestionService(session)


@router.get("", response_model=Page[QuestionRead])
def list_questions(
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    difficulty: Optional[str] = None,
    tag_id: Optional[uuid.UUID] = Query(None, alias="tagId"),
    page_request: PageRequest = Depends(get_page_request),
    service: QuestionService = Depends(get_question_service),
) -> Page[QuestionRead]:
    if category_id is not None and difficulty is not None:
        return service.list_by_category_and_difficulty(
            category_id, parse_difficulty(difficulty), page_request
        )
    if category_id is not None:
        return service.list_by_category(category_id, page_request)
    if difficulty is not None:
        return service.list_by_difficulty(parse_difficulty(difficulty), page_request)
    if tag_id is not None:
        return service.list_by_tag(tag_id, page_request)
    return service.list_questions(page_request)


@router.get("/random", response_model=List[QuestionRead])
def sample_random_questions(
    category_id: uuid.UUID = Query(..., alias="categoryId"),
    difficulty: str = Query(...),
    limit: Optional[int] = None,
    settings: Settings = Depends(get_settings),
    service: QuestionService = Depends(get_question_service),
) -> List[QuestionRead]:
    if limit is None:
        limit = settings.random_default_limit
    return service.sample_random(category_id, parse_difficulty(difficulty), limit)


@router.get("/count", response_model=int)
def count_questions(
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    difficulty: Optional[str] = None,
    service: QuestionService = Depends(get_question_service),
) -> int:
    if category_id is not None and difficulty is not None:
        return service.count_by_category_and_difficulty(category_id, parse_difficulty(difficulty))
    if category_id is not None:
        return service.count_by_category(category_id)
    return service.count_all()


@router.get("/category/{category_id}", response_model=Page[QuestionRead])
def list_questions_by_category(
    category_id: uuid.UUID,
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    settings: Settings = Depends(get_settings),
    service: QuestionService = Depends(get_question_service),
) -> Page[QuestionRead]:
    page_request = get_page_request(page=page, size=size, sort_by="createdAt", sort_dir="DESC", settings=settings)
    return service.list_by_category(category_id, page_request)


@router.get("/category/{category_id}/difficulty/{difficulty}", response_model=Page[QuestionRead])
def list_questions_by_category_and_difficulty(
    category_id: uuid.UUID,
    difficulty: str,
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    settings: Settings = Depends(get_settings),
    service: QuestionService = Depends(get_question_service),
) -> Page[QuestionRead]:
    level = parse_difficulty(difficulty)
    page_request = get_page_request(page=page, size=size, sort_by="createdAt", sort_dir="DESC", settings=settings)
    return service.list_by_category_and_difficulty(category_id, level, page_request)


@router.post("", response_model=QuestionRead, status_code=status.HTTP_201_CREATED)
def create_question(
    payload: QuestionCreate, service: QuestionService = Depends(get_question_service)
) -> QuestionRead:
    return service.create_question(payload)


@router.get("/{question_id}", response_model=QuestionRead)
def get_question(
    question_id: uuid.UUID, service: QuestionService = Depends(get_question_service)
) -> QuestionRead:
    return service.get_question(question_id)


@router.put("/{question_id}", response_model=QuestionRead)
def update_question(
    question_id: uuid.UUID,
    payload: QuestionUpdate,
    service: QuestionService = Depends(get_question_service),
) -> QuestionRead:
    return service.update_question(question_id, payload)


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: uuid.UUID, service: QuestionService = Depends(get_question_service)
) -> None:
    service.delete_question(question_id)

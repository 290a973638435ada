from collections.abc import Generator

from fastapi import Depends, Query
from sqlmodel import Session

from questionbank.config.settings import Settings, get_settings
from questionbank.core.errors import ValidationError
from questionbank.db.base import get_engine
from questionbank.models.page import PageRequest


def get_session() -> Generator[Session, None, None]:
    """Provide a database session for request scope."""
    engine = get_engine()
    with Session(engine) as session:
        yield session


def get_page_request(
    page: int = Query(0, ge=0),
    size: int | None = Query(None, ge=1),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_dir: str = Query("DESC", alias="sortDir"),
    settings: Settings = Depends(get_settings),
) -> PageRequest:
    size = size or settings.default_page_size
    if size > settings.max_page_size:
        raise ValidationError(f"Page size must be between 1 and {settings.max_page_size}")
    return PageRequest(
        page=page,
        size=size,
        sort_by=sort_by,
        descending=sort_dir.strip().upper() != "ASC",
    )

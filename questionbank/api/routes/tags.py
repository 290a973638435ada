import uuid
from typing import List

from fastapi import APIRouter, Depends, status

from questionbank.api.dependencies import get_session
from questionbank.models.tag import TagCreate, TagRead, TagUpdate
from questionbank.services.tag_service import TagService


def get_tag_service(db=Depends(get_session)) -> TagService:
    return TagService(db)


router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=List[TagRead])
def list_tags(service: TagService = Depends(get_tag_service)) -> List[TagRead]:
    return service.list_tags()


@router.get("/name/{name}", response_model=TagRead)
def get_tag_by_name(name: str, service: TagService = Depends(get_tag_service)) -> TagRead:
    return service.get_tag_by_name(name)


@router.get("/{tag_id}", response_model=TagRead)
def get_tag(tag_id: uuid.UUID, service: TagService = Depends(get_tag_service)) -> TagRead:
    return service.get_tag(tag_id)


@router.post("", response_model=TagRead, status_code=status.HTTP_201_CREATED)
def create_tag(payload: TagCreate, service: TagService = Depends(get_tag_service)) -> TagRead:
    return service.create_tag(payload)


@router.put("/{tag_id}", response_model=TagRead)
def update_tag(
    tag_id: uuid.UUID, payload: TagUpdate, service: TagService = Depends(get_tag_service)
) -> TagRead:
    return service.update_tag(tag_id, payload)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: uuid.UUID, service: TagService = Depends(get_tag_service)) -> None:
    service.delete_tag(tag_id)


__all__ = ["router"]

import uuid
from typing import List

from fastapi import APIRouter, Depends, status

from questionbank.api.dependencies import get_session
from questionbank.models.category import CategoryCreate, CategoryRead, CategoryUpdate
from questionbank.services.category_service import CategoryService


def get_category_service(db=Depends(get_session)) -> CategoryService:
    return CategoryService(db)


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(service: CategoryService = Depends(get_category_service)) -> List[CategoryRead]:
    return service.list_categories()


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID, service: CategoryService = Depends(get_category_service)
) -> CategoryRead:
    return service.get_category(category_id)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate, service: CategoryService = Depends(get_category_service)
) -> CategoryRead:
    return service.create_category(payload)


@router.put("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
) -> CategoryRead:
    return service.update_category(category_id, payload)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: uuid.UUID, service: CategoryService = Depends(get_category_service)
) -> None:
    service.delete_category(category_id)


__all__ = ["router"]

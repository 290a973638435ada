from fastapi import APIRouter

from . import categories, health, questions, tags

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(categories.router)
api_router.include_router(tags.router)
api_router.include_router(questions.router)

__all__ = ["api_router"]

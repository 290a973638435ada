from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from questionbank.api.routes import api_router
from questionbank.config.settings import get_settings
from questionbank.core.errors import register_exception_handlers
from questionbank.core.logging import bind_request_context, get_logger, setup_logging
from questionbank.db.base import init_db

load_dotenv()
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info("starting_application", app_name=settings.app_name, version=settings.version)
    init_db()
    yield
    logger.info("shutting_down_application")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )
    app.middleware("http")(bind_request_context)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run("questionbank.main:app", reload=get_settings().debug)


if __name__ == "__main__":
    main()

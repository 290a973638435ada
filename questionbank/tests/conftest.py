from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from questionbank.api.dependencies import get_session
from questionbank.db.base import configure_sqlite
from questionbank.db.schemas import Category, Question, QuestionTag, Tag  # noqa: F401
from questionbank.main import app


TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    def override_get_session() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = override_get_session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def create_category(client: TestClient, name: str = "Java", color: str = "#f89820", **extra) -> dict:
    response = client.post("/api/categories", json={"name": name, "color": color, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def create_question(client: TestClient, category_id: str, **overrides) -> dict:
    payload = {
        "question": "What does the JVM do?",
        "answer": "Runs bytecode.",
        "difficulty": "BEGINNER",
        "categoryId": category_id,
        "tags": [],
    }
    payload.update(overrides)
    response = client.post("/api/questions", json=payload)
    assert response.status_code == 201, response.text
    return response.json()

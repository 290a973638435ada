from fastapi.testclient import TestClient

from questionbank.core.errors import INTERNAL_ERROR_MESSAGE
from questionbank.main import app
from questionbank.services.question_service import QuestionService


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "UP"
    assert data["version"] == "0.0.1"
    assert "is running" in data["message"]
    assert "timestamp" in data


def test_ping(client: TestClient) -> None:
    response = client.get("/api/health/ping")
    assert response.status_code == 200
    assert response.text == "pong"


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Not Found"
    assert body["path"] == "/api/nowhere"


def test_unexpected_error_hides_details(client: TestClient, monkeypatch) -> None:
    def explode(self) -> int:
        raise RuntimeError("database exploded")

    monkeypatch.setattr(QuestionService, "count_all", explode)
    response = TestClient(app, raise_server_exceptions=False).get("/api/questions/count")
    assert response.status_code == 500
    body = response.json()
    assert body["status"] == 500
    assert body["error"] == "Internal Server Error"
    assert body["message"] == INTERNAL_ERROR_MESSAGE
    assert "exploded" not in response.text


def test_request_id_is_generated_and_returned(client: TestClient) -> None:
    response = client.get("/api/health/ping")
    assert response.headers["X-Request-ID"]


def test_incoming_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/api/categories/not-a-uuid", headers={"X-Request-ID": "trace-42"})
    assert response.status_code == 400
    assert response.headers["X-Request-ID"] == "trace-42"

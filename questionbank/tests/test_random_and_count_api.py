import uuid

from fastapi.testclient import TestClient

from conftest import create_category, create_question


def seed(client: TestClient) -> tuple[dict, dict]:
    java = create_category(client, name="Java")
    go = create_category(client, name="Go")
    for index in range(5):
        create_question(client, java["id"], question=f"java-easy-{index}", difficulty="BEGINNER")
    create_question(client, java["id"], question="java-hard", difficulty="SENIOR")
    create_question(client, go["id"], question="go-easy", difficulty="BEGINNER")
    return java, go


def test_random_returns_all_matches_when_fewer_than_limit(client: TestClient) -> None:
    java, _ = seed(client)
    response = client.get(
        "/api/questions/random",
        params={"categoryId": java["id"], "difficulty": "BEGINNER", "limit": 10},
    )
    assert response.status_code == 200
    items = response.json()
    assert len(items) == 5
    assert len({item["id"] for item in items}) == 5
    assert all(item["categoryId"] == java["id"] for item in items)
    assert all(item["difficulty"] == "BEGINNER" for item in items)


def test_random_respects_limit(client: TestClient) -> None:
    java, _ = seed(client)
    items = client.get(
        "/api/questions/random",
        params={"categoryId": java["id"], "difficulty": "beginner", "limit": 3},
    ).json()
    assert len(items) == 3
    assert len({item["id"] for item in items}) == 3


def test_random_default_limit(client: TestClient) -> None:
    java, _ = seed(client)
    items = client.get(
        "/api/questions/random", params={"categoryId": java["id"], "difficulty": "BEGINNER"}
    ).json()
    assert len(items) == 5


def test_random_with_no_matches(client: TestClient) -> None:
    _, go = seed(client)
    response = client.get(
        "/api/questions/random", params={"categoryId": go["id"], "difficulty": "SENIOR", "limit": 5}
    )
    assert response.status_code == 200
    assert response.json() == []


def test_random_limit_out_of_range(client: TestClient) -> None:
    java, _ = seed(client)
    for limit in (0, 101):
        response = client.get(
            "/api/questions/random",
            params={"categoryId": java["id"], "difficulty": "BEGINNER", "limit": limit},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Limit must be between 1 and 100"


def test_random_unknown_category(client: TestClient) -> None:
    response = client.get(
        "/api/questions/random",
        params={"categoryId": str(uuid.uuid4()), "difficulty": "BEGINNER", "limit": 5},
    )
    assert response.status_code == 404


def test_random_requires_difficulty(client: TestClient) -> None:
    java, _ = seed(client)
    response = client.get("/api/questions/random", params={"categoryId": java["id"]})
    assert response.status_code == 400


def test_count_questions(client: TestClient) -> None:
    java, go = seed(client)
    assert client.get("/api/questions/count").json() == 7
    assert client.get("/api/questions/count", params={"categoryId": java["id"]}).json() == 6
    assert client.get("/api/questions/count", params={"categoryId": go["id"]}).json() == 1
    assert (
        client.get(
            "/api/questions/count", params={"categoryId": java["id"], "difficulty": "SENIOR"}
        ).json()
        == 1
    )


def test_count_with_difficulty_alone_counts_everything(client: TestClient) -> None:
    seed(client)
    assert client.get("/api/questions/count", params={"difficulty": "SENIOR"}).json() == 7


def test_count_for_unknown_category_is_zero(client: TestClient) -> None:
    seed(client)
    assert client.get("/api/questions/count", params={"categoryId": str(uuid.uuid4())}).json() == 0


def test_category_counter_matches_question_count(client: TestClient) -> None:
    java, go = seed(client)
    for category in (java, go):
        stored = client.get(f"/api/categories/{category['id']}").json()["questionCount"]
        counted = client.get("/api/questions/count", params={"categoryId": category["id"]}).json()
        assert stored == counted

"""
HTTP surface, with the database dependency pointed at in-memory SQLite.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from forum.config import Configuration, get_config
from forum.database import get_db
from forum.main import app


@pytest.fixture
def site_config():
    return Configuration({"Vanilla": {"Comment": {"SpamCount": 3}}})


@pytest.fixture
def client(engine, site_config):
    TestingSession = sessionmaker(bind=engine, autoflush=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_config] = lambda: site_config
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def sign_in(client, name="todd"):
    response = client.post("/sessions", json={"name": name})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_posting_requires_a_session(client):
    response = client.post("/discussions", json={"name": "Hi", "body": "there"})
    assert response.status_code == 401

    response = client.post(
        "/discussions", json={"name": "Hi", "body": "there"}, headers={"Authorization": "Bearer nope"}
    )
    assert response.status_code == 401


def test_same_name_signs_into_same_account(client):
    first = client.post("/sessions", json={"name": "todd"}).json()
    second = client.post("/sessions", json={"name": "todd"}).json()
    assert first["user_id"] == second["user_id"]
    assert first["token"] != second["token"]


def test_blank_name_is_rejected(client):
    assert client.post("/sessions", json={"name": "   "}).status_code == 422


def test_name_is_trimmed(client):
    first = client.post("/sessions", json={"name": "  todd "}).json()
    second = client.post("/sessions", json={"name": "todd"}).json()
    assert first["user_id"] == second["user_id"]


def test_discussion_spam_block_returns_422(client):
    headers = sign_in(client)
    for i in range(2):
        response = client.post("/discussions", json={"name": f"Topic {i}", "body": "text"}, headers=headers)
        assert response.status_code == 201

    response = client.post("/discussions", json={"name": "Topic 3", "body": "text"}, headers=headers)
    assert response.status_code == 422
    [message] = response.json()["detail"]["Body"]
    assert message.startswith("You have posted 2 times within 30 seconds.")


def test_comment_limit_follows_site_config(client):
    headers = sign_in(client)
    discussion = client.post("/discussions", json={"name": "Topic", "body": "text"}, headers=headers).json()
    url = f"/discussions/{discussion['id']}/comments"

    for i in range(3):
        assert client.post(url, json={"body": f"reply {i}"}, headers=headers).status_code == 201
    response = client.post(url, json={"body": "one too many"}, headers=headers)
    assert response.status_code == 422
    assert "posted 3 times" in response.json()["detail"]["Body"][0]

    detail = client.get(f"/discussions/{discussion['id']}").json()
    assert detail["count_comments"] == 3
    assert [c["body"] for c in detail["comments"]] == ["reply 0", "reply 1", "reply 2"]


def test_spam_state_is_per_user(client):
    todd = sign_in(client, "todd")
    mark = sign_in(client, "mark")
    for i in range(2):
        client.post("/discussions", json={"name": f"T{i}", "body": "x"}, headers=todd)

    assert client.post("/discussions", json={"name": "T", "body": "x"}, headers=todd).status_code == 422
    assert client.post("/discussions", json={"name": "M", "body": "x"}, headers=mark).status_code == 201


def test_comment_on_missing_discussion_is_404(client):
    headers = sign_in(client)
    response = client.post("/discussions/999/comments", json={"body": "hello"}, headers=headers)
    assert response.status_code == 404
    assert client.get("/discussions/999").status_code == 404


def test_signing_out_revokes_the_token(client):
    headers = sign_in(client)
    assert client.delete("/sessions", headers=headers).status_code == 204
    assert client.delete("/sessions", headers=headers).status_code == 401
    response = client.post("/discussions", json={"name": "Hi", "body": "there"}, headers=headers)
    assert response.status_code == 401

import pytest
from fastapi.testclient import TestClient

from alice_bridge.dialog import FAREWELL, INVALID_REQUEST
from alice_bridge.errors import UpstreamError
from alice_bridge.main import create_app
from tests.fakes import FakeLLMClient


def alice_body(text, session_id="session-1", new=False):
    return {
        "meta": {"locale": "ru-RU"},
        "session": {"session_id": session_id, "new": new, "message_id": 0},
        "request": {"original_utterance": text, "command": text.lower(), "type": "SimpleUtterance"},
        "version": "1.0",
    }


@pytest.fixture
def client(settings, fake_client):
    app = create_app(settings, llm_client=fake_client)
    with TestClient(app) as test_client:
        yield test_client


def test_alice_reply(client):
    response = client.post("/alice", json=alice_body("Расскажи анекдот"))

    assert response.status_code == 200
    assert response.json() == {
        "response": {"text": "Тестовый ответ.", "end_session": False},
        "version": "1.0",
    }


def test_alice_closing(client, fake_client):
    response = client.post("/alice", json=alice_body("Пока"))

    assert response.json()["response"] == {"text": FAREWELL, "end_session": True}
    assert fake_client.calls == []


@pytest.mark.parametrize(
    "body",
    [{}, {"session": {"session_id": "x"}}, {"request": {"original_utterance": "hi"}}, []],
)
def test_alice_malformed_body(client, body):
    response = client.post("/alice", json=body)

    assert response.status_code == 200
    assert response.json()["response"] == {"text": INVALID_REQUEST, "end_session": False}


def test_alice_non_json_body(client):
    response = client.post("/alice", content=b"not json", headers={"content-type": "application/json"})

    assert response.status_code == 200
    assert response.json()["response"]["text"] == INVALID_REQUEST


def test_alice_null_utterance_greets(client, settings):
    body = alice_body("", new=True)
    body["request"]["original_utterance"] = None

    response = client.post("/alice", json=body)

    assert response.json()["response"]["text"] == settings.profile.greeting


def test_alice_upstream_failure(settings):
    app = create_app(settings, llm_client=FakeLLMClient(error=UpstreamError("502")))
    with TestClient(app) as client:
        response = client.post("/alice", json=alice_body("вопрос"))

    assert response.status_code == 200
    assert response.json()["response"] == {
        "text": settings.profile.apology,
        "end_session": False,
    }


def test_health(client):
    client.post("/alice", json=alice_body("вопрос", session_id="a"))
    client.post("/alice", json=alice_body("вопрос", session_id="b"))

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["sessions"] == 2
    assert data["model"] == "deepseek-chat"
    assert data["provider"] == "deepseek"
    assert data["memory"]["max_rss_kb"] > 0


def test_shutdown_closes_upstream_client(settings):
    fake = FakeLLMClient()
    with TestClient(create_app(settings, llm_client=fake)):
        pass
    assert fake.closed

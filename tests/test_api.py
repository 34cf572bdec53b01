from unittest.mock import patch

from fastapi.testclient import TestClient

from app.main import app
from config.settings import get_settings
from conftest import FakeModel


def test_health(http):
    r = http.get("/health")
    assert r.status_code == 200
    assert "status" in r.json()


def test_health_without_credential(http, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY")
    get_settings.cache_clear()
    assert http.get("/health").status_code == 200


def test_info(http):
    body = http.get("/api/info").json()
    assert body["name"] == "Thunder GPT"
    assert body["version"] == "1.0.0"
    assert set(body) == {"name", "version", "description", "models", "features"}


def test_unknown_route(http):
    r = http.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Endpoint not found", "path": "/nope"}


def test_chat_requires_message(http):
    r = http.post("/api/chat", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "Message is required"}


def test_chat_rejects_empty_message(http):
    r = http.post("/api/chat", json={"message": ""})
    assert r.status_code == 400
    assert r.json()["error"] == "Message is required"


def test_chat_rejects_malformed_history(http):
    r = http.post("/api/chat", json={"message": "hi", "history": "nope"})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request body"


def test_chat_with_missing_credential(http, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY")
    get_settings.cache_clear()

    r = http.post("/api/chat", json={"message": "hi"})
    assert r.status_code == 500
    body = r.json()
    assert "Invalid or expired API key" in body["error"]
    assert "GEMINI_API_KEY" in body["details"]


def test_chat_success_echoes_message():
    model = FakeModel(replies=["Hello!"])
    with patch("upstream.chat.build_model", return_value=model):
        r = TestClient(app).post("/api/chat", json={"message": "hi"})

    assert r.status_code == 200
    assert r.json() == {"success": True, "response": "Hello!", "message": "hi"}
    # no history: the new message is the only turn sent upstream
    assert [m.content for m in model.calls[0]] == ["hi"]


def test_chat_replays_history_in_order():
    model = FakeModel(replies=["r2"])
    history = [
        {"role": "user", "content": "a"},
        {"role": "assistant", "content": "r1"},
    ]
    with patch("upstream.chat.build_model", return_value=model):
        r = TestClient(app).post("/api/chat", json={"message": "b", "history": history})

    assert r.status_code == 200
    sent = model.calls[0]
    assert [m.type for m in sent] == ["human", "ai", "human"]
    assert [m.content for m in sent] == ["a", "r1", "b"]


def test_chat_accepts_turn_shaped_history():
    model = FakeModel(replies=["r2"])
    history = [
        {"role": "user", "parts": [{"text": "a"}]},
        {"role": "model", "parts": [{"text": "r1"}]},
    ]
    with patch("upstream.chat.build_model", return_value=model):
        r = TestClient(app).post("/api/chat", json={"message": "b", "history": history})

    assert r.status_code == 200
    assert [m.type for m in model.calls[0]] == ["human", "ai", "human"]


def test_chat_upstream_quota_error():
    model = FakeModel(error=RuntimeError("Resource exhausted: quota exceeded"))
    with patch("upstream.chat.build_model", return_value=model):
        r = TestClient(app).post("/api/chat", json={"message": "hi"})

    assert r.status_code == 500
    assert r.json() == {
        "error": "API quota exceeded. Please try again later.",
        "details": "Resource exhausted: quota exceeded",
    }


def test_unhandled_error_in_development():
    client = TestClient(app, raise_server_exceptions=False)
    with patch("app.main.run_chat", side_effect=RuntimeError("kaboom")):
        r = client.post("/api/chat", json={"message": "hi"})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error", "message": "kaboom"}


def test_unhandled_error_message_hidden_in_production(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    get_settings.cache_clear()
    client = TestClient(app, raise_server_exceptions=False)
    with patch("app.main.run_chat", side_effect=RuntimeError("kaboom")):
        r = client.post("/api/chat", json={"message": "hi"})
    assert r.status_code == 500
    assert r.json()["message"] == "An error occurred"

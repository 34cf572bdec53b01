import itertools

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from app.main import app
from client.storage import JsonFileStorage
from client.store import ConversationStore
from config.settings import get_settings


class FakeModel:
    """Stands in for the Gemini chat model; records what it was sent."""
    def __init__(self, replies=None, error=None):
        self.replies = list(replies or ["ok"])
        self.error = error
        self.calls = []

    def invoke(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.replies.pop(0))


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Every test starts from a known, fully configured environment."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setenv("APP_ENV", "development")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def http():
    return TestClient(app)


@pytest.fixture
def storage(tmp_path):
    return JsonFileStorage(str(tmp_path / "storage.json"))


@pytest.fixture
def clock():
    ticks = itertools.count(1_700_000_000_000, 1000)
    return lambda: next(ticks)


@pytest.fixture
def store(storage, clock):
    return ConversationStore(storage, clock=clock)

"""Shared test fixtures."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from story_gateway.adapters.http_transport import HttpRequest, RawResponse, Transport
from story_gateway.config import Settings
from story_gateway.services.dispatcher import CallbackDispatcher
from story_gateway.services.session import SessionStore, TokenStore
from story_gateway.services.stories import StoryClient


@dataclass
class InMemoryTokenStore(TokenStore):
    """In-memory token store for tests."""

    token: str | None = None
    saves: list[str] = field(default_factory=list)

    def load(self) -> str | None:
        return self.token

    def save(self, token: str) -> None:
        self.saves.append(token)
        self.token = token


@dataclass
class ScriptedTransport(Transport):
    """Fake transport that replays queued responses and records requests."""

    responses: list[RawResponse | Exception] = field(default_factory=list)
    requests: list[HttpRequest] = field(default_factory=list)

    def queue_json(self, payload: object, status_code: int = 200) -> None:
        self.responses.append(RawResponse(status_code, json.dumps(payload)))

    def queue_text(self, text: str, status_code: int = 200) -> None:
        self.responses.append(RawResponse(status_code, text))

    def queue_error(self, error: Exception) -> None:
        self.responses.append(error)

    async def send(self, request: HttpRequest) -> RawResponse:
        self.requests.append(request)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class ImmediateDispatcher(CallbackDispatcher):
    """Dispatcher that calls callbacks inline on the producing thread."""

    def deliver(self, callback: Callable[..., None], *args: object) -> None:
        callback(*args)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        custom_story_backend="https://stories.example.com/",
        token_path=tmp_path / "story_token",
    )


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def session_store(token_store: InMemoryTokenStore) -> SessionStore:
    return SessionStore(token_store)


@pytest.fixture
def authenticated_store(session_store: SessionStore) -> SessionStore:
    session_store.set("token-123")
    return session_store


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def story_client(
    transport: ScriptedTransport, session_store: SessionStore
) -> StoryClient:
    return StoryClient(transport=transport, session_store=session_store)


@pytest.fixture
def media_file(tmp_path: Path) -> Path:
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"fake-video-bytes")
    return path

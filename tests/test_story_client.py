"""Tests for the async story client."""

import asyncio
import threading
from dataclasses import dataclass, field

from story_gateway.domain.errors import TransportError
from story_gateway.domain.models import LikeState, MediaKind
from story_gateway.domain.outcomes import Failure, Success
from story_gateway.services.session import SessionStore
from story_gateway.services.stories import StoryClient, build_upload_request
from tests.conftest import InMemoryTokenStore, ScriptedTransport


def test_authenticate_stores_token(
    story_client: StoryClient,
    transport: ScriptedTransport,
    token_store: InMemoryTokenStore,
) -> None:
    transport.queue_json({"success": True, "data": {"token": "T"}})

    outcome = asyncio.run(story_client.authenticate("42"))

    assert outcome == Success()
    session = story_client.session_store.get()
    assert session.authenticated is True
    assert session.token == "T"
    assert token_store.token == "T"
    request = transport.requests[0]
    assert request.path == "/api/auth/register"
    assert "Authorization" not in request.headers
    assert request.json_body == {
        "telegramId": "42",
        "username": "user_42",
        "firstName": "",
        "lastName": "",
    }


def test_authenticate_domain_failure_keeps_session_empty(
    story_client: StoryClient, transport: ScriptedTransport
) -> None:
    transport.queue_json({"success": False})

    outcome = asyncio.run(story_client.authenticate("42", "neo", "Thomas", "A"))

    assert outcome == Failure("Unknown error")
    assert story_client.session_store.get().authenticated is False


def test_authenticate_missing_token_is_failure(
    story_client: StoryClient, transport: ScriptedTransport
) -> None:
    transport.queue_json({"success": True, "data": {}})

    outcome = asyncio.run(story_client.authenticate("42"))

    assert isinstance(outcome, Failure)
    assert "token" in outcome.message
    assert story_client.session_store.get().authenticated is False


def test_operations_require_session(
    story_client: StoryClient, transport: ScriptedTransport, media_file
) -> None:
    upload = build_upload_request(str(media_file), MediaKind.VIDEO, 15)

    outcomes = [
        asyncio.run(story_client.upload_story(upload)),
        asyncio.run(story_client.fetch_stories()),
        asyncio.run(story_client.toggle_like("s1")),
        asyncio.run(story_client.delete_story("s1")),
    ]
    asyncio.run(story_client.record_view("s1"))

    assert outcomes == [Failure("Not authenticated")] * 4
    assert transport.requests == []


def test_upload_missing_file_skips_transport(
    authenticated_store, transport: ScriptedTransport, tmp_path
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    upload = build_upload_request(str(tmp_path / "missing.jpg"), "image", 5)

    outcome = asyncio.run(client.upload_story(upload))

    assert outcome == Failure("File not found")
    assert transport.requests == []


def test_upload_returns_created_story(
    authenticated_store, transport: ScriptedTransport, media_file
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": True, "data": {"id": "s9", "type": "video"}})
    upload = build_upload_request(str(media_file), MediaKind.VIDEO, 15, caption="hi")

    outcome = asyncio.run(client.upload_story(upload))

    assert outcome == Success({"id": "s9", "type": "video"})
    request = transport.requests[0]
    assert request.headers["Authorization"] == "Bearer token-123"
    assert request.form_fields["caption"] == "hi"
    assert request.form_fields["visibility"] == "public"


def test_upload_failure_uses_default_message(
    authenticated_store, transport: ScriptedTransport, media_file
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": False})
    upload = build_upload_request(str(media_file), MediaKind.IMAGE, 5)

    assert asyncio.run(client.upload_story(upload)) == Failure("Upload failed")


def test_fetch_stories_empty_list(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": True, "data": {"stories": []}})

    assert asyncio.run(client.fetch_stories()) == Success([])


def test_fetch_stories_absent_list_is_empty(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": True, "data": {}})

    assert asyncio.run(client.fetch_stories()) == Success([])


def test_fetch_stories_preserves_order(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    stories = [{"id": "b"}, {"id": "a"}]
    transport.queue_json({"success": True, "data": {"stories": stories}})

    assert asyncio.run(client.fetch_stories()) == Success(stories)
    assert transport.requests[0].method == "GET"


def test_fetch_stories_invalid_json(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_text("<html>Bad gateway</html>", status_code=502)

    outcome = asyncio.run(client.fetch_stories())

    assert isinstance(outcome, Failure)
    assert "Invalid JSON" in outcome.message


def test_toggle_like_success(authenticated_store, transport: ScriptedTransport) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": True, "data": {"isLiked": True, "likesCount": 5}})
    transport.queue_json({"success": True, "data": {"isLiked": False}})

    first = asyncio.run(client.toggle_like("s1"))
    second = asyncio.run(client.toggle_like("s1"))

    assert first == Success(LikeState(is_liked=True, likes_count=5))
    assert second == Success(LikeState(is_liked=False, likes_count=0))
    assert transport.requests[0].path == "/api/stories/s1/like"
    assert transport.requests[0].json_body == {}


def test_toggle_like_failure_is_reported(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": False})

    assert asyncio.run(client.toggle_like("s1")) == Failure("Like failed")


def test_delete_story_outcomes(authenticated_store, transport: ScriptedTransport) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": False, "error": "not owner"})
    transport.queue_json({"success": False})
    transport.queue_json({"success": True})

    assert asyncio.run(client.delete_story("s1")) == Failure("not owner")
    assert asyncio.run(client.delete_story("s1")) == Failure("Delete failed")
    assert asyncio.run(client.delete_story("s1")) == Success()
    assert transport.requests[0].method == "DELETE"


def test_transport_error_becomes_failure(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_error(TransportError("connection refused"))

    assert asyncio.run(client.delete_story("s1")) == Failure("connection refused")


def test_record_view_swallows_errors(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_error(TransportError("timed out"))
    transport.queue_text("not json")

    assert asyncio.run(client.record_view("s1")) is None
    assert asyncio.run(client.record_view("s2")) is None
    assert [request.path for request in transport.requests] == [
        "/api/stories/s1/view",
        "/api/stories/s2/view",
    ]


def test_concurrent_authenticate_resolves_to_one_token(
    story_client: StoryClient,
    transport: ScriptedTransport,
    token_store: InMemoryTokenStore,
) -> None:
    transport.queue_json({"success": True, "data": {"token": "A"}})
    transport.queue_json({"success": True, "data": {"token": "B"}})

    async def run_both() -> list:
        return await asyncio.gather(
            story_client.authenticate("1"), story_client.authenticate("2")
        )

    outcomes = asyncio.run(run_both())

    assert outcomes == [Success(), Success()]
    session = story_client.session_store.get()
    assert session.token in {"A", "B"}
    assert token_store.token == session.token


def test_delete_failure_keeps_backend_message_with_odd_data(
    authenticated_store, transport: ScriptedTransport
) -> None:
    client = StoryClient(transport=transport, session_store=authenticated_store)
    transport.queue_json({"success": False, "error": "not owner", "data": []})

    assert asyncio.run(client.delete_story("s1")) == Failure("not owner")


@dataclass
class GatedTokenStore(InMemoryTokenStore):
    """Token store whose save blocks until released."""

    release: threading.Event = field(default_factory=threading.Event)

    def save(self, token: str) -> None:
        self.release.wait(timeout=5)
        super().save(token)


def test_slow_token_persistence_does_not_stall_other_calls(
    transport: ScriptedTransport,
) -> None:
    token_store = GatedTokenStore(token="old")
    session_store = SessionStore(token_store)
    session_store.restore()
    client = StoryClient(transport=transport, session_store=session_store)
    transport.queue_json({"success": True, "data": {"token": "new"}})
    transport.queue_json({"success": True, "data": {"stories": []}})

    async def scenario() -> tuple[object, bool, object]:
        auth = asyncio.create_task(client.authenticate("1"))
        await asyncio.sleep(0)
        fetched = await client.fetch_stories()
        save_pending = token_store.saves == []
        token_store.release.set()
        return fetched, save_pending, await auth

    fetched, save_pending, auth_outcome = asyncio.run(scenario())

    assert fetched == Success([])
    assert save_pending is True
    assert auth_outcome == Success()
    assert session_store.get().token == "new"
    assert token_store.saves == ["new"]

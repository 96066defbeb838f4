"""Decoding of backend response envelopes."""

import json

from pydantic import BaseModel, Field, StrictBool, ValidationError

from story_gateway.adapters.http_transport import RawResponse
from story_gateway.domain.errors import DecodeError, DomainError
from story_gateway.domain.models import LikeState, StoryRecord


class Envelope(BaseModel):
    """Uniform ``{success, data, error}`` wrapper of every response."""

    success: bool = False
    data: object = None
    error: object = None


class TokenPayload(BaseModel):
    """Registration payload."""

    token: str = Field(min_length=1)


class StoriesPayload(BaseModel):
    """Story listing payload."""

    stories: list[StoryRecord] | None = None


class LikePayload(BaseModel):
    """Like toggle payload."""

    is_liked: StrictBool = Field(alias="isLiked")
    likes_count: int = Field(default=0, alias="likesCount")


def decode_envelope(response: RawResponse) -> Envelope:
    """Parse a raw response body into an envelope."""
    try:
        body = json.loads(response.text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON response: {exc}") from exc
    if not isinstance(body, dict):
        raise DecodeError("Response body is not a JSON object")
    try:
        return Envelope.model_validate(body)
    except ValidationError as exc:
        raise DecodeError(_describe(exc)) from exc


def require_success(envelope: Envelope, default_error: str) -> Envelope:
    """Raise ``DomainError`` unless the backend reported success."""
    if not envelope.success:
        raise DomainError(_error_message(envelope.error) or default_error)
    return envelope


def _error_message(error: object) -> str | None:
    if error is None or isinstance(error, str):
        return error or None
    return json.dumps(error)


def _require_data(envelope: Envelope) -> dict[str, object]:
    if envelope.data is None:
        raise DecodeError("Response is missing 'data'")
    if not isinstance(envelope.data, dict):
        raise DecodeError("Response 'data' is not a JSON object")
    return envelope.data


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid response field '{location}': {first.get('msg')}"


def extract_token(envelope: Envelope) -> str:
    """Return ``data.token`` from a registration response."""
    try:
        return TokenPayload.model_validate(_require_data(envelope)).token
    except ValidationError as exc:
        raise DecodeError(_describe(exc)) from exc


def extract_created_story(envelope: Envelope) -> StoryRecord:
    """Return the created story payload."""
    return _require_data(envelope)


def extract_stories(envelope: Envelope) -> list[StoryRecord]:
    """Return ``data.stories``; absent or null means no stories."""
    try:
        payload = StoriesPayload.model_validate(_require_data(envelope))
    except ValidationError as exc:
        raise DecodeError(_describe(exc)) from exc
    return payload.stories or []


def extract_like_state(envelope: Envelope) -> LikeState:
    """Return the like flag and count after a toggle."""
    try:
        payload = LikePayload.model_validate(_require_data(envelope))
    except ValidationError as exc:
        raise DecodeError(_describe(exc)) from exc
    return LikeState(is_liked=payload.is_liked, likes_count=payload.likes_count)

"""Story backend operations with authenticated request orchestration."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from story_gateway.adapters.http_transport import HttpRequest, Transport
from story_gateway.domain.errors import DomainError, PreconditionError
from story_gateway.domain.models import (
    AuthSession,
    LikeState,
    MediaKind,
    StoryRecord,
    UploadRequest,
    Visibility,
)
from story_gateway.domain.outcomes import Failure, Outcome, Success
from story_gateway.services import request_codec
from story_gateway.services.response_codec import (
    Envelope,
    decode_envelope,
    extract_created_story,
    extract_like_state,
    extract_stories,
    extract_token,
    require_success,
)
from story_gateway.services.session import SessionStore

_logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"
FILE_NOT_FOUND = "File not found"


@dataclass
class StoryClient:
    """Runs each backend operation and converts every error into a Failure."""

    transport: Transport
    session_store: SessionStore

    def authorized_session(self) -> AuthSession | None:
        """Return the session if it carries a usable token."""
        session = self.session_store.get()
        if session.authenticated and session.token:
            return session
        return None

    async def authenticate(
        self,
        telegram_id: str,
        username: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> Outcome[None]:
        """Register with the backend and store the issued token."""
        request = request_codec.build_register_request(
            telegram_id, username, first_name, last_name
        )
        try:
            envelope = await self._exchange(request, "Auth")
            require_success(envelope, "Unknown error")
            token = extract_token(envelope)
            await asyncio.to_thread(self.session_store.set, token)
        except Exception as exc:  # noqa: BLE001
            return _failure("Authentication", exc)
        _logger.info("Authentication successful")
        return Success()

    async def upload_story(self, upload: UploadRequest) -> Outcome[StoryRecord]:
        """Upload a media file as a new story."""
        try:
            session = self._require_session()
        except PreconditionError as exc:
            return Failure(str(exc))
        if not Path(upload.file_path).exists():
            _logger.warning("Upload skipped, file missing: %s", upload.file_path)
            return Failure(FILE_NOT_FOUND)

        request = request_codec.build_create_story_request(session.token, upload)
        _logger.debug("Uploading story: %s", Path(upload.file_path).name)
        try:
            envelope = await self._exchange(request, "Upload")
            require_success(envelope, "Upload failed")
            story = extract_created_story(envelope)
        except Exception as exc:  # noqa: BLE001
            return _failure("Upload", exc)
        _logger.info("Story uploaded successfully")
        return Success(story)

    async def fetch_stories(self) -> Outcome[list[StoryRecord]]:
        """Fetch all active stories visible to the user."""
        try:
            session = self._require_session()
        except PreconditionError as exc:
            return Failure(str(exc))

        request = request_codec.build_list_stories_request(session.token)
        try:
            envelope = await self._exchange(request, "Fetch stories")
            require_success(envelope, "Fetch failed")
            stories = extract_stories(envelope)
        except Exception as exc:  # noqa: BLE001
            return _failure("Fetch", exc)
        _logger.info("Fetched %s stories", len(stories))
        return Success(stories)

    async def record_view(self, story_id: str) -> None:
        """Record a story view; failures are only logged."""
        session = self.authorized_session()
        if session is None:
            return
        request = request_codec.build_record_view_request(session.token, story_id)
        try:
            await self.transport.send(request)
        except Exception:  # noqa: BLE001
            _logger.exception("Record view error for story %s", story_id)
            return
        _logger.debug("View recorded for story: %s", story_id)

    async def toggle_like(self, story_id: str) -> Outcome[LikeState]:
        """Flip the like flag on a story."""
        try:
            session = self._require_session()
        except PreconditionError as exc:
            return Failure(str(exc))

        request = request_codec.build_toggle_like_request(session.token, story_id)
        try:
            envelope = await self._exchange(request, "Toggle like")
            require_success(envelope, "Like failed")
            state = extract_like_state(envelope)
        except Exception as exc:  # noqa: BLE001
            return _failure("Toggle like", exc)
        _logger.debug("Like toggled for story: %s -> %s", story_id, state.is_liked)
        return Success(state)

    async def delete_story(self, story_id: str) -> Outcome[None]:
        """Delete one of the user's own stories."""
        try:
            session = self._require_session()
        except PreconditionError as exc:
            return Failure(str(exc))

        request = request_codec.build_delete_story_request(session.token, story_id)
        try:
            envelope = await self._exchange(request, "Delete")
            require_success(envelope, "Delete failed")
        except Exception as exc:  # noqa: BLE001
            return _failure("Delete", exc)
        _logger.info("Story deleted: %s", story_id)
        return Success()

    def _require_session(self) -> AuthSession:
        session = self.authorized_session()
        if session is None:
            raise PreconditionError(NOT_AUTHENTICATED)
        return session

    async def _exchange(self, request: HttpRequest, label: str) -> Envelope:
        response = await self.transport.send(request)
        _logger.debug(
            "%s response (%s): %s", label, response.status_code, response.text
        )
        return decode_envelope(response)


def build_upload_request(  # noqa: PLR0913
    file_path: str,
    media_kind: MediaKind | str,
    duration_seconds: int,
    caption: str | None = None,
    background_color: str | None = None,
    visibility: Visibility | str | None = None,
) -> UploadRequest:
    """Create an upload request, applying defaults for missing values."""
    return UploadRequest(
        file_path=file_path,
        media_kind=media_kind,
        duration_seconds=duration_seconds,
        caption=caption if caption is not None else "",
        background_color=background_color or "#FFFFFF",
        visibility=visibility or Visibility.PUBLIC,
    )


def _failure(operation: str, exc: Exception) -> Failure:
    message = str(exc) or type(exc).__name__
    if isinstance(exc, DomainError):
        _logger.warning("%s failed: %s", operation, message)
    else:
        _logger.error("%s error: %s", operation, message, exc_info=exc)
    return Failure(message)

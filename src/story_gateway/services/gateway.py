"""Callback-style facade over the story client."""

import logging
from collections.abc import Callable, Coroutine
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any

from story_gateway.domain.models import LikeState, MediaKind, StoryRecord, Visibility
from story_gateway.domain.outcomes import Failure, Outcome
from story_gateway.services.dispatcher import BackgroundRunner, CallbackDispatcher
from story_gateway.services.stories import (
    NOT_AUTHENTICATED,
    StoryClient,
    build_upload_request,
)

_logger = logging.getLogger(__name__)

AuthCallback = Callable[[Outcome[None]], None]
UploadCallback = Callable[[Outcome[StoryRecord]], None]
StoriesCallback = Callable[[Outcome[list[StoryRecord]]], None]
LikeCallback = Callable[[Outcome[LikeState]], None]
DeleteCallback = Callable[[Outcome[None]], None]


@dataclass
class StoryGateway:
    """Non-blocking entry point for the application.

    Each call returns immediately. Work runs on the background runner and the
    single outcome is handed to ``callback`` through the dispatcher. Calls made
    without a session fail synchronously on the calling thread.
    """

    client: StoryClient
    runner: BackgroundRunner
    dispatcher: CallbackDispatcher

    def authenticate(
        self,
        telegram_id: str,
        username: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        callback: AuthCallback | None = None,
    ) -> Future:
        """Register with the backend in the background."""
        return self._dispatch(
            self.client.authenticate(telegram_id, username, first_name, last_name),
            callback,
        )

    def upload_story(  # noqa: PLR0913
        self,
        file_path: str,
        media_kind: MediaKind | str,
        caption: str | None = None,
        background_color: str | None = None,
        duration_seconds: int = 0,
        visibility: Visibility | str | None = None,
        callback: UploadCallback | None = None,
    ) -> Future | None:
        """Upload a story in the background."""
        if not self._check_session(callback):
            return None
        upload = build_upload_request(
            file_path=file_path,
            media_kind=media_kind,
            duration_seconds=duration_seconds,
            caption=caption,
            background_color=background_color,
            visibility=visibility,
        )
        return self._dispatch(self.client.upload_story(upload), callback)

    def fetch_stories(self, callback: StoriesCallback | None = None) -> Future | None:
        """Fetch active stories in the background."""
        if not self._check_session(callback):
            return None
        return self._dispatch(self.client.fetch_stories(), callback)

    def record_view(self, story_id: str) -> Future | None:
        """Record a story view; there is no result to deliver."""
        if self.client.authorized_session() is None:
            return None
        return self.runner.submit(self.client.record_view(story_id))

    def toggle_like(
        self, story_id: str, callback: LikeCallback | None = None
    ) -> Future | None:
        """Toggle the like flag on a story in the background."""
        if not self._check_session(callback):
            return None
        return self._dispatch(self.client.toggle_like(story_id), callback)

    def delete_story(
        self, story_id: str, callback: DeleteCallback | None = None
    ) -> Future | None:
        """Delete a story in the background."""
        if not self._check_session(callback):
            return None
        return self._dispatch(self.client.delete_story(story_id), callback)

    def _check_session(self, callback: Callable[[Outcome], None] | None) -> bool:
        if self.client.authorized_session() is not None:
            return True
        _logger.debug("Rejected call without an authenticated session")
        if callback is not None:
            callback(Failure(NOT_AUTHENTICATED))
        return False

    def _dispatch(
        self,
        operation: Coroutine[Any, Any, Outcome],
        callback: Callable[[Outcome], None] | None,
    ) -> Future:
        async def run() -> Outcome:
            outcome = await operation
            if callback is not None:
                self.dispatcher.deliver(callback, outcome)
            return outcome

        return self.runner.submit(run())

"""Domain models for the story backend gateway."""

from dataclasses import dataclass
from enum import StrEnum

StoryRecord = dict[str, object]


class MediaKind(StrEnum):
    """Kind of media attached to a story."""

    IMAGE = "image"
    VIDEO = "video"

    @property
    def mime_type(self) -> str:
        """Return the MIME category sent with the uploaded file."""
        return "video/*" if self is MediaKind.VIDEO else "image/*"


class Visibility(StrEnum):
    """Audience a story is shared with."""

    PUBLIC = "public"
    PRIVATE = "private"
    CONTACTS = "contacts"
    CLOSE_FRIENDS = "close_friends"


@dataclass(frozen=True)
class AuthSession:
    """Snapshot of the current authentication state."""

    token: str | None = None
    authenticated: bool = False


@dataclass(frozen=True)
class UploadRequest:
    """Parameters for creating a story from a local media file."""

    file_path: str
    media_kind: MediaKind | str
    duration_seconds: int
    caption: str = ""
    background_color: str = "#FFFFFF"
    visibility: Visibility | str = Visibility.PUBLIC


@dataclass(frozen=True)
class LikeState:
    """Like status of a story after a toggle."""

    is_liked: bool
    likes_count: int = 0

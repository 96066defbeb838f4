"""Builders that turn operation parameters into backend HTTP requests."""

from pathlib import Path
from urllib.parse import quote

from story_gateway.adapters.http_transport import FilePart, HttpRequest
from story_gateway.domain.models import MediaKind, UploadRequest


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _story_path(story_id: str, action: str | None = None) -> str:
    path = f"/api/stories/{quote(str(story_id), safe='')}"
    if action:
        path = f"{path}/{action}"
    return path


def _enum_value(value: object) -> str:
    return str(getattr(value, "value", value))


def build_register_request(
    telegram_id: str,
    username: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> HttpRequest:
    """Build the unauthenticated registration call."""
    return HttpRequest(
        method="POST",
        path="/api/auth/register",
        json_body={
            "telegramId": telegram_id,
            "username": username if username is not None else f"user_{telegram_id}",
            "firstName": first_name if first_name is not None else "",
            "lastName": last_name if last_name is not None else "",
        },
    )


def build_create_story_request(token: str, upload: UploadRequest) -> HttpRequest:
    """Build the multipart story upload call."""
    media_kind = _enum_value(upload.media_kind)
    mime_type = (
        MediaKind.VIDEO.mime_type
        if media_kind == MediaKind.VIDEO.value
        else MediaKind.IMAGE.mime_type
    )
    return HttpRequest(
        method="POST",
        path="/api/stories/create",
        headers=_auth_headers(token),
        form_fields={
            "type": media_kind,
            "caption": upload.caption if upload.caption is not None else "",
            "backgroundColor": upload.background_color or "#FFFFFF",
            "duration": str(upload.duration_seconds),
            "visibility": _enum_value(upload.visibility or "public"),
        },
        file_field="file",
        file_part=FilePart(path=Path(upload.file_path), content_type=mime_type),
    )


def build_list_stories_request(token: str) -> HttpRequest:
    """Build the call that lists active stories."""
    return HttpRequest(method="GET", path="/api/stories", headers=_auth_headers(token))


def build_record_view_request(token: str, story_id: str) -> HttpRequest:
    """Build the call that records a story view."""
    return HttpRequest(
        method="POST",
        path=_story_path(story_id, "view"),
        headers=_auth_headers(token),
        json_body={},
    )


def build_toggle_like_request(token: str, story_id: str) -> HttpRequest:
    """Build the call that flips the like flag on a story."""
    return HttpRequest(
        method="POST",
        path=_story_path(story_id, "like"),
        headers=_auth_headers(token),
        json_body={},
    )


def build_delete_story_request(token: str, story_id: str) -> HttpRequest:
    """Build the call that deletes one of the user's stories."""
    return HttpRequest(
        method="DELETE",
        path=_story_path(story_id),
        headers=_auth_headers(token),
    )

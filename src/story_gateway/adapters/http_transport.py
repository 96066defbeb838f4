"""HTTP transport for the story backend."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import httpx

from story_gateway.domain.errors import TransportError


@dataclass(frozen=True)
class FilePart:
    """A file attached to a multipart request."""

    path: Path
    content_type: str

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class HttpRequest:
    """A single HTTP call relative to the backend base URL."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    json_body: dict[str, object] | None = None
    form_fields: dict[str, str] | None = None
    file_field: str | None = None
    file_part: FilePart | None = None


@dataclass(frozen=True)
class RawResponse:
    """Undecoded backend response."""

    status_code: int
    text: str


class Transport(Protocol):
    """Interface for executing backend HTTP calls."""

    async def send(self, request: HttpRequest) -> RawResponse:
        """Execute a request and return the raw response."""


@dataclass
class HttpxTransport(Transport):
    """Transport implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls,
        base_url: str,
        connect_timeout: float = 30,
        read_timeout: float = 30,
        write_timeout: float = 30,
    ) -> "HttpxTransport":
        """Create a transport with a managed httpx session."""
        timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=write_timeout,
            pool=connect_timeout,
        )
        return cls(base_url=base_url, http_client=httpx.AsyncClient(timeout=timeout))

    async def send(self, request: HttpRequest) -> RawResponse:
        """Send the request; status codes are returned, not raised."""
        url = f"{self.base_url}{request.path}"
        try:
            if request.file_part is not None:
                response = await self._send_multipart(url, request)
            else:
                response = await self.http_client.request(
                    request.method,
                    url,
                    headers=request.headers,
                    json=request.json_body,
                )
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc
        except OSError as exc:
            raise TransportError(str(exc)) from exc
        return RawResponse(status_code=response.status_code, text=response.text)

    async def _send_multipart(self, url: str, request: HttpRequest) -> httpx.Response:
        part = request.file_part
        with part.path.open("rb") as handle:
            files = {
                request.file_field or "file": (
                    part.filename,
                    handle,
                    part.content_type,
                )
            }
            return await self.http_client.request(
                request.method,
                url,
                headers=request.headers,
                data=request.form_fields or {},
                files=files,
            )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

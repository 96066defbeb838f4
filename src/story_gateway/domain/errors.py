"""Error taxonomy for story backend calls."""


class StoryBackendError(RuntimeError):
    """Base error for failures talking to the story backend."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class PreconditionError(StoryBackendError):
    """Raised when an operation needs a session that does not exist yet."""


class TransportError(StoryBackendError):
    """Raised when the HTTP exchange itself fails (connect, timeout, IO)."""


class DecodeError(StoryBackendError):
    """Raised when a response body cannot be decoded into the expected shape."""


class DomainError(StoryBackendError):
    """Raised when the backend reports ``success: false``."""

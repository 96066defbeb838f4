"""Authentication session state shared by all backend operations."""

import logging
import threading
from typing import Protocol

from story_gateway.domain.models import AuthSession

_logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    """Durable storage for the session token."""

    def load(self) -> str | None:
        """Return the persisted token, if any."""

    def save(self, token: str) -> None:
        """Persist the token."""


class SessionStore:
    """Holds the current session and serializes writes to it.

    Readers always get an immutable snapshot and never wait on persistence.
    Concurrent ``set`` calls are applied one at a time, so the session ends up
    with whichever token was written last and never with a mix of two writes.
    """

    def __init__(self, token_store: TokenStore) -> None:
        self.token_store = token_store
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._session = AuthSession()

    def get(self) -> AuthSession:
        """Return the current session snapshot."""
        with self._lock:
            return self._session

    def set(self, token: str) -> AuthSession:
        """Persist the token and mark the session authenticated."""
        if not token:
            raise ValueError("Session token must be non-empty")
        session = AuthSession(token=token, authenticated=True)
        with self._write_lock:
            self.token_store.save(token)
            with self._lock:
                self._session = session
        return session

    def restore(self) -> AuthSession:
        """Reload a previously persisted token into memory."""
        token = self.token_store.load()
        with self._lock:
            if token and not self._session.authenticated:
                self._session = AuthSession(token=token, authenticated=True)
                _logger.info("Restored story backend session from token store")
            return self._session

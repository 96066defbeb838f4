"""File-backed token store."""

import os
from dataclasses import dataclass
from pathlib import Path

from story_gateway.services.session import TokenStore


@dataclass
class FileTokenStore(TokenStore):
    """Keeps the session token in a file readable only by the owner."""

    path: Path

    def load(self) -> str | None:
        """Return the stored token, if the file exists and is non-empty."""
        if not self.path.exists():
            return None
        token = self.path.read_text(encoding="utf-8").strip()
        return token or None

    def save(self, token: str) -> None:
        """Atomically replace the stored token."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(token)
        os.replace(tmp_path, self.path)

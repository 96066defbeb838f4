"""Supabase-backed token store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from story_gateway.services.session import TokenStore


@dataclass
class SupabaseTokenStore(TokenStore):
    """Supabase implementation for session token persistence."""

    client: Client
    owner_id: str

    def load(self) -> str | None:
        """Return the token stored for the owner, if present."""
        response = (
            self.client.table("story_tokens")
            .select("token")
            .eq("owner_id", self.owner_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return response.data[0].get("token") or None
        return None

    def save(self, token: str) -> None:
        """Insert or replace the owner's token row."""
        response = (
            self.client.table("story_tokens")
            .upsert(
                {
                    "owner_id": self.owner_id,
                    "token": token,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="owner_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store story token in Supabase")

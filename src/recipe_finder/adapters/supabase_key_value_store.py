"""Supabase-backed key-value store."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from recipe_finder.services.json_collection import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Supabase implementation storing values in a key/value table."""

    client: Client
    table: str = "app_storage"

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        response = await asyncio.to_thread(
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under a key."""
        await asyncio.to_thread(
            self.client.table(self.table)
            .upsert({"key": key, "value": value}, on_conflict="key")
            .execute
        )

    async def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""
        await asyncio.to_thread(
            self.client.table(self.table).delete().eq("key", key).execute
        )

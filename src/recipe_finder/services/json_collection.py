"""JSON collections persisted under a single key-value store key."""

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from recipe_finder.domain.errors import StorageError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    """Async string-keyed persistence interface."""

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    async def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    async def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Valid records from a persisted collection plus what was filtered out."""

    records: list[T]
    dropped: int = 0
    unreadable: bool = False


@dataclass
class JsonCollection(Generic[T]):
    """Ordered record collection stored as one JSON array.

    Mutations run load, change and write under a per-collection lock, so two
    concurrent mutations never read the same snapshot.
    """

    store: KeyValueStore
    key: str
    decode: Callable[[dict[str, object]], T]
    encode: Callable[[T], dict[str, object]]
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def load(self) -> DecodeResult[T]:
        """Read and decode the collection."""
        try:
            raw = await self.store.get(self.key)
        except Exception as exc:
            raise StorageError(f"Failed to read collection {self.key}") from exc
        return self._decode(raw)

    async def mutate(self, change: Callable[[list[T]], list[T] | None]) -> list[T]:
        """Apply a change to the records and persist the result.

        ``change`` returns the new record list, or None to skip the write.
        """
        async with self._lock:
            current = await self.load()
            updated = change(list(current.records))
            if updated is None:
                return current.records
            await self._write(updated)
            return updated

    async def clear(self) -> None:
        """Remove the collection from the store."""
        async with self._lock:
            try:
                await self.store.remove(self.key)
            except Exception as exc:
                raise StorageError(f"Failed to clear collection {self.key}") from exc

    async def _write(self, records: list[T]) -> None:
        payload = json.dumps([self.encode(record) for record in records])
        try:
            await self.store.set(self.key, payload)
        except Exception as exc:
            raise StorageError(f"Failed to write collection {self.key}") from exc

    def _decode(self, raw: str | None) -> DecodeResult[T]:
        if not raw:
            return DecodeResult(records=[])
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Collection %s is not valid JSON; ignoring it", self.key)
            return DecodeResult(records=[], unreadable=True)
        if not isinstance(items, list):
            _logger.warning("Collection %s is not a JSON array; ignoring it", self.key)
            return DecodeResult(records=[], unreadable=True)

        records: list[T] = []
        dropped = 0
        for item in items:
            if not isinstance(item, dict):
                dropped += 1
                continue
            try:
                records.append(self.decode(item))
            except (KeyError, TypeError, ValueError) as exc:
                dropped += 1
                _logger.debug("Dropping invalid entry in %s: %s", self.key, exc)
        if dropped:
            _logger.warning(
                "Dropped %s invalid entries from collection %s", dropped, self.key
            )
        return DecodeResult(records=records, dropped=dropped)

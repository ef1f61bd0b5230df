"""Key-value store backed by one JSON file per key."""

import asyncio
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from recipe_finder.services.json_collection import KeyValueStore


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Local key-value store that survives process restarts."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        return await asyncio.to_thread(self._read, self._path(key))

    async def set(self, key: str, value: str) -> None:
        """Atomically replace the value stored under a key."""
        await asyncio.to_thread(self._write, self._path(key), value)

    async def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""
        await asyncio.to_thread(self._path(key).unlink, missing_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}.json"

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @staticmethod
    def _write(path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

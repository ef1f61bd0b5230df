"""Durable local storage for recipe photos."""

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path

from recipe_finder.domain.errors import StorageError
from recipe_finder.services.user_recipes import FileStorage


@dataclass
class LocalFileStorage(FileStorage):
    """Moves picked images into an app-owned media directory."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    def durable_path(self, filename: str) -> Path:
        """Return the durable location for a file name."""
        return self.root / Path(filename).name

    def exists(self, path: Path) -> bool:
        """Return True when a file already exists at the path."""
        return path.exists()

    async def move_file(self, source: Path, destination: Path) -> None:
        """Move a file into the media directory."""
        try:
            await asyncio.to_thread(self._move, source, destination)
        except OSError as exc:
            raise StorageError(f"Failed to move {source} to {destination}") from exc

    @staticmethod
    def _move(source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))

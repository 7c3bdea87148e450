"""Recently opened packages.

The list is kept most-recent-first, deduplicated and capped. Persistence
goes through a small storage object so the list can be tested without
touching the user's home directory.
"""

import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


class RecentStorage(Protocol):
    """Persistence backend for the recent packages list."""

    def load(self) -> list[str]: ...

    def save(self, paths: list[str]) -> None: ...


class MemoryRecentStorage:
    """In-memory storage, mainly for tests."""

    def __init__(self, paths: list[str] | None = None):
        self.paths = list(paths or [])

    def load(self) -> list[str]:
        return list(self.paths)

    def save(self, paths: list[str]) -> None:
        self.paths = list(paths)


class FileRecentStorage:
    """Stores one path per line in a text file.

    Read and write errors are logged and otherwise ignored; a broken recent
    list must never stop a package from opening.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                return [line.strip() for line in f if line.strip()]
        except OSError as e:
            logger.warning(f"Could not read recent packages from {self.path}: {e}")
            return []

    def save(self, paths: list[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.writelines(f"{path}\n" for path in paths)
        except OSError as e:
            logger.warning(f"Could not save recent packages to {self.path}: {e}")


def _same_path(a: str, b: str) -> bool:
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))


class RecentPackages:
    """Most-recently-opened package paths.

    Attributes:
        storage: Persistence backend
        limit: Maximum number of remembered paths
    """

    def __init__(self, storage: RecentStorage, limit: int = DEFAULT_LIMIT):
        self.storage = storage
        self.limit = limit
        self._paths = storage.load()[:limit]

    def entries(self) -> list[str]:
        """Return remembered paths that still exist, most recent first."""
        return [path for path in self._paths if Path(path).is_file()]

    def add(self, path: str | Path) -> None:
        """Record a package as opened.

        Empty and missing paths are ignored. An existing entry for the same
        file moves to the front.
        """
        path = str(path)
        if not path or not Path(path).is_file():
            return

        path = os.path.abspath(path)
        self._paths = [p for p in self._paths if not _same_path(p, path)]
        self._paths.insert(0, path)
        del self._paths[self.limit :]
        self.storage.save(self._paths)

    def remove(self, path: str | Path) -> bool:
        """Forget a path. Returns True if it was remembered."""
        remaining = [p for p in self._paths if not _same_path(p, str(path))]
        if len(remaining) == len(self._paths):
            return False
        self._paths = remaining
        self.storage.save(self._paths)
        return True

    def clear(self) -> None:
        self._paths = []
        self.storage.save(self._paths)

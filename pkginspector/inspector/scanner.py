"""Payload inventory scanning."""

import logging
import os
from pathlib import Path

from pkginspector.inspector.models import FileEntry

logger = logging.getLogger(__name__)

PAYLOAD_DIR = "payload"


def scan_payload(extracted_root: Path) -> list[FileEntry]:
    """Enumerate the payload directory of an extracted package.

    Each directory level emits its subdirectories first (each followed by
    its own contents), then its files. Order within a level follows the
    filesystem listing. Directories that cannot be read are skipped.

    Args:
        extracted_root: Root of the extracted package

    Returns:
        Flat list of FileEntry objects (empty if there is no payload/)
    """
    payload_root = extracted_root / PAYLOAD_DIR
    if not payload_root.is_dir():
        return []

    entries: list[FileEntry] = []
    _scan_directory(payload_root, payload_root, entries)
    return entries


def _relative(root: Path, path: str) -> str:
    return Path(os.path.relpath(path, root)).as_posix()


def _scan_directory(root: Path, current: Path, entries: list[FileEntry]) -> None:
    try:
        with os.scandir(current) as it:
            items = list(it)
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {current}: {e}")
        return

    directories = [item for item in items if item.is_dir(follow_symlinks=False)]
    files = [item for item in items if not item.is_dir(follow_symlinks=False)]

    for item in directories:
        entries.append(
            FileEntry(
                name=item.name,
                relative_path=_relative(root, item.path),
                size=0,
                is_directory=True,
            )
        )
        _scan_directory(root, Path(item.path), entries)

    for item in files:
        try:
            size = item.stat(follow_symlinks=False).st_size
        except OSError as e:
            logger.debug(f"Cannot stat {item.path}: {e}")
            size = 0
        entries.append(
            FileEntry(
                name=item.name,
                relative_path=_relative(root, item.path),
                size=size,
                is_directory=False,
            )
        )

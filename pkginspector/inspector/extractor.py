"""Archive extraction into a private working directory.

Packages are ZIP containers. Each extraction gets its own uniquely named
directory so concurrent inspections never share scratch space.
"""

import logging
import shutil
import tempfile
import zipfile
import zlib
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path, PurePosixPath

from pkginspector.inspector.errors import ArchiveCorrupt, ArchiveNotFound

logger = logging.getLogger(__name__)

WORK_DIR_PREFIX = "pkginspector_"

# Errors zipfile raises while reading member data
ARCHIVE_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    NotImplementedError,
    RuntimeError,
    EOFError,
    OSError,
)


def _check_members(archive: zipfile.ZipFile, archive_path: Path) -> None:
    """Reject members that would escape the extraction directory."""
    for name in archive.namelist():
        normalized = name.replace("\\", "/")
        # Absolute paths, drive letters and parent references
        if (
            normalized.startswith("/")
            or ":" in normalized.split("/")[0]
            or ".." in PurePosixPath(normalized).parts
        ):
            raise ArchiveCorrupt(archive_path, f"invalid member path: {name}")


def open_archive(archive_path: Path | str) -> zipfile.ZipFile:
    """Open a package archive for reading.

    Args:
        archive_path: Path to the .pkg/.nupkg file

    Returns:
        Open ZipFile (caller closes it)

    Raises:
        ArchiveNotFound: If the path does not exist
        ArchiveCorrupt: If the file is not a readable ZIP container
    """
    archive_path = Path(archive_path)
    if not archive_path.is_file():
        raise ArchiveNotFound(archive_path)

    try:
        return zipfile.ZipFile(archive_path)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
        raise ArchiveCorrupt(archive_path, str(e)) from e


def _member_target(work_dir: Path, name: str) -> Path:
    # Windows tooling writes backslash separators; zipfile only converts them on Windows
    return work_dir.joinpath(*PurePosixPath(name.replace("\\", "/")).parts)


def _extract_members(archive: zipfile.ZipFile, work_dir: Path) -> None:
    for info in archive.infolist():
        target = _member_target(work_dir, info.filename)
        if target == work_dir:
            continue
        if info.filename.replace("\\", "/").endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        with archive.open(info) as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)


def extract_archive(archive_path: Path | str, work_root: Path | str | None = None) -> Path:
    """Extract a package archive to a fresh temporary directory.

    Member names are extracted with "/" separators, whichever slash style
    the archive stored them with.

    Args:
        archive_path: Path to the package archive
        work_root: Parent for the working directory (default: system temp)

    Returns:
        Path to the new working directory; the caller must delete it

    Raises:
        ArchiveNotFound: If the archive doesn't exist
        ArchiveCorrupt: If the archive can't be decoded or has unsafe members
    """
    archive_path = Path(archive_path)

    with open_archive(archive_path) as archive:
        _check_members(archive, archive_path)

        if work_root is not None:
            Path(work_root).mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix=WORK_DIR_PREFIX, dir=work_root))

        try:
            _extract_members(archive, work_dir)
        except ARCHIVE_READ_ERRORS as e:
            shutil.rmtree(work_dir, ignore_errors=True)
            raise ArchiveCorrupt(archive_path, str(e)) from e
        except Exception:
            shutil.rmtree(work_dir, ignore_errors=True)
            raise

    logger.debug(f"Extracted {archive_path} to {work_dir}")
    return work_dir


@contextmanager
def extracted_archive(
    archive_path: Path | str, work_root: Path | str | None = None
) -> Iterator[Path]:
    """Extract an archive for the duration of a with-block.

    The working directory is removed on exit, including when the block
    raises.
    """
    work_dir = extract_archive(archive_path, work_root)
    try:
        yield work_dir
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)
        logger.debug(f"Removed working directory {work_dir}")

"""Package export operations.

These functions copy content out of an inspected package: a single payload
file, or the whole package (report, manifest, payload and scripts) as a
folder. Payload files are read from the original archive because the
inspection working directory no longer exists.
"""

import logging
import shutil
from pathlib import Path, PurePosixPath

from pkginspector.inspector.extractor import open_archive
from pkginspector.inspector.metadata import BUILD_INFO_FILE, NO_METADATA_TEXT
from pkginspector.inspector.models import PackageModel
from pkginspector.inspector.report import write_report
from pkginspector.inspector.scanner import PAYLOAD_DIR

logger = logging.getLogger(__name__)

REPORT_FILE = "package-report.txt"


def _normalize(path: str) -> str:
    return path.replace("\\", "/").lower()


def export_file(model: PackageModel, relative_path: str, dest_dir: Path) -> Path:
    """Export one file from the package archive.

    The first archive member whose path ends with ``relative_path``
    (case-insensitive, either slash style) is written to ``dest_dir``
    under its base name.

    Args:
        model: Inspected package
        relative_path: Path of the file inside the package
        dest_dir: Output directory (created if needed)

    Returns:
        Path to the exported file

    Raises:
        FileNotFoundError: If no archive member matches
    """
    wanted = _normalize(relative_path)

    with open_archive(model.file_path) as archive:
        for info in archive.infolist():
            if info.is_dir() or not _normalize(info.filename).endswith(wanted):
                continue

            dest_dir.mkdir(parents=True, exist_ok=True)
            dest_path = dest_dir / PurePosixPath(info.filename.replace("\\", "/")).name
            with archive.open(info) as src, open(dest_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
            return dest_path

    raise FileNotFoundError(f"File not found in package: {relative_path}")


def export_package(model: PackageModel, folder: Path) -> Path:
    """Export a package's contents to a folder.

    Layout:
    - package-report.txt
    - build-info.yaml (when the package had a manifest)
    - payload/ (payload files, extracted from the archive)
    - scripts/ (script contents)

    Args:
        model: Inspected package
        folder: Destination folder (created if needed)

    Returns:
        Path to the export folder
    """
    folder.mkdir(parents=True, exist_ok=True)
    write_report(model, folder / REPORT_FILE)

    if model.raw_metadata and model.raw_metadata != NO_METADATA_TEXT:
        with open(folder / BUILD_INFO_FILE, "w", encoding="utf-8", newline="") as f:
            f.write(model.raw_metadata)

    payload_files = [entry for entry in model.files if not entry.is_directory]
    if payload_files:
        payload_dir = folder / PAYLOAD_DIR
        payload_dir.mkdir(exist_ok=True)

        with open_archive(model.file_path) as archive:
            members = {_normalize(name): name for name in archive.namelist()}
            for entry in payload_files:
                member = members.get(_normalize(f"{PAYLOAD_DIR}/{entry.relative_path}"))
                if member is None:
                    logger.warning(f"Payload file missing from archive: {entry.relative_path}")
                    continue

                output_path = payload_dir / entry.relative_path
                output_path.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(member) as src, open(output_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)

    if model.scripts:
        scripts_dir = folder / "scripts"
        scripts_dir.mkdir(exist_ok=True)
        for script in model.scripts:
            with open(scripts_dir / script.name, "w", encoding="utf-8", newline="") as f:
                f.write(script.content)

    logger.info(f"Exported {model.file_name} to {folder}")
    return folder

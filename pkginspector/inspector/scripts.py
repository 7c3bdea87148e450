"""PowerShell script discovery.

Scripts live in two flat directories at the package root: scripts/ (native
packages) and tools/ (Chocolatey layout).
"""

import logging
from pathlib import Path

from pkginspector.inspector.models import ScriptEntry

logger = logging.getLogger(__name__)

SCRIPT_DIRS = ("scripts", "tools")
SCRIPT_EXTENSION = ".ps1"
DEFAULT_SCRIPT_TYPE = "PowerShell Script"

SCRIPT_TYPES = {
    "preinstall": "Pre-Install Script",
    "postinstall": "Post-Install Script",
    "chocolateybeforeinstall": "Chocolatey Pre-Install Script",
    "chocolateyinstall": "Chocolatey Install Script",
    "chocolateyuninstall": "Chocolatey Uninstall Script",
}


def classify_script(file_name: str) -> str:
    """Return the script type label for a script file name.

    Matching is exact and case-insensitive on the whole file name.
    """
    lowered = file_name.lower()
    if not lowered.endswith(SCRIPT_EXTENSION):
        return DEFAULT_SCRIPT_TYPE
    return SCRIPT_TYPES.get(lowered[: -len(SCRIPT_EXTENSION)], DEFAULT_SCRIPT_TYPE)


def _read_script(path: Path) -> str:
    with open(path, encoding="utf-8-sig", errors="replace", newline="") as f:
        return f.read()


def _load_directory(directory: Path, directory_name: str) -> list[ScriptEntry]:
    try:
        candidates = sorted(
            item
            for item in directory.iterdir()
            if item.is_file() and item.suffix.lower() == SCRIPT_EXTENSION
        )
    except OSError as e:
        logger.debug(f"Skipping unreadable script directory {directory}: {e}")
        return []

    scripts = []
    for path in candidates:
        try:
            content = _read_script(path)
        except OSError as e:
            logger.warning(f"Skipping unreadable script {directory_name}/{path.name}: {e}")
            continue

        scripts.append(
            ScriptEntry(
                name=path.name,
                script_type=classify_script(path.name),
                content=content,
                relative_path=f"{directory_name}/{path.name}",
            )
        )
    return scripts


def load_scripts(extracted_root: Path) -> list[ScriptEntry]:
    """Load all scripts from an extracted package.

    Args:
        extracted_root: Root of the extracted package

    Returns:
        ScriptEntry list, scripts/ entries before tools/ entries.
        Same-named scripts in both directories are both kept.
    """
    scripts: list[ScriptEntry] = []
    for directory_name in SCRIPT_DIRS:
        directory = extracted_root / directory_name
        if directory.is_dir():
            scripts.extend(_load_directory(directory, directory_name))
    return scripts

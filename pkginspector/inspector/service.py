"""Package inspection orchestration.

This module provides the PackageInspector class, which runs the complete
inspection pipeline for one archive:

    extract -> {metadata, payload scan, scripts} -> tree -> signature -> cleanup

Metadata resolution, payload scanning and script loading are independent
and run concurrently. Only a missing or unreadable archive fails an
inspection; every other problem degrades to default or empty values.
"""

import enum
import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pkginspector.config import Settings, get_settings
from pkginspector.inspector.extractor import extracted_archive
from pkginspector.inspector.metadata import resolve_metadata
from pkginspector.inspector.models import PackageModel
from pkginspector.inspector.scanner import scan_payload
from pkginspector.inspector.scripts import load_scripts
from pkginspector.inspector.signature import detect_signature
from pkginspector.inspector.tree import build_file_tree

logger = logging.getLogger(__name__)


class InspectionState(enum.Enum):
    """Stages of a single inspection run."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    RESOLVING = "resolving"
    SCANNING = "scanning"
    TREE_BUILDING = "tree_building"
    SIGNATURE_CHECKING = "signature_checking"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


StateCallback = Callable[[InspectionState], None]


class PackageInspector:
    """Inspector for .pkg and .nupkg package archives.

    Each call to inspect() extracts into its own working directory, so one
    inspector may be shared by concurrent callers. The ``state`` attribute
    reflects the most recent transition of the most recent run.

    Attributes:
        settings: Application settings (work_dir, max_workers)
        max_workers: Thread pool size for the concurrent scanning stage
        state: Current InspectionState
    """

    def __init__(
        self,
        settings: Settings | None = None,
        max_workers: int | None = None,
        on_state: StateCallback | None = None,
    ):
        """Initialize the inspector.

        Args:
            settings: Settings to use. Defaults to get_settings().
            max_workers: Overrides settings.max_workers when given.
            on_state: Optional callback invoked on every state transition.
        """
        self.settings = settings or get_settings()
        self.max_workers = max(1, max_workers or self.settings.max_workers)
        self.on_state = on_state
        self.state = InspectionState.IDLE

    def _transition(self, state: InspectionState) -> None:
        self.state = state
        logger.debug(f"Inspection state: {state.value}")
        if self.on_state is not None:
            self.on_state(state)

    def inspect(self, archive_path: Path | str) -> PackageModel:
        """Inspect a package archive.

        Args:
            archive_path: Path to the .pkg/.nupkg file

        Returns:
            Fully populated PackageModel

        Raises:
            ArchiveNotFound: If the archive doesn't exist
            ArchiveCorrupt: If the archive can't be opened or extracted
        """
        archive_path = Path(archive_path)
        file_name = archive_path.name
        start_time = time.time()

        logger.info(f"Inspecting {archive_path}")
        self._transition(InspectionState.EXTRACTING)

        try:
            with extracted_archive(archive_path, self.settings.work_dir) as work_dir:
                try:
                    model = self._analyze(work_dir, archive_path, file_name)
                finally:
                    self._transition(InspectionState.CLEANING_UP)
        except Exception:
            if self.state is not InspectionState.CLEANING_UP:
                # Extraction never produced a working directory
                self._transition(InspectionState.CLEANING_UP)
            self._transition(InspectionState.FAILED)
            raise

        self._transition(InspectionState.DONE)
        elapsed = time.time() - start_time
        logger.info(
            f"Inspected {file_name} in {elapsed:.2f}s: "
            f"{model.file_count} files, {model.script_count} scripts"
        )
        return model

    def _analyze(self, work_dir: Path, archive_path: Path, file_name: str) -> PackageModel:
        self._transition(InspectionState.RESOLVING)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            metadata_future = executor.submit(resolve_metadata, work_dir, file_name)
            files_future = executor.submit(scan_payload, work_dir)
            scripts_future = executor.submit(load_scripts, work_dir)
            self._transition(InspectionState.SCANNING)

            metadata, raw_metadata = metadata_future.result()
            files = files_future.result()
            scripts = scripts_future.result()

        self._transition(InspectionState.TREE_BUILDING)
        file_tree = build_file_tree(files)

        self._transition(InspectionState.SIGNATURE_CHECKING)
        signature = detect_signature(raw_metadata)

        return PackageModel(
            file_path=str(archive_path),
            file_name=file_name,
            metadata=metadata,
            raw_metadata=raw_metadata,
            files=tuple(files),
            scripts=tuple(scripts),
            file_tree=file_tree,
            is_signed=signature.is_signed,
            signed_by=signature.signed_by,
        )


def inspect_package(archive_path: Path | str, settings: Settings | None = None) -> PackageModel:
    """Inspect a package archive with a one-off PackageInspector."""
    return PackageInspector(settings=settings).inspect(archive_path)

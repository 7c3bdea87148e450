"""Inspection error types.

Only the archive-level errors propagate out of an inspection. Manifest
failures are recovered by the metadata resolver.
"""

from pathlib import Path


class InspectorError(Exception):
    """Base class for package inspection errors."""


class ArchiveNotFound(InspectorError, FileNotFoundError):
    """The package archive does not exist."""

    def __init__(self, path: Path | str):
        self.path = str(path)
        super().__init__(f"Package file not found: {self.path}")


class ArchiveCorrupt(InspectorError, ValueError):
    """The package archive cannot be opened or contains unsafe members."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot open package {self.path}: {reason}")


class ManifestParseError(InspectorError):
    """A build-info.yaml or .nuspec manifest is malformed."""

"""Package inspection data models.

This module provides the dataclasses produced by an inspection run: the
normalized manifest record, the payload inventory, the payload tree, the
extracted scripts and the aggregate PackageModel that owns them.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import Any

BYTE_UNITS = ("B", "KB", "MB", "GB")


def format_bytes(size: int) -> str:
    """Format a byte count for display.

    Divides by 1024 until the value drops below 1024 or the GB unit is
    reached, then renders at most two decimals with trailing zeros removed.

    Args:
        size: Number of bytes

    Returns:
        Human readable size (e.g., "1.5 KB")
    """
    value = float(size)
    order = 0
    while value >= 1024 and order < len(BYTE_UNITS) - 1:
        order += 1
        value /= 1024

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {BYTE_UNITS[order]}"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


@dataclass
class ProductInfo:
    """Nested product block of a build-info.yaml manifest.

    Attributes:
        identifier: Product identifier (e.g., "com.example.tool")
        version: Product version
        name: Product display name
        developer: Product developer, merged into the top-level author
        description: Product description
    """

    identifier: str = ""
    version: str = ""
    name: str = ""
    developer: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductInfo":
        """Create product info from a manifest mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: _as_text(value) for key, value in data.items() if key in known})


@dataclass
class MetadataRecord:
    """Normalized package metadata.

    Attributes:
        name: Package name
        version: Package version
        description: Human-readable description
        author: Package author
        license: License identifier or URL
        homepage: Project homepage URL
        dependencies: Dependency identifiers, in manifest order
        target: Install target path
        install_location: Install location on the target system
        restart_action: Restart action token
        product: Nested product block (optional)
    """

    name: str = ""
    version: str = ""
    description: str = ""
    author: str = ""
    license: str = ""
    homepage: str = ""
    dependencies: list[str] = field(default_factory=list)
    target: str = "/"
    install_location: str = ""
    restart_action: str = "None"
    product: ProductInfo | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetadataRecord":
        """Create a record from a build-info.yaml mapping.

        Keys are matched by their underscored names (``install_location``,
        ``restart_action``). Unknown keys are ignored and null values fall
        back to the field defaults.

        Args:
            data: Parsed manifest mapping

        Returns:
            MetadataRecord instance
        """
        record = cls()
        for key in ("name", "version", "description", "author", "license", "homepage"):
            setattr(record, key, _as_text(data.get(key)))

        record.target = _as_text(data.get("target"), "/")
        record.install_location = _as_text(data.get("install_location"))
        record.restart_action = _as_text(data.get("restart_action"), "None")

        dependencies = data.get("dependencies") or []
        if isinstance(dependencies, (str, bytes)):
            dependencies = [dependencies]
        record.dependencies = [_as_text(dep) for dep in dependencies if dep is not None]

        product = data.get("product")
        if isinstance(product, dict):
            record.product = ProductInfo.from_dict(product)

        return record

    def merge_product(self) -> None:
        """Fill blank top-level identity fields from the product block."""
        if self.product is None:
            return
        if _is_blank(self.name):
            self.name = self.product.name
        if _is_blank(self.version):
            self.version = self.product.version
        if _is_blank(self.author):
            self.author = self.product.developer
        if _is_blank(self.description):
            self.description = self.product.description

    def apply_defaults(self, fallback_name: str) -> None:
        """Replace blank name, version and description with defaults."""
        if _is_blank(self.name):
            self.name = fallback_name
        if _is_blank(self.version):
            self.version = "Unknown"
        if _is_blank(self.description):
            self.description = "No description available"


@dataclass(frozen=True)
class FileEntry:
    """A file or directory found in the package payload.

    Attributes:
        name: Base name
        relative_path: Path relative to the payload root, "/"-separated
        size: Size in bytes (0 for directories)
        is_directory: True for directory entries
    """

    name: str
    relative_path: str
    size: int = 0
    is_directory: bool = False

    @property
    def size_formatted(self) -> str:
        return format_bytes(self.size)


@dataclass
class FileTreeNode:
    """Node in the payload file tree.

    Synthetic directory nodes (created only to hold children) have an
    empty ``full_path``.
    """

    name: str
    full_path: str = ""
    is_directory: bool = False
    size: int = 0
    children: list["FileTreeNode"] = field(default_factory=list)

    @property
    def size_formatted(self) -> str:
        return "" if self.is_directory else format_bytes(self.size)

    @property
    def icon(self) -> str:
        return "📁" if self.is_directory else "📄"

    def iter_nodes(self) -> Iterator["FileTreeNode"]:
        """Yield this node and all descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def leaf_count(self) -> int:
        return sum(1 for node in self.iter_nodes() if not node.is_directory)

    def find(self, path: str) -> "FileTreeNode | None":
        """Find a descendant by its payload-relative path.

        Both slash styles are accepted and a leading slash is ignored.
        An empty path returns this node.
        """
        parts = [part for part in path.replace("\\", "/").split("/") if part]
        current = self
        for part in parts:
            match = next((child for child in current.children if child.name == part), None)
            if match is None:
                return None
            current = match
        return current


@dataclass(frozen=True)
class ScriptEntry:
    """A PowerShell script shipped in the package.

    Attributes:
        name: File name (e.g., "chocolateyInstall.ps1")
        script_type: Classified label (e.g., "Chocolatey Install Script")
        content: Full script text
        relative_path: Path relative to the archive root (e.g., "tools/x.ps1")
    """

    name: str
    script_type: str
    content: str
    relative_path: str


@dataclass(frozen=True)
class SignatureInfo:
    """Signature metadata recorded in a package manifest.

    Presence of the fields is all that is checked; values are never
    validated.
    """

    is_signed: bool = False
    signed_by: str = ""
    signed_at: str | None = None
    certificate_hash: str | None = None


@dataclass(frozen=True)
class PackageModel:
    """Complete result of inspecting one package archive.

    Attributes:
        file_path: Path of the inspected archive
        file_name: Archive file name
        metadata: Normalized metadata record
        raw_metadata: Verbatim manifest text
        files: Payload inventory in scan order
        scripts: Extracted scripts, scripts/ before tools/
        file_tree: Payload tree rooted at a synthetic "payload" node
        is_signed: True when signature metadata is present
        signed_by: Certificate subject (empty when not recorded)
    """

    file_path: str
    file_name: str
    metadata: MetadataRecord
    raw_metadata: str
    files: tuple[FileEntry, ...] = ()
    scripts: tuple[ScriptEntry, ...] = ()
    file_tree: FileTreeNode = field(
        default_factory=lambda: FileTreeNode(name="payload", is_directory=True)
    )
    is_signed: bool = False
    signed_by: str = ""

    @property
    def file_count(self) -> int:
        return sum(1 for entry in self.files if not entry.is_directory)

    @property
    def script_count(self) -> int:
        return len(self.scripts)

    @property
    def has_dependencies(self) -> bool:
        return bool(self.metadata.dependencies)

    @property
    def signature_status(self) -> str:
        return "Signed" if self.is_signed else "Unsigned"

"""Package inspection pipeline for pkginspector.

This module provides the components that turn a .pkg/.nupkg archive into
an immutable PackageModel: extraction, manifest resolution, payload
scanning, tree building, script loading and signature detection.
"""

from pkginspector.inspector.errors import (
    ArchiveCorrupt,
    ArchiveNotFound,
    InspectorError,
    ManifestParseError,
)
from pkginspector.inspector.export import export_file, export_package
from pkginspector.inspector.extractor import extract_archive, extracted_archive
from pkginspector.inspector.metadata import (
    NO_METADATA_TEXT,
    create_default_metadata,
    parse_build_info,
    parse_nuspec,
    resolve_metadata,
)
from pkginspector.inspector.models import (
    FileEntry,
    FileTreeNode,
    MetadataRecord,
    PackageModel,
    ProductInfo,
    ScriptEntry,
    SignatureInfo,
    format_bytes,
)
from pkginspector.inspector.report import read_raw_metadata, render_report, write_report
from pkginspector.inspector.scanner import scan_payload
from pkginspector.inspector.scripts import classify_script, load_scripts
from pkginspector.inspector.service import InspectionState, PackageInspector, inspect_package
from pkginspector.inspector.signature import detect_signature, read_archive_signature
from pkginspector.inspector.tree import build_file_tree

__all__ = [
    # Errors
    "InspectorError",
    "ArchiveNotFound",
    "ArchiveCorrupt",
    "ManifestParseError",
    # Models
    "PackageModel",
    "MetadataRecord",
    "ProductInfo",
    "FileEntry",
    "FileTreeNode",
    "ScriptEntry",
    "SignatureInfo",
    "format_bytes",
    # Pipeline stages
    "extract_archive",
    "extracted_archive",
    "resolve_metadata",
    "parse_build_info",
    "parse_nuspec",
    "create_default_metadata",
    "NO_METADATA_TEXT",
    "scan_payload",
    "build_file_tree",
    "load_scripts",
    "classify_script",
    "detect_signature",
    "read_archive_signature",
    # Orchestration
    "PackageInspector",
    "InspectionState",
    "inspect_package",
    # Reports and export
    "render_report",
    "write_report",
    "read_raw_metadata",
    "export_file",
    "export_package",
]

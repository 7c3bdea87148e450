"""Manifest discovery and parsing.

This module resolves package metadata from an extracted package root.
Resolution order:

1. build-info.yaml at the root
2. the first *.nuspec file at the root
3. a default record derived from the archive file name

Malformed manifests never fail an inspection: the raw text is kept for
display and the default record is returned instead.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import yaml

from pkginspector.inspector.errors import ManifestParseError
from pkginspector.inspector.models import MetadataRecord

logger = logging.getLogger(__name__)

BUILD_INFO_FILE = "build-info.yaml"
NO_METADATA_TEXT = "No metadata file found"

NULL_TAG = "tag:yaml.org,2002:null"


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps every scalar except null as its literal text.

    Manifest values such as ``version: 1.10`` or ``version: 010`` must come
    back exactly as written, not as floats or octal integers.
    """


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag == NULL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _archive_stem(file_name: str) -> str:
    return Path(file_name).stem


def create_default_metadata(file_name: str) -> MetadataRecord:
    """Create the metadata record used when no usable manifest exists.

    Args:
        file_name: Archive file name (e.g., "tool-1.0.pkg")

    Returns:
        MetadataRecord named after the archive stem
    """
    return MetadataRecord(
        name=_archive_stem(file_name),
        version="Unknown",
        description=NO_METADATA_TEXT,
        author="Unknown",
        license="Unknown",
        target="/",
        restart_action="None",
    )


def _read_text(path: Path) -> str:
    # utf-8-sig drops the BOM that Windows tooling tends to write
    with open(path, encoding="utf-8-sig", errors="replace", newline="") as f:
        return f.read()


def parse_build_info(text: str) -> MetadataRecord:
    """Parse build-info.yaml content.

    Args:
        text: Raw YAML text

    Returns:
        MetadataRecord with the manifest values (no merge or defaults applied)

    Raises:
        ManifestParseError: If the YAML is malformed or not a mapping
    """
    try:
        data = yaml.load(text, Loader=ManifestLoader)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"Invalid YAML in {BUILD_INFO_FILE}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestParseError(f"{BUILD_INFO_FILE} does not contain a mapping")

    return MetadataRecord.from_dict(data)


def parse_nuspec(text: str, file_name: str) -> MetadataRecord:
    """Parse .nuspec XML content.

    Elements are looked up in the root element's default namespace.

    Args:
        text: Raw XML text
        file_name: Archive file name, used for the fallback package name

    Returns:
        MetadataRecord built from the <metadata> element

    Raises:
        ManifestParseError: If the XML is malformed or has no <metadata>
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ManifestParseError(f"Invalid nuspec XML: {e}") from e

    namespace = root.tag[1:].split("}", 1)[0] if root.tag.startswith("{") else ""
    prefix = f"{{{namespace}}}" if namespace else ""

    metadata = root.find(f"{prefix}metadata")
    if metadata is None:
        raise ManifestParseError("nuspec has no <metadata> element")

    def element_text(tag: str) -> str | None:
        element = metadata.find(f"{prefix}{tag}")
        if element is None:
            return None
        return element.text or ""

    license_text = element_text("license")
    if license_text is None:
        license_text = element_text("licenseUrl")

    return MetadataRecord(
        name=_or_default(element_text("id"), _archive_stem(file_name)),
        version=_or_default(element_text("version"), "Unknown"),
        description=_or_default(element_text("description"), "No description"),
        author=_or_default(element_text("authors"), "Unknown"),
        license=_or_default(license_text, "Unknown"),
        homepage=_or_default(element_text("projectUrl"), ""),
        target="/",
        restart_action="None",
    )


def _or_default(value: str | None, default: str) -> str:
    return default if value is None else value


def _resolve_build_info(path: Path, file_name: str) -> tuple[MetadataRecord, str]:
    raw_text = _read_text(path)
    try:
        record = parse_build_info(raw_text)
    except ManifestParseError as e:
        logger.warning(f"Falling back to default metadata: {e}")
        return create_default_metadata(file_name), raw_text

    record.merge_product()
    record.apply_defaults(_archive_stem(file_name))
    return record, raw_text


def _resolve_nuspec(path: Path, file_name: str) -> tuple[MetadataRecord, str]:
    raw_text = _read_text(path)
    try:
        record = parse_nuspec(raw_text, file_name)
    except ManifestParseError as e:
        logger.warning(f"Falling back to default metadata for {path.name}: {e}")
        record = create_default_metadata(file_name)
    return record, raw_text


def find_nuspec(extracted_root: Path) -> Path | None:
    """Return the first .nuspec file at the package root, if any."""
    candidates = sorted(
        item
        for item in extracted_root.iterdir()
        if item.is_file() and item.suffix.lower() == ".nuspec"
    )
    return candidates[0] if candidates else None


def resolve_metadata(extracted_root: Path, file_name: str) -> tuple[MetadataRecord, str]:
    """Locate and parse the package manifest.

    Args:
        extracted_root: Root of the extracted package
        file_name: Archive file name, used for default values

    Returns:
        Tuple of (normalized metadata record, raw manifest text)
    """
    build_info_path = extracted_root / BUILD_INFO_FILE
    if build_info_path.is_file():
        logger.debug(f"Using {BUILD_INFO_FILE}")
        return _resolve_build_info(build_info_path, file_name)

    nuspec_path = find_nuspec(extracted_root)
    if nuspec_path is not None:
        logger.debug(f"Using {nuspec_path.name}")
        return _resolve_nuspec(nuspec_path, file_name)

    logger.info(f"No metadata file found in {file_name}")
    return create_default_metadata(file_name), NO_METADATA_TEXT

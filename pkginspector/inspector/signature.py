"""Signature metadata detection.

Package archives are plain ZIP files and carry no container-level
signature. A separate signing tool appends ``signed_at``,
``certificate_subject`` and ``certificate_hash`` keys to build-info.yaml;
this module only reports whether those keys are present.
"""

import logging
from pathlib import Path

from pkginspector.inspector.errors import ArchiveCorrupt
from pkginspector.inspector.extractor import ARCHIVE_READ_ERRORS, open_archive
from pkginspector.inspector.metadata import BUILD_INFO_FILE
from pkginspector.inspector.models import SignatureInfo

logger = logging.getLogger(__name__)

SIGNED_AT_KEY = "signed_at:"
CERTIFICATE_SUBJECT_KEY = "certificate_subject:"
CERTIFICATE_HASH_KEY = "certificate_hash:"


def _value_after_colon(line: str) -> str:
    return line.split(":", 1)[1].strip()


def detect_signature(raw_metadata: str) -> SignatureInfo:
    """Detect signature fields in raw manifest text.

    A ``signed_at`` or ``certificate_hash`` line marks the package as
    signed. A ``certificate_subject`` line records the signer, even when
    neither of the other keys is present.

    Args:
        raw_metadata: Verbatim manifest text

    Returns:
        SignatureInfo (unsigned with an empty signer if no fields are found)
    """
    is_signed = False
    signed_by = ""
    signed_at = None
    certificate_hash = None

    for line in raw_metadata.splitlines():
        stripped = line.lstrip()
        if stripped.startswith(SIGNED_AT_KEY):
            is_signed = True
            signed_at = _value_after_colon(stripped)
        elif stripped.startswith(CERTIFICATE_HASH_KEY):
            is_signed = True
            certificate_hash = _value_after_colon(stripped)
        elif stripped.startswith(CERTIFICATE_SUBJECT_KEY):
            signed_by = _value_after_colon(stripped)

    return SignatureInfo(
        is_signed=is_signed,
        signed_by=signed_by,
        signed_at=signed_at,
        certificate_hash=certificate_hash,
    )


def read_archive_signature(archive_path: Path | str) -> SignatureInfo | None:
    """Read signature fields straight from an archive's build-info.yaml.

    The archive is not extracted.

    Args:
        archive_path: Path to the package archive

    Returns:
        SignatureInfo, or None if the archive has no build-info.yaml

    Raises:
        ArchiveNotFound: If the archive doesn't exist
        ArchiveCorrupt: If the archive or its manifest member can't be read
    """
    with open_archive(archive_path) as archive:
        try:
            data = archive.read(BUILD_INFO_FILE)
        except KeyError:
            logger.debug(f"No {BUILD_INFO_FILE} in {archive_path}")
            return None
        except ARCHIVE_READ_ERRORS as e:
            raise ArchiveCorrupt(archive_path, str(e)) from e

    return detect_signature(data.decode("utf-8-sig", errors="replace"))

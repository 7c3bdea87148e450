"""Tests for signature metadata detection."""

from pathlib import Path

import pytest

from pkginspector.inspector.errors import ArchiveCorrupt, ArchiveNotFound
from pkginspector.inspector.signature import detect_signature, read_archive_signature

SIGNED_YAML = """name: sample-tool
version: 1.0.0
signed_at: 2026-03-01T12:00:00Z
certificate_subject: Example Corp
certificate_hash: AB12CD34
"""


class TestDetectSignature:
    """Test detect_signature."""

    def test_unsigned(self):
        """Test text without signature keys is unsigned."""
        info = detect_signature("name: tool\nversion: 1.0\n")
        assert not info.is_signed
        assert info.signed_by == ""
        assert info.signed_at is None
        assert info.certificate_hash is None

    def test_fully_signed(self):
        """Test all three keys are captured."""
        info = detect_signature(SIGNED_YAML)
        assert info.is_signed
        assert info.signed_by == "Example Corp"
        assert info.signed_at == "2026-03-01T12:00:00Z"
        assert info.certificate_hash == "AB12CD34"

    def test_signed_at_alone_marks_signed(self):
        """Test signed_at without a subject marks signed with no signer."""
        info = detect_signature("signed_at: 2026-01-01\n")
        assert info.is_signed
        assert info.signed_by == ""

    def test_certificate_hash_alone_marks_signed(self):
        """Test certificate_hash alone marks signed."""
        assert detect_signature("certificate_hash: FF00\n").is_signed

    def test_subject_alone_records_signer_only(self):
        """Test a subject without signed_at/certificate_hash is not signed."""
        info = detect_signature("certificate_subject: Example Corp\n")
        assert not info.is_signed
        assert info.signed_by == "Example Corp"

    def test_indented_keys(self):
        """Test leading whitespace is ignored."""
        info = detect_signature("signature:\n    signed_at: now\n    certificate_subject:  Corp \n")
        assert info.is_signed
        assert info.signed_by == "Corp"

    def test_subject_keeps_text_after_first_colon(self):
        """Test colons inside the subject value are preserved."""
        info = detect_signature("certificate_subject: CN=Example: Corp, O=Example\n")
        assert info.signed_by == "CN=Example: Corp, O=Example"

    def test_crlf_lines(self):
        """Test CRLF line endings do not leak into values."""
        info = detect_signature("certificate_hash: AB\r\ncertificate_subject: Corp\r\n")
        assert info.certificate_hash == "AB"
        assert info.signed_by == "Corp"

    def test_no_metadata_sentinel(self):
        """Test the no-manifest sentinel text is unsigned."""
        assert not detect_signature("No metadata file found").is_signed


class TestReadArchiveSignature:
    """Test read_archive_signature."""

    def test_reads_manifest_from_archive(self, make_package):
        """Test signature fields are read without extracting."""
        archive = make_package({"build-info.yaml": SIGNED_YAML})
        info = read_archive_signature(archive)
        assert info.is_signed
        assert info.signed_by == "Example Corp"

    def test_no_manifest(self, make_package):
        """Test None is returned when there is no build-info.yaml."""
        archive = make_package({"payload/a.txt": "a"})
        assert read_archive_signature(archive) is None

    def test_missing_archive(self, tmp_path: Path):
        """Test a missing archive raises ArchiveNotFound."""
        with pytest.raises(ArchiveNotFound):
            read_archive_signature(tmp_path / "missing.pkg")

    def test_corrupt_archive(self, tmp_path: Path):
        """Test a non-ZIP file raises ArchiveCorrupt."""
        archive = tmp_path / "broken.pkg"
        archive.write_text("garbage")
        with pytest.raises(ArchiveCorrupt):
            read_archive_signature(archive)

    def test_corrupt_manifest_member(self, make_damaged_package):
        """Test a damaged build-info.yaml stream raises ArchiveCorrupt."""
        archive = make_damaged_package("build-info.yaml", prefix=SIGNED_YAML)
        with pytest.raises(ArchiveCorrupt):
            read_archive_signature(archive)

"""Shared fixtures for package inspection tests."""

import struct
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

BUILD_INFO_YAML = """name: sample-tool
version: 2.1.0
description: Sample tool for inspection tests
author: Example Corp
license: MIT
homepage: https://example.com/sample-tool
dependencies:
  - dotnet-runtime
  - vcredist2019
target: /
install_location: C:\\Program Files\\SampleTool
restart_action: RequireRestart
"""

NUSPEC_XML = """<?xml version="1.0" encoding="utf-8"?>
<package xmlns="http://schemas.microsoft.com/packaging/2015/06/nuspec.xsd">
  <metadata>
    <id>sample.nuget</id>
    <version>3.4.5</version>
    <description>NuGet sample package</description>
    <authors>NuGet Team</authors>
    <licenseUrl>https://example.com/license</licenseUrl>
    <projectUrl>https://example.com/project</projectUrl>
  </metadata>
</package>
"""


PackageFactory = Callable[..., Path]


@pytest.fixture
def make_package(tmp_path: Path) -> PackageFactory:
    """Return a factory that writes a ZIP package from a {member: content} map.

    Members ending with "/" are written as explicit directory entries.
    """

    def _make(members: dict[str, str | bytes], name: str = "sample-tool.pkg") -> Path:
        archive_path = tmp_path / name
        with zipfile.ZipFile(archive_path, "w", zipfile.ZIP_DEFLATED) as archive:
            for member, content in members.items():
                archive.writestr(member, content)
        return archive_path

    return _make


@pytest.fixture
def full_package(make_package: PackageFactory) -> Path:
    """Package with manifest, payload tree and scripts in both script dirs."""
    return make_package(
        {
            "build-info.yaml": BUILD_INFO_YAML,
            "payload/": "",
            "payload/bin/": "",
            "payload/bin/tool.exe": b"\x00" * 2048,
            "payload/bin/tool.dll": b"\x00" * 1536,
            "payload/config/settings.json": '{"debug": false}',
            "payload/README.txt": "read me",
            "scripts/preinstall.ps1": "Write-Host 'pre'",
            "scripts/postinstall.ps1": "Write-Host 'post'",
            "tools/chocolateyInstall.ps1": "Install-ChocolateyPackage",
            "tools/notes.txt": "not a script",
        }
    )


@pytest.fixture
def build_info_yaml() -> str:
    return BUILD_INFO_YAML


@pytest.fixture
def nuspec_xml() -> str:
    return NUSPEC_XML


def _flip_member_data(archive_path: Path, member: str) -> None:
    # The central directory stays intact, so only reading the member fails
    with zipfile.ZipFile(archive_path) as archive:
        info = archive.getinfo(member)

    data = bytearray(archive_path.read_bytes())
    name_length, extra_length = struct.unpack_from("<HH", data, info.header_offset + 26)
    start = info.header_offset + 30 + name_length + extra_length
    middle = start + info.compress_size // 2
    for offset in range(middle - 20, middle + 20):
        data[offset] ^= 0xFF
    archive_path.write_bytes(bytes(data))


@pytest.fixture
def make_damaged_package(make_package: PackageFactory) -> PackageFactory:
    """Return a factory for packages with one member whose compressed data is damaged.

    The damaged member gets ``prefix`` followed by enough compressible text to
    produce a real deflate stream. Other members are written intact.
    """

    def _make(damaged: str, prefix: str = "", others: dict[str, str] | None = None) -> Path:
        filler = "".join(f"line {i}: value {i * i}\n" for i in range(2000))
        archive_path = make_package({**(others or {}), damaged: prefix + filler})
        _flip_member_data(archive_path, damaged)
        return archive_path

    return _make

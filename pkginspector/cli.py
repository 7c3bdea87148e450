"""
pkginspector CLI - Inspect .pkg and .nupkg package archives.

Usage:
    pkginspector MyPackage.pkg
        Opens the package in the console viewer.

    pkginspector -s MyPackage.pkg
        Opens the package and shows the Scripts section first.

    pkginspector -f /Apps MyPackage.pkg
        Opens the package and navigates to a payload path.

    pkginspector -g [-q] MyPackage.pkg
        Shows signature information.

    pkginspector -p [-q] MyPackage.pkg
        Lists component packages (.pkg archives never contain any).

    pkginspector -e report.md MyPackage.pkg
        Writes an inspection report (.md for Markdown, anything else for text).

    pkginspector --export-dir out/ MyPackage.pkg
        Exports report, manifest, payload and scripts to a folder.

    pkginspector --recent
        Lists recently opened packages.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from pkginspector.config import Settings, get_settings
from pkginspector.inspector import (
    InspectorError,
    PackageInspector,
    export_package,
    read_archive_signature,
    write_report,
)
from pkginspector.inspector.extractor import ARCHIVE_READ_ERRORS
from pkginspector.recent import FileRecentStorage, RecentPackages
from pkginspector.viewer import show_package

logger = logging.getLogger(__name__)

REVEAL_FILE_ENV = "PKGINSPECTOR_REVEAL_FILE"
REVEAL_SCRIPTS_ENV = "PKGINSPECTOR_REVEAL_SCRIPTS"


def _recent_packages(settings: Settings) -> RecentPackages:
    return RecentPackages(
        FileRecentStorage(Path(settings.recent_file).expanduser()),
        limit=settings.recent_limit,
    )


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def cmd_signature(package_path: Path, quiet: bool) -> None:
    """Print signature information read from the package manifest."""
    try:
        signature = read_archive_signature(package_path)
    except InspectorError as e:
        print(f"Error reading package: {e}", file=sys.stderr)
        sys.exit(1)

    if signature is None:
        print("No signature information found (no build-info.yaml)")
        return

    if signature.signed_by:
        if quiet:
            print(
                f"Signed|{signature.signed_by}|{signature.signed_at or ''}"
                f"|{signature.certificate_hash or ''}"
            )
            return
        print(f'Signature information for "{package_path.name}"')
        print(f'   summary                 : Signed by "{signature.signed_by}"')
        if signature.signed_at:
            print(f"   signed at               : {signature.signed_at}")
        if signature.certificate_hash:
            print(f"   certificate hash        : {signature.certificate_hash}")
    elif quiet:
        print("Unsigned")
    else:
        print(f'Package "{package_path.name}" is not signed')


def cmd_component_packages(package_path: Path, quiet: bool) -> None:
    """Report component packages; the .pkg format has none."""
    if quiet:
        return
    print(f'Package "{package_path.name}" does not contain component packages')
    print("(Component packages are not applicable to .pkg format)")


def _inspect(package_path: Path, settings: Settings):
    try:
        return PackageInspector(settings=settings).inspect(package_path)
    except InspectorError as e:
        _fail(str(e))


def cmd_export(package_path: Path, args: argparse.Namespace, settings: Settings) -> None:
    """Write an inspection report and/or export the package to a folder."""
    model = _inspect(package_path, settings)

    try:
        if args.export:
            report_path = write_report(model, Path(args.export))
            if not args.quiet:
                print(f"Report written to {report_path}")
        if args.export_dir:
            folder = export_package(model, Path(args.export_dir))
            if not args.quiet:
                print(f"Package exported to {folder}")
    except (InspectorError, *ARCHIVE_READ_ERRORS) as e:
        _fail(str(e))


def cmd_view(package_path: Path, args: argparse.Namespace) -> None:
    """Open a package in the console viewer.

    Reveal options are handed to the viewer through the environment, the
    same way a separately launched viewer process would receive them.
    """
    if args.reveal_file:
        os.environ[REVEAL_FILE_ENV] = args.reveal_file
    if args.reveal_scripts:
        os.environ[REVEAL_SCRIPTS_ENV] = "true"

    settings = get_settings()
    model = _inspect(package_path, settings)
    _recent_packages(settings).add(package_path)

    print(show_package(model, settings), end="")


def cmd_recent(settings: Settings, quiet: bool) -> None:
    """List recently opened packages."""
    entries = _recent_packages(settings).entries()
    if not entries:
        if not quiet:
            print("No recent packages")
        return
    for path in entries:
        print(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pkginspector",
        description="pkginspector - Package Inspector for .pkg and .nupkg archives",
    )
    parser.add_argument("package", nargs="?", help="Path to the package file")
    parser.add_argument(
        "-f",
        "--reveal-file",
        metavar="PATH",
        help="Open package and navigate to specified file",
    )
    parser.add_argument(
        "-s", "--reveal-scripts", action="store_true", help="Open package and show Scripts section"
    )
    parser.add_argument(
        "-g", "--show-signature", action="store_true", help="Show package signature information"
    )
    parser.add_argument(
        "-p",
        "--show-component-packages",
        action="store_true",
        help="List component packages",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output for scripting")
    parser.add_argument(
        "-e", "--export", metavar="PATH", help="Write an inspection report (.md for Markdown)"
    )
    parser.add_argument(
        "--export-dir", metavar="DIR", help="Export report, manifest, payload and scripts"
    )
    parser.add_argument("--recent", action="store_true", help="List recently opened packages")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv

    if argv and argv[0].lower() == "help":
        parser.print_help()
        return

    args = parser.parse_args(argv)
    settings = get_settings()

    # Configure logging
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.recent:
        cmd_recent(settings, args.quiet)
        return

    if not args.package:
        _fail("No package path specified")

    package_path = Path(args.package)
    if not package_path.is_file():
        _fail(f"Package file not found: {args.package}")

    if args.show_signature:
        cmd_signature(package_path, args.quiet)
    elif args.show_component_packages:
        cmd_component_packages(package_path, args.quiet)
    elif args.export or args.export_dir:
        cmd_export(package_path, args, settings)
    else:
        cmd_view(package_path, args)


if __name__ == "__main__":
    main()

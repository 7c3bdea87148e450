"""Inspection report rendering.

Reports come in two layouts, plain text and Markdown. Both end with a
"Raw Metadata" section that holds the manifest text verbatim, which
read_raw_metadata() recovers.
"""

from datetime import datetime
from pathlib import Path

from pkginspector.inspector.models import PackageModel

RULE = "-" * 80
TEXT_RAW_HEADER = f"RAW METADATA\n{RULE}\n"
MARKDOWN_RAW_HEADER = "## Raw Metadata\n\n```yaml\n"
MARKDOWN_FENCE_END = "\n```\n"


def _signature_text(model: PackageModel) -> str:
    if model.is_signed:
        return f"{model.signature_status} ({model.signed_by})"
    return model.signature_status


def _sorted_files(model: PackageModel):
    return sorted(model.files, key=lambda f: f.relative_path)


def render_markdown(model: PackageModel, inspected_at: datetime | None = None) -> str:
    """Render a Markdown inspection report."""
    inspected_at = inspected_at or datetime.now()
    meta = model.metadata
    lines = [
        f"# Package Inspection Report: {meta.name}",
        "",
        f"**Package File:** `{model.file_name}`",
        f"**Inspection Date:** {inspected_at:%Y-%m-%d %H:%M:%S}",
        "",
        "## Package Overview",
        "",
        "| Property | Value |",
        "|----------|-------|",
        f"| Name | {meta.name} |",
        f"| Version | {meta.version} |",
        f"| Description | {meta.description} |",
        f"| Author | {meta.author} |",
        f"| License | {meta.license} |",
        f"| Homepage | {meta.homepage} |",
        f"| Target | {meta.target} |",
        f"| Signature | {_signature_text(model)} |",
        "",
        "## Installation Details",
        "",
        f"- **Install Location:** `{meta.install_location}`",
        f"- **Restart Action:** {meta.restart_action}",
        f"- **File Count:** {model.file_count}",
        f"- **Script Count:** {model.script_count}",
        "",
    ]

    if model.has_dependencies:
        lines += ["## Dependencies", ""]
        lines += [f"- {dep}" for dep in meta.dependencies]
        lines.append("")

    lines += ["## Files", ""]
    for entry in _sorted_files(model):
        icon = "📁" if entry.is_directory else "📄"
        size = "" if entry.is_directory else f"({entry.size_formatted})"
        lines.append(f"- {icon} `{entry.relative_path}` {size}".rstrip())
    lines.append("")

    if model.scripts:
        lines += ["## Scripts", ""]
        for script in model.scripts:
            lines += [
                f"### {script.name} ({script.script_type})",
                "",
                "```powershell",
                script.content,
                "```",
                "",
            ]

    return "\n".join(lines) + "\n" + MARKDOWN_RAW_HEADER + model.raw_metadata + MARKDOWN_FENCE_END


def render_text(model: PackageModel, inspected_at: datetime | None = None) -> str:
    """Render a plain-text inspection report."""
    inspected_at = inspected_at or datetime.now()
    meta = model.metadata
    lines = [
        f"Package Inspection Report: {meta.name}",
        "=" * 80,
        "",
        f"Package File: {model.file_name}",
        f"Inspection Date: {inspected_at:%Y-%m-%d %H:%M:%S}",
        "",
        "PACKAGE OVERVIEW",
        RULE,
        f"Name: {meta.name}",
        f"Version: {meta.version}",
        f"Description: {meta.description}",
        f"Author: {meta.author}",
        f"License: {meta.license}",
        f"Homepage: {meta.homepage}",
        f"Target: {meta.target}",
        f"Signature: {_signature_text(model)}",
        "",
        "INSTALLATION DETAILS",
        RULE,
        f"Install Location: {meta.install_location}",
        f"Restart Action: {meta.restart_action}",
        f"File Count: {model.file_count}",
        f"Script Count: {model.script_count}",
        "",
    ]

    if model.has_dependencies:
        lines += ["DEPENDENCIES", RULE]
        lines += [f"  - {dep}" for dep in meta.dependencies]
        lines.append("")

    lines += ["FILES", RULE]
    for entry in _sorted_files(model):
        kind = "[DIR]" if entry.is_directory else "[FILE]"
        size = "" if entry.is_directory else f"({entry.size_formatted})"
        lines.append(f"{kind} {entry.relative_path} {size}".rstrip())
    lines.append("")

    if model.scripts:
        lines += ["SCRIPTS", RULE]
        for script in model.scripts:
            lines += ["", f"=== {script.name} ({script.script_type}) ===", "", script.content, ""]

    return "\n".join(lines) + "\n" + TEXT_RAW_HEADER + model.raw_metadata + "\n"


def render_report(
    model: PackageModel, markdown: bool = False, inspected_at: datetime | None = None
) -> str:
    """Render an inspection report in text or Markdown layout."""
    if markdown:
        return render_markdown(model, inspected_at)
    return render_text(model, inspected_at)


def write_report(model: PackageModel, path: Path) -> Path:
    """Write an inspection report; a .md suffix selects Markdown.

    Args:
        model: Inspected package
        path: Output file (parent directories are created)

    Returns:
        Path to the written report
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    markdown = path.suffix.lower() == ".md"
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(render_report(model, markdown=markdown))
    return path


def read_raw_metadata(report_text: str) -> str:
    """Recover the raw manifest text from a rendered report.

    Args:
        report_text: Report produced by render_report()/write_report()

    Returns:
        The manifest text exactly as it was rendered

    Raises:
        ValueError: If the report has no Raw Metadata section
    """
    # The raw section is always last, so the first header marks its start
    if MARKDOWN_RAW_HEADER in report_text:
        start = report_text.index(MARKDOWN_RAW_HEADER) + len(MARKDOWN_RAW_HEADER)
        if not report_text.endswith(MARKDOWN_FENCE_END):
            raise ValueError("Unterminated Raw Metadata section")
        return report_text[start : len(report_text) - len(MARKDOWN_FENCE_END)]

    if TEXT_RAW_HEADER in report_text:
        start = report_text.index(TEXT_RAW_HEADER) + len(TEXT_RAW_HEADER)
        body = report_text[start:]
        return body[:-1] if body.endswith("\n") else body

    raise ValueError("Report has no Raw Metadata section")

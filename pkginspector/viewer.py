"""Console viewer for inspected packages.

Renders the same sections as the package window: Overview, Files, Scripts
and Raw Metadata. The viewer can be pre-navigated to a payload path or to
the Scripts section, either directly or through the PKGINSPECTOR_REVEAL_*
environment handoff read by Settings.
"""

from pkginspector.config import Settings
from pkginspector.inspector.models import FileTreeNode, PackageModel

SECTION_RULE = "=" * 50


def _section(title: str) -> list[str]:
    return ["", title, SECTION_RULE]


def render_overview(model: PackageModel) -> list[str]:
    meta = model.metadata
    lines = _section("Overview")
    lines += [
        f"  Name:             {meta.name}",
        f"  Version:          {meta.version}",
        f"  Description:      {meta.description}",
        f"  Author:           {meta.author}",
        f"  License:          {meta.license}",
        f"  Homepage:         {meta.homepage}",
        f"  Target:           {meta.target}",
        f"  Install Location: {meta.install_location}",
        f"  Restart Action:   {meta.restart_action}",
        f"  Signature:        {model.signature_status}",
    ]
    if model.signed_by:
        lines.append(f"  Signed By:        {model.signed_by}")
    if meta.product is not None and meta.product.identifier:
        lines.append(f"  Product ID:       {meta.product.identifier}")
    if model.has_dependencies:
        lines.append("  Dependencies:")
        lines += [f"    - {dep}" for dep in meta.dependencies]
    lines += [
        f"  Files:            {model.file_count}",
        f"  Scripts:          {model.script_count}",
    ]
    return lines


def render_tree(
    node: FileTreeNode, highlight: FileTreeNode | None = None, depth: int = 0
) -> list[str]:
    """Render a file tree, one node per line, children indented."""
    marker = "> " if node is highlight else "  "
    size = f"  ({node.size_formatted})" if not node.is_directory else ""
    lines = [f"{marker}{'    ' * depth}{node.icon} {node.name}{size}"]
    for child in node.children:
        lines += render_tree(child, highlight, depth + 1)
    return lines


def render_files(model: PackageModel, reveal_file: str | None = None) -> list[str]:
    lines = _section("Files")
    if not model.files:
        lines.append("  (no payload)")
        return lines

    if reveal_file:
        node = model.file_tree.find(reveal_file)
        if node is None:
            lines.append(f"  Not found in payload: {reveal_file}")
        else:
            lines.append(f"  Revealing: {reveal_file}")
            lines += render_tree(node, highlight=node)
            return lines

    lines += render_tree(model.file_tree)
    return lines


def render_scripts(model: PackageModel, include_content: bool = False) -> list[str]:
    lines = _section("Scripts")
    if not model.scripts:
        lines.append("  (no scripts)")
        return lines

    for script in model.scripts:
        lines.append(f"  {script.relative_path}  [{script.script_type}]")
        if include_content:
            lines += ["", script.content.rstrip("\n"), ""]
    return lines


def render_package(
    model: PackageModel, reveal_file: str | None = None, reveal_scripts: bool = False
) -> str:
    """Render an inspected package for the console.

    Args:
        model: Inspected package
        reveal_file: Payload path to navigate to (subtree is shown highlighted)
        reveal_scripts: Show the Scripts section first, with script contents

    Returns:
        Rendered text
    """
    lines = [f"Package: {model.file_name}", f"Path:    {model.file_path}"]

    if reveal_scripts:
        lines += render_scripts(model, include_content=True)
        lines += render_overview(model)
        lines += render_files(model, reveal_file)
    else:
        lines += render_overview(model)
        lines += render_files(model, reveal_file)
        lines += render_scripts(model)

    lines += _section("Raw Metadata")
    lines.append(model.raw_metadata.rstrip("\n"))
    return "\n".join(lines) + "\n"


def show_package(model: PackageModel, settings: Settings) -> str:
    """Render a package using the reveal options carried by settings."""
    return render_package(
        model, reveal_file=settings.reveal_file, reveal_scripts=settings.reveal_scripts
    )

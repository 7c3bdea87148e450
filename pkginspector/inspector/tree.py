"""Payload tree construction.

This module turns the flat payload inventory into a FileTreeNode hierarchy
rooted at a synthetic "payload" node.
"""

from collections.abc import Iterable

from pkginspector.inspector.models import FileEntry, FileTreeNode

ROOT_NAME = "payload"


def build_file_tree(entries: Iterable[FileEntry]) -> FileTreeNode:
    """Build the payload tree from an inventory.

    Entries are sorted by relative path before insertion. Children keep
    insertion order. Directory nodes are shared between explicit directory
    entries and the ancestors of files, so no directory appears twice
    under the same parent. Only directories backed by an explicit entry
    carry a full_path.

    Args:
        entries: Payload inventory (any order)

    Returns:
        Root FileTreeNode named "payload"
    """
    root = FileTreeNode(name=ROOT_NAME, is_directory=True)

    for entry in sorted(entries, key=lambda e: e.relative_path):
        _add_to_tree(root, entry)

    return root


def _add_to_tree(root: FileTreeNode, entry: FileEntry) -> None:
    parts = [part for part in entry.relative_path.replace("\\", "/").split("/") if part]
    current = root

    for index, part in enumerate(parts):
        is_last = index == len(parts) - 1

        if is_last and not entry.is_directory:
            current.children.append(
                FileTreeNode(
                    name=part,
                    full_path=entry.relative_path,
                    is_directory=False,
                    size=entry.size,
                )
            )
            continue

        existing = next(
            (child for child in current.children if child.is_directory and child.name == part),
            None,
        )
        if existing is None:
            existing = FileTreeNode(name=part, is_directory=True)
            current.children.append(existing)
        if is_last and not existing.full_path:
            existing.full_path = entry.relative_path
        current = existing

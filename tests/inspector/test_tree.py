"""Tests for payload tree construction."""

from pkginspector.inspector.models import FileEntry
from pkginspector.inspector.tree import build_file_tree


def file_entry(path: str, size: int = 1) -> FileEntry:
    return FileEntry(name=path.rsplit("/", 1)[-1], relative_path=path, size=size)


def dir_entry(path: str) -> FileEntry:
    return FileEntry(name=path.rsplit("/", 1)[-1], relative_path=path, is_directory=True)


class TestBuildFileTree:
    """Test build_file_tree."""

    def test_empty_inventory(self):
        """Test an empty inventory yields a bare payload root."""
        root = build_file_tree([])
        assert root.name == "payload"
        assert root.is_directory
        assert root.full_path == ""
        assert root.children == []

    def test_leaf_and_directory_counts(self):
        """Test one leaf per file and one node per unique directory prefix."""
        entries = [
            dir_entry("bin"),
            file_entry("bin/tool.exe"),
            file_entry("bin/x64/native.dll"),
            file_entry("docs/guide.md"),
            file_entry("README.txt"),
        ]
        root = build_file_tree(entries)

        nodes = list(root.iter_nodes())[1:]
        directories = sorted(n.name for n in nodes if n.is_directory)
        assert root.leaf_count() == 4
        assert directories == ["bin", "docs", "x64"]

    def test_explicit_and_implied_directories_merge(self):
        """Test an explicit directory entry and a file inside it share one node."""
        root = build_file_tree([file_entry("bin/tool.exe"), dir_entry("bin")])
        assert [c.name for c in root.children] == ["bin"]
        assert [c.name for c in root.children[0].children] == ["tool.exe"]

    def test_input_is_sorted_by_path(self):
        """Test insertion follows sorted relative paths, not input order."""
        root = build_file_tree(
            [file_entry("zeta.txt"), file_entry("alpha.txt"), file_entry("Beta.txt")]
        )
        assert [c.name for c in root.children] == ["Beta.txt", "alpha.txt", "zeta.txt"]

    def test_leaf_fields(self):
        """Test leaf nodes carry their full path and size."""
        root = build_file_tree([file_entry("bin/tool.exe", size=2048)])
        leaf = root.find("bin/tool.exe")
        assert leaf.full_path == "bin/tool.exe"
        assert leaf.size == 2048
        assert not leaf.is_directory
        assert leaf.children == []

    def test_synthetic_directories_have_no_path(self):
        """Test directories created only as ancestors have an empty full_path."""
        root = build_file_tree([dir_entry("bin"), file_entry("bin/x64/native.dll")])
        assert root.find("bin").full_path == "bin"
        assert root.find("bin/x64").full_path == ""

    def test_idempotent_directory_creation(self):
        """Test repeated directory paths never create duplicate siblings."""
        entries = [
            dir_entry("a"),
            dir_entry("a/b"),
            file_entry("a/b/one.txt"),
            file_entry("a/b/two.txt"),
            file_entry("a/three.txt"),
        ]
        root = build_file_tree(entries)

        def assert_unique(node):
            names = [c.name for c in node.children if c.is_directory]
            assert len(names) == len(set(names))
            for child in node.children:
                assert_unique(child)

        assert_unique(root)
        assert root.leaf_count() == 3
        assert [c.name for c in root.find("a").children] == ["b", "three.txt"]

    def test_windows_separators(self):
        """Test backslash separated paths are split into segments."""
        root = build_file_tree([file_entry("bin\\tool.exe")])
        assert root.find("bin").is_directory

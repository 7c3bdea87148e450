"""Tests for the recent packages list."""

from pathlib import Path

from pkginspector.recent import (
    DEFAULT_LIMIT,
    FileRecentStorage,
    MemoryRecentStorage,
    RecentPackages,
)


def make_files(tmp_path: Path, count: int) -> list[Path]:
    paths = []
    for i in range(count):
        path = tmp_path / f"package-{i:02d}.pkg"
        path.write_text("pkg")
        paths.append(path)
    return paths


class TestRecentPackages:
    """Test RecentPackages with in-memory storage."""

    def test_most_recent_first(self, tmp_path: Path):
        """Test newly added paths go to the front."""
        first, second = make_files(tmp_path, 2)
        recent = RecentPackages(MemoryRecentStorage())
        recent.add(first)
        recent.add(second)
        assert recent.entries() == [str(second), str(first)]

    def test_deduplicates(self, tmp_path: Path):
        """Test re-adding a path moves it to the front without duplicates."""
        first, second = make_files(tmp_path, 2)
        storage = MemoryRecentStorage()
        recent = RecentPackages(storage)
        recent.add(first)
        recent.add(second)
        recent.add(first)
        assert recent.entries() == [str(first), str(second)]
        assert storage.paths == [str(first), str(second)]

    def test_limit(self, tmp_path: Path):
        """Test only the most recent 20 paths are kept."""
        paths = make_files(tmp_path, DEFAULT_LIMIT + 5)
        recent = RecentPackages(MemoryRecentStorage())
        for path in paths:
            recent.add(path)

        entries = recent.entries()
        assert len(entries) == DEFAULT_LIMIT
        assert entries[0] == str(paths[-1])
        assert str(paths[0]) not in entries

    def test_ignores_missing_and_empty_paths(self, tmp_path: Path):
        """Test missing files and empty strings are not recorded."""
        storage = MemoryRecentStorage()
        recent = RecentPackages(storage)
        recent.add("")
        recent.add(tmp_path / "missing.pkg")
        assert recent.entries() == []
        assert storage.paths == []

    def test_entries_hide_deleted_files(self, tmp_path: Path):
        """Test files deleted after being recorded are not listed."""
        (path,) = make_files(tmp_path, 1)
        recent = RecentPackages(MemoryRecentStorage())
        recent.add(path)
        path.unlink()
        assert recent.entries() == []

    def test_remove_and_clear(self, tmp_path: Path):
        """Test removing one path and clearing the list."""
        first, second = make_files(tmp_path, 2)
        storage = MemoryRecentStorage()
        recent = RecentPackages(storage)
        recent.add(first)
        recent.add(second)

        assert recent.remove(first)
        assert not recent.remove(first)
        assert storage.paths == [str(second)]

        recent.clear()
        assert storage.paths == []


class TestFileRecentStorage:
    """Test FileRecentStorage persistence."""

    def test_persists_across_instances(self, tmp_path: Path):
        """Test the list survives a reload from disk."""
        first, second = make_files(tmp_path, 2)
        store_path = tmp_path / "settings" / "recent.txt"

        recent = RecentPackages(FileRecentStorage(store_path))
        recent.add(first)
        recent.add(second)

        reloaded = RecentPackages(FileRecentStorage(store_path))
        assert reloaded.entries() == [str(second), str(first)]
        assert store_path.read_text().splitlines() == [str(second), str(first)]

    def test_missing_file_loads_empty(self, tmp_path: Path):
        """Test a missing storage file is an empty list."""
        assert FileRecentStorage(tmp_path / "nope.txt").load() == []

    def test_unwritable_location_is_ignored(self, tmp_path: Path, caplog):
        """Test save errors are logged, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        storage = FileRecentStorage(blocker / "recent.txt")

        storage.save(["/some/path.pkg"])
        assert "Could not save recent packages" in caplog.text

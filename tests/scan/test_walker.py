from __future__ import annotations

from dirsize.models.enums import ErrorCause
from dirsize.scan.walker import DirListing, read_dir, walk
from tests.fs_mock import MemoryFileSystem, io_error, permission_denied


def _tree() -> MemoryFileSystem:
    fs = MemoryFileSystem()
    fs.add_file("/r/top.bin", size=10)
    fs.add_file("/r/a/one.bin", size=100)
    fs.add_file("/r/a/b/two.bin", size=200)
    fs.add_file("/r/a/b/c/d/e/three.bin", size=300)
    fs.add_dir("/r/empty")
    return fs


class TestReadDir:
    def test_splits_files_and_subdirs(self) -> None:
        fs = _tree()
        listing = read_dir("/r/a", fs)
        assert listing.file_bytes == 100
        assert listing.files == 1
        assert listing.subdirs == ["/r/a/b"]
        assert listing.errors == []

    def test_symlink_counts_own_size(self) -> None:
        fs = MemoryFileSystem()
        fs.add_symlink("/r/link", "/some/where/big")
        listing = read_dir("/r", fs)
        assert listing.file_bytes == len("/some/where/big")
        assert listing.symlinks == 1
        assert listing.files == 0
        assert listing.subdirs == []

    def test_child_stat_failure_recorded(self) -> None:
        fs = MemoryFileSystem()
        fs.add_file("/r/ok.bin", size=5)
        fs.add_file("/r/bad.bin", size=50)
        fs.fail("/r/bad.bin", io_error("/r/bad.bin"), op="lstat")
        listing = read_dir("/r", fs)
        assert listing.file_bytes == 5
        assert [e.path for e in listing.errors] == ["/r/bad.bin"]
        assert listing.errors[0].cause is ErrorCause.IO_ERROR


class TestWalk:
    def test_sums_all_levels(self) -> None:
        result = walk("/r/a", _tree())
        assert result.size_bytes == 600
        assert result.errors == ()

    def test_whole_tree(self) -> None:
        assert walk("/r", _tree()).size_bytes == 610

    def test_empty_dir_is_zero(self) -> None:
        assert walk("/r/empty", _tree()).size_bytes == 0

    def test_file_returns_own_size(self) -> None:
        assert walk("/r/top.bin", _tree()).size_bytes == 10

    def test_missing_node_is_an_error(self) -> None:
        result = walk("/r/nope", _tree())
        assert result.size_bytes == 0
        assert len(result.errors) == 1
        assert result.errors[0].cause is ErrorCause.NOT_FOUND

    def test_unreadable_subdir_contributes_zero_once(self) -> None:
        fs = _tree()
        fs.add_file("/r/a/locked/secret.bin", size=1000)
        fs.fail("/r/a/locked", permission_denied("/r/a/locked"))
        result = walk("/r/a", fs)
        assert result.size_bytes == 600
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.path == "/r/a/locked"
        assert error.cause is ErrorCause.PERMISSION_DENIED
        assert error.message == "Permission denied"

    def test_unreadable_root_of_walk(self) -> None:
        fs = _tree()
        fs.fail("/r/a", permission_denied("/r/a"))
        result = walk("/r/a", fs)
        assert result.size_bytes == 0
        assert [e.path for e in result.errors] == ["/r/a"]

    def test_vanished_child_is_not_found(self) -> None:
        fs = _tree()
        fs.vanish("/r/a/one.bin")
        result = walk("/r/a", fs)
        assert result.size_bytes == 500
        assert [(e.path, e.cause) for e in result.errors] == [("/r/a/one.bin", ErrorCause.NOT_FOUND)]

    def test_symlink_to_ancestor_is_not_followed(self) -> None:
        fs = MemoryFileSystem()
        fs.add_file("/r/d/f.bin", size=7)
        fs.add_symlink("/r/d/loop", "/r")
        result = walk("/r", fs)
        assert result.size_bytes == 7 + len("/r")
        assert result.errors == ()

    def test_deep_tree_does_not_recurse(self) -> None:
        fs = MemoryFileSystem()
        path = "/r"
        for i in range(3000):
            path = f"{path}/d{i}"
        fs.add_file(f"{path}/leaf.bin", size=42)
        assert walk("/r", fs).size_bytes == 42

    def test_on_listing_called_per_directory(self) -> None:
        seen: list[str] = []

        def on_listing(path: str, listing: DirListing) -> None:
            seen.append(path)

        walk("/r/a", _tree(), on_listing=on_listing)
        assert sorted(seen) == ["/r/a", "/r/a/b", "/r/a/b/c", "/r/a/b/c/d", "/r/a/b/c/d/e"]

    def test_cancel_stops_early(self) -> None:
        result = walk("/r", _tree(), cancel_check=lambda: True)
        assert result.size_bytes == 0

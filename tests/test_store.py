"""Tests for blob stores."""

from pathlib import Path

import pytest

from triage_tracker.store import FileBlobStore, MemoryBlobStore


class TestFileBlobStore:
    """Tests for FileBlobStore."""

    def test_missing_key_reads_none(self, tmp_path: Path) -> None:
        assert FileBlobStore(tmp_path).read("nope") is None

    def test_write_creates_directory(self, tmp_path: Path) -> None:
        store = FileBlobStore(tmp_path / "database")
        store.write("2024-03-01-issues", b"[]")

        assert (tmp_path / "database" / "2024-03-01-issues.json").read_bytes() == b"[]"
        assert store.read("2024-03-01-issues") == b"[]"

    def test_write_replaces(self, tmp_path: Path) -> None:
        store = FileBlobStore(tmp_path)
        store.write("k", b"one")
        store.write("k", b"two")

        assert store.read("k") == b"two"
        assert not list(tmp_path.glob("*.tmp"))

    def test_failed_write_leaves_no_temp_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should keep the old blob and drop the temp file when the swap fails."""
        store = FileBlobStore(tmp_path)
        store.write("k", b"one")

        def fail(self: Path, target: Path) -> Path:
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", fail)
        with pytest.raises(OSError, match="disk full"):
            store.write("k", b"two")
        monkeypatch.undo()

        assert store.read("k") == b"one"
        assert not list(tmp_path.glob("*.tmp"))

    def test_delete_ignores_missing(self, tmp_path: Path) -> None:
        store = FileBlobStore(tmp_path)
        store.write("k", b"x")
        store.delete("k")
        store.delete("k")

        assert store.read("k") is None


def test_memory_store() -> None:
    store = MemoryBlobStore({"b": b"2"})
    store.write("a", b"1")

    assert store.keys() == ["a", "b"]
    assert store.read("a") == b"1"
    store.delete("a")
    store.delete("missing")
    assert store.keys() == ["b"]

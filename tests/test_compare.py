"""Tests for per-entry comparison and diffs."""

import os

from deezconfigs.compare import (
    BINARY_NOTICE,
    MISSING_NOTICE,
    EntryState,
    compare_entry,
    diff_entry,
    diff_files,
    files_equal,
)


class TestFilesEqual:
    def test_equal(self, tmp_path):
        (tmp_path / "a").write_bytes(b"same")
        (tmp_path / "b").write_bytes(b"same")
        assert files_equal(tmp_path / "a", tmp_path / "b") is True

    def test_different_size(self, tmp_path):
        (tmp_path / "a").write_bytes(b"same")
        (tmp_path / "b").write_bytes(b"same!")
        assert files_equal(tmp_path / "a", tmp_path / "b") is False

    def test_same_size_different_content(self, tmp_path):
        (tmp_path / "a").write_bytes(b"x" * 100000 + b"a")
        (tmp_path / "b").write_bytes(b"x" * 100000 + b"b")
        assert files_equal(tmp_path / "a", tmp_path / "b") is False

    def test_follows_symlinks(self, tmp_path):
        (tmp_path / "a").write_bytes(b"data")
        os.symlink(tmp_path / "a", tmp_path / "b")
        assert files_equal(tmp_path / "a", tmp_path / "b") is True


class TestDiffFiles:
    def test_identical(self, tmp_path):
        (tmp_path / "a").write_text("a\n")
        (tmp_path / "b").write_text("a\n")
        assert diff_files(tmp_path / "a", tmp_path / "b") is None

    def test_changed_line(self, tmp_path):
        (tmp_path / "a").write_text("a\nb\n")
        (tmp_path / "b").write_text("a\nc\n")
        assert diff_files(tmp_path / "a", tmp_path / "b") == (
            "@@ -1,2 +1,2 @@\n a\n-b\n+c\n"
        )

    def test_missing_newline_marked(self, tmp_path):
        (tmp_path / "a").write_text("a")
        (tmp_path / "b").write_text("b")
        assert diff_files(tmp_path / "a", tmp_path / "b") == (
            "@@ -1 +1 @@\n"
            "-a\n\\ No newline at end of file\n"
            "+b\n\\ No newline at end of file\n"
        )

    def test_binary(self, tmp_path):
        (tmp_path / "a").write_bytes(b"\xff\x00")
        (tmp_path / "b").write_bytes(b"\xfe")
        assert diff_files(tmp_path / "a", tmp_path / "b") == BINARY_NOTICE


class TestCompareEntry:
    def test_states(self, root, home):
        for name in ("same", "changed", "missing"):
            (root / name).write_text("root")
        (home / "same").write_text("root")
        (home / "changed").write_text("home")
        assert compare_entry(root, home, "same").state == EntryState.IN_SYNC
        assert compare_entry(root, home, "changed").state == EntryState.MODIFIED
        assert compare_entry(root, home, "missing").state == EntryState.MISSING

    def test_symlinked_flag(self, root, home):
        (root / "a").write_text("x")
        os.symlink(root / "a", home / "a")
        status = compare_entry(root, home, "a")
        assert status.state == EntryState.IN_SYNC
        assert status.is_symlinked is True

    def test_directory_in_home_is_missing(self, root, home):
        (root / "a").write_text("x")
        (home / "a").mkdir()
        assert compare_entry(root, home, "a").state == EntryState.MISSING

    def test_symbols(self):
        assert [s.symbol for s in EntryState] == ["S", "M", "!"]


class TestDiffEntry:
    def test_identical_is_none(self, root, home):
        (root / "a").write_text("x\n")
        (home / "a").write_text("x\n")
        assert diff_entry(root, home, "a") is None

    def test_missing(self, root, home):
        (root / "a").write_text("x\n")
        d = diff_entry(root, home, "a")
        assert d.missing is True
        assert d.diff == MISSING_NOTICE

    def test_direction(self, root, home):
        (root / "a").write_text("root\n")
        (home / "a").write_text("home\n")
        assert "+home\n" in diff_entry(root, home, "a").diff
        assert "+root\n" in diff_entry(root, home, "a", reverse=True).diff

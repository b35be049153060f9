"""Tests for ExcludeFilter (.ignore / .gitignore loading)."""

from deezconfigs._exclude import ExcludeFilter


class TestExcludeFilter:
    def test_no_ignore_files(self, tmp_path):
        ef = ExcludeFilter(tmp_path)
        ef.enter_directory("")
        assert ef.is_excluded("anything") is False

    def test_gitignore_pattern(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.log\n")
        ef = ExcludeFilter(tmp_path)
        ef.enter_directory("")
        assert ef.is_excluded("debug.log") is True
        assert ef.is_excluded("app.py") is False

    def test_ignore_pattern(self, tmp_path):
        (tmp_path / ".ignore").write_text("foo/*\n")
        ef = ExcludeFilter(tmp_path)
        ef.enter_directory("")
        ef.enter_directory("foo")
        assert ef.is_excluded("foo/bar") is True
        assert ef.is_excluded("bar") is False

    def test_directory_pattern(self, tmp_path):
        (tmp_path / ".gitignore").write_text("build/\n")
        ef = ExcludeFilter(tmp_path)
        ef.enter_directory("")
        assert ef.is_excluded("build", is_dir=True) is True
        # A file named "build" is not matched by "build/"
        assert ef.is_excluded("build") is False

    def test_nested_patterns_scoped_to_directory(self, tmp_path):
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / ".gitignore").write_text("*.log\n")
        ef = ExcludeFilter(tmp_path)
        ef.enter_directory("")
        ef.enter_directory("sub")
        assert ef.is_excluded("sub/a.log") is True
        assert ef.is_excluded("a.log") is False

    def test_deeper_directory_wins(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.txt\n")
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / ".gitignore").write_text("!keep.txt\n")
        ef = ExcludeFilter(tmp_path)
        ef.enter_directory("")
        ef.enter_directory("sub")
        assert ef.is_excluded("sub/keep.txt") is False
        assert ef.is_excluded("sub/other.txt") is True

    def test_ignore_checked_before_gitignore(self, tmp_path):
        (tmp_path / ".ignore").write_text("!a.txt\n")
        (tmp_path / ".gitignore").write_text("a.txt\n")
        ef = ExcludeFilter(tmp_path)
        ef.enter_directory("")
        assert ef.is_excluded("a.txt") is False

    def test_custom_filenames(self, tmp_path):
        (tmp_path / ".gitignore").write_text("a.txt\n")
        (tmp_path / ".myignore").write_text("b.txt\n")
        ef = ExcludeFilter(tmp_path, filenames=[".myignore"])
        ef.enter_directory("")
        assert ef.is_excluded("a.txt") is False
        assert ef.is_excluded("b.txt") is True

"""Tests for root and Home resolution."""

import pytest

from deezconfigs.config import (
    Config,
    ensure_root_exists,
    find_config_root_in_parents,
    home_directory,
    is_config_root,
    resolve_root,
    root_from_environment,
)
from deezconfigs.exceptions import HomeNotFoundError, RootNotFoundError


class TestConfig:
    def test_paths_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = Config(root="configs", home="home")
        assert config.root == tmp_path.resolve() / "configs"
        assert config.home == tmp_path.resolve() / "home"
        assert config.verbose is False
        assert config.workers is None


class TestEnsureRootExists:
    def test_directory(self, root):
        assert ensure_root_exists(root) == root.resolve()

    def test_file(self, tmp_path):
        f = tmp_path / "f"
        f.write_text("")
        with pytest.raises(RootNotFoundError, match="is a file"):
            ensure_root_exists(f)

    def test_missing(self, tmp_path):
        with pytest.raises(RootNotFoundError, match="does not exist"):
            ensure_root_exists(tmp_path / "nope")


class TestResolveRoot:
    def test_explicit_argument(self, root, tmp_path):
        assert resolve_root(str(root), cwd=tmp_path) == root.resolve()

    def test_cwd_is_root(self, root):
        assert resolve_root(cwd=root, environ={}) == root.resolve()

    def test_closest_ancestor(self, root):
        deep = root / "a" / "b"
        deep.mkdir(parents=True)
        assert resolve_root(cwd=deep, environ={}) == root.resolve()

    def test_nested_root_wins(self, root):
        inner = root / "inner"
        inner.mkdir()
        (inner / ".deez").write_text("")
        (inner / "x").mkdir()
        assert resolve_root(cwd=inner / "x", environ={}) == inner.resolve()

    def test_environment(self, root, tmp_path):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        assert resolve_root(cwd=elsewhere, environ={"DEEZ_ROOT": str(root)}) == root.resolve()

    def test_falls_back_to_cwd(self, tmp_path):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        assert resolve_root(cwd=elsewhere, environ={}) == elsewhere.resolve()

    def test_bad_environment(self, tmp_path):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        with pytest.raises(RootNotFoundError):
            resolve_root(cwd=elsewhere, environ={"DEEZ_ROOT": str(tmp_path / "nope")})


class TestHelpers:
    def test_is_config_root(self, root, tmp_path):
        assert is_config_root(root)
        assert not is_config_root(tmp_path)

    def test_find_in_parents_is_strict(self, root):
        (root / "sub").mkdir()
        assert find_config_root_in_parents(root / "sub") == root
        assert find_config_root_in_parents(root) is None

    def test_root_from_environment(self):
        assert root_from_environment({}) is None
        assert root_from_environment({"DEEZ_ROOT": ""}) is None
        assert str(root_from_environment({"DEEZ_ROOT": "/x"})) == "/x"

    def test_home_directory(self, home, monkeypatch):
        monkeypatch.setenv("HOME", str(home))
        assert home_directory() == home.resolve()

    def test_home_directory_missing(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path / "nope"))
        with pytest.raises(HomeNotFoundError):
            home_directory()


class TestConfigCanonical:
    def test_symlinked_root_resolved(self, root, home, tmp_path):
        alias = tmp_path / "alias"
        alias.symlink_to(root)
        config = Config(root=alias, home=home)
        assert config.root == root.resolve()
        assert not config.root.is_symlink()

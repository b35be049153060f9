"""Shared fixtures for deezconfigs tests."""

import os

import pytest
from click.testing import CliRunner

from deezconfigs.config import Config


@pytest.fixture
def root(tmp_path):
    """An empty configuration root (holds only the ``.deez`` marker)."""
    p = tmp_path / "configs"
    p.mkdir()
    (p / ".deez").write_text("")
    return p


@pytest.fixture
def home(tmp_path):
    p = tmp_path / "home"
    p.mkdir()
    return p


@pytest.fixture
def config(root, home):
    return Config(root=root, home=home)


@pytest.fixture
def populated_root(root):
    """Root with .gitconfig and .config/nvim/init.lua."""
    (root / ".gitconfig").write_text("X")
    (root / ".config" / "nvim").mkdir(parents=True)
    (root / ".config" / "nvim" / "init.lua").write_text("vim.o.number = true\n")
    return root


@pytest.fixture
def write_hook():
    """Return a function creating an executable shell hook script."""
    def _write(root, name, body):
        path = root / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        os.chmod(path, 0o755)
        return path
    return _write


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(home):
    """Environment for CLI invocations: isolated Home, no colors, no root."""
    return {"HOME": str(home), "NO_COLOR": "1", "DEEZ_ROOT": None, "DEEZ_VERBOSE": None}

"""Configuration values threaded through every command.

The core never looks at the process environment on its own: the CLI
resolves the root and Home once per invocation and passes a
:class:`Config` down.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .exceptions import HomeNotFoundError, RootNotFoundError
from .walk import MARKER_FILE

ROOT_ENV_VAR = "DEEZ_ROOT"
ANCESTOR_DEPTH_LIMIT = 20


@dataclass(frozen=True)
class Config:
    """Inputs of one run.

    Attributes:
        root: Canonical absolute configuration root.
        home: Canonical absolute Home directory.
        verbose: Collect touched paths and expose ``DEEZ_VERBOSE`` to hooks.
        workers: Traversal pool size (``None`` for the executor default).
    """
    root: Path
    home: Path
    verbose: bool = False
    workers: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root).resolve())
        object.__setattr__(self, "home", Path(self.home).resolve())


# ---------------------------------------------------------------------------
# Root resolution
# ---------------------------------------------------------------------------

def is_config_root(path: Path) -> bool:
    """True if *path* holds the ``.deez`` marker file."""
    return (Path(path) / MARKER_FILE).is_file()


def find_config_root_in_parents(start: Path) -> Path | None:
    """Closest strict ancestor of *start* that is a configuration root."""
    for depth, candidate in enumerate(Path(start).parents):
        if depth >= ANCESTOR_DEPTH_LIMIT:
            break
        if is_config_root(candidate):
            return candidate
    return None


def root_from_environment(environ: Mapping[str, str] | None = None) -> Path | None:
    """Root named by ``DEEZ_ROOT``, if set and non-empty."""
    environ = os.environ if environ is None else environ
    value = environ.get(ROOT_ENV_VAR)
    return Path(value) if value else None


def ensure_root_exists(root: Path) -> Path:
    """Return *root* made canonical, or raise if it is not a directory."""
    root = Path(root)
    if root.is_dir():
        return root.resolve()
    if str(root) in ("", "."):
        detail = "No path provided."
    elif root.is_file():
        detail = f"'{root}' is a file."
    elif not root.exists():
        detail = f"'{root}' does not exist."
    else:
        detail = f"'{root}' is not a directory."
    raise RootNotFoundError(f"Root must be a valid directory. {detail}")


def resolve_root(
    arg: str | None = None,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Pick the configuration root for this invocation.

    Order: explicit *arg*; the current directory if it is a root; the
    closest root among its ancestors; ``DEEZ_ROOT``; finally the current
    directory anyway (the marker check decides what happens next).
    """
    if arg:
        return ensure_root_exists(Path(arg).expanduser())
    if cwd is None:
        try:
            cwd = Path.cwd()
        except OSError as exc:
            raise RootNotFoundError(
                "Could not determine current working directory. "
                "Please provide a Root directory as argument."
            ) from exc
    root = Path(cwd)
    if not is_config_root(root):
        parent = find_config_root_in_parents(root)
        if parent is not None:
            root = parent
        else:
            root = root_from_environment(environ) or root
    return ensure_root_exists(root)


# ---------------------------------------------------------------------------
# Home
# ---------------------------------------------------------------------------

def home_directory() -> Path:
    """Home directory from the platform mechanism."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise HomeNotFoundError("Could not read Home directory from environment.") from exc
    if not str(home) or not home.is_dir():
        raise HomeNotFoundError(f"Home directory is not a directory: '{home}'.")
    return home.resolve()

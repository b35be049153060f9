"""Find config files under a configuration root.

Every function here yields *relative entries*: file paths relative to the
root, with forward slashes.  The same entry addresses both trees::

    root / entry        home / entry

Exclusion rules:

* at the root only, the ``.git`` directory, the ``.ignore`` and
  ``.gitignore`` files, and hook scripts are skipped;
* at any depth, files named ``.deez`` are skipped, so nested roots can
  coexist;
* anything matched by ``.ignore`` / ``.gitignore`` patterns is skipped.

Symlinks are never followed.  A symlink (to a file or to a directory) is
yielded as an entry of its own.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Iterator

from ._exclude import IGNORE_FILE_NAMES, ExcludeFilter
from .hooks import is_hook

logger = logging.getLogger(__name__)

MARKER_FILE = ".deez"

_ROOT_SKIPPED_DIRS = frozenset({".git"})
_ROOT_SKIPPED_FILES = frozenset(IGNORE_FILE_NAMES)


def _is_dir_included(rel_path: str) -> bool:
    return rel_path not in _ROOT_SKIPPED_DIRS


def _is_file_included(rel_path: str, name: str) -> bool:
    if "/" not in rel_path:
        if name in _ROOT_SKIPPED_FILES or is_hook(name):
            return False
    return name != MARKER_FILE


# ---------------------------------------------------------------------------
# Directory scanning
# ---------------------------------------------------------------------------

class _Scanner:
    """Lists one directory at a time, applying the exclusion rules."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.exclude = ExcludeFilter(root)

    def scan(self, rel_dir: str) -> tuple[list[str], list[str]]:
        """Return ``(files, subdirs)`` directly under *rel_dir*."""
        self.exclude.enter_directory(rel_dir)
        abs_dir = self.root / rel_dir if rel_dir else self.root
        files: list[str] = []
        dirs: list[str] = []
        try:
            with os.scandir(abs_dir) as it:
                entries = list(it)
        except OSError as exc:
            logger.warning("Could not read directory '%s': %s", abs_dir, exc)
            return files, dirs
        for entry in entries:
            rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            if entry.is_dir(follow_symlinks=False):
                if _is_dir_included(rel) and not self.exclude.is_excluded(rel, is_dir=True):
                    dirs.append(rel)
                continue
            # Sockets, FIFOs and devices are not config files.
            if not (entry.is_symlink() or entry.is_file(follow_symlinks=False)):
                continue
            if not _is_file_included(rel, entry.name):
                continue
            if self.exclude.is_excluded(rel):
                continue
            files.append(rel)
        return files, dirs


def _check_root(root: Path) -> Path:
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"Root must be a directory: {root}")
    return root


# ---------------------------------------------------------------------------
# Walking
# ---------------------------------------------------------------------------

def walk(root: Path) -> Iterator[str]:
    """Lazily yield the relative entries under *root*, depth first.

    The order is unspecified; sort the results when order matters.
    """
    scanner = _Scanner(_check_root(root))
    stack = [""]
    while stack:
        files, dirs = scanner.scan(stack.pop())
        yield from files
        stack.extend(dirs)


def walk_parallel(
    root: Path,
    fn: Callable[[str], None],
    *,
    max_workers: int | None = None,
) -> None:
    """Call ``fn(entry)`` for every relative entry under *root*.

    Each directory is scanned as its own task on a thread pool, and *fn*
    is called from whichever worker found the entry, so it must be safe
    to call concurrently.  No entry is passed to *fn* twice.

    Returns once every directory has been scanned.  An exception raised
    by *fn* propagates after the pool has drained.
    """
    scanner = _Scanner(_check_root(root))

    def visit(rel_dir: str) -> list[str]:
        files, dirs = scanner.scan(rel_dir)
        for rel in files:
            fn(rel)
        return dirs

    with ThreadPoolExecutor(max_workers=max_workers,
                            thread_name_prefix="deez-walk") as executor:
        pending = {executor.submit(visit, "")}
        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                for rel_dir in future.result():
                    pending.add(executor.submit(visit, rel_dir))

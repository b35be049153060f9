"""Ignore-file support for walking a configuration root.

Loads ``.ignore`` and ``.gitignore`` files from every directory the walk
enters and answers whether a root-relative path is excluded.

Pattern syntax follows gitignore rules (implemented by
``dulwich.ignore.IgnoreFilter``).  Filters in deeper directories take
precedence over shallower ones, and within one directory ``.ignore``
takes precedence over ``.gitignore``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from dulwich.ignore import IgnoreFilter

logger = logging.getLogger(__name__)

IGNORE_FILE_NAMES = (".ignore", ".gitignore")


class ExcludeFilter:
    """Per-directory ignore files for one root."""

    def __init__(
        self,
        root: Path,
        *,
        filenames: Sequence[str] = IGNORE_FILE_NAMES,
    ) -> None:
        self._root = Path(root)
        self._filenames = tuple(filenames)
        # {rel_dir: [IgnoreFilter, ...]}, highest precedence first.
        # A directory is always entered before any of its children is
        # scanned, so readers only look up keys that are already loaded.
        self._dir_filters: dict[str, list[IgnoreFilter]] = {}

    # ------------------------------------------------------------------
    def enter_directory(self, rel_dir: str) -> None:
        """Load the ignore files found in *rel_dir* (``""`` for the root)."""
        if rel_dir in self._dir_filters:
            return
        abs_dir = self._root / rel_dir if rel_dir else self._root
        filters: list[IgnoreFilter] = []
        for name in self._filenames:
            path = abs_dir / name
            if not path.is_file():
                continue
            try:
                filters.append(IgnoreFilter.from_path(str(path)))
            except OSError as exc:
                logger.warning("Could not read '%s': %s", path, exc)
        self._dir_filters[rel_dir] = filters

    # ------------------------------------------------------------------
    def is_excluded(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check *rel_path* against the loaded ignore hierarchy.

        Every ancestor of *rel_path* must have been entered with
        :meth:`enter_directory` first.
        """
        parts = rel_path.split("/")
        # Deepest directory first; the first filter with an opinion wins.
        for depth in range(len(parts) - 1, -1, -1):
            dir_key = "/".join(parts[:depth])
            filters = self._dir_filters.get(dir_key)
            if not filters:
                continue
            sub = "/".join(parts[depth:])
            check = sub + "/" if is_dir else sub
            for filt in filters:
                result = filt.is_ignored(check)
                if result is not None:
                    return result
        return False

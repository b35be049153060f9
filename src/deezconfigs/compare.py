"""Compare one relative entry across the root and Home trees."""

from __future__ import annotations

import difflib
import itertools
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_CHUNK_SIZE = 65536

MISSING_NOTICE = "! File does not exist in Home.\n! Skipping...\n"
BINARY_NOTICE = "Binary files differ.\n"
_NO_NEWLINE = "\\ No newline at end of file\n"


class EntryState(str, Enum):
    """State of a Home entry relative to its root counterpart."""
    IN_SYNC = "in_sync"
    MODIFIED = "modified"
    MISSING = "missing"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @property
    def symbol(self) -> str:
        """One-character marker used in status listings."""
        return _SYMBOLS[self]


_SYMBOLS = {
    EntryState.IN_SYNC: "S",
    EntryState.MODIFIED: "M",
    EntryState.MISSING: "!",
}


@dataclass
class FileStatus:
    """Status of one relative entry.

    Attributes:
        path: Relative entry (forward slashes).
        state: :class:`EntryState` of the Home side.
        is_symlinked: ``True`` if the Home side is a symlink, whatever
            its content.
    """
    path: str
    state: EntryState
    is_symlinked: bool = False


@dataclass
class FileDiff:
    """Unified diff of one relative entry.

    Attributes:
        path: Relative entry (forward slashes).
        diff: Diff hunks, or a notice for missing or binary files.
        missing: ``True`` if the Home side does not exist.
    """
    path: str
    diff: str
    missing: bool = False


# ---------------------------------------------------------------------------
# Content comparison
# ---------------------------------------------------------------------------

def files_equal(a: Path, b: Path) -> bool:
    """Byte-for-byte comparison, short-circuiting on size.

    Symlinks are followed on both sides.
    """
    if os.stat(a).st_size != os.stat(b).st_size:
        return False
    with open(a, "rb") as fa, open(b, "rb") as fb:
        while True:
            chunk_a = fa.read(_CHUNK_SIZE)
            chunk_b = fb.read(_CHUNK_SIZE)
            if chunk_a != chunk_b:
                return False
            if not chunk_a:
                return True


def _mark_missing_newlines(lines):
    for line in lines:
        if line.endswith("\n"):
            yield line
        else:
            yield line + "\n"
            yield _NO_NEWLINE


def diff_files(before: Path, after: Path) -> str | None:
    """Unified diff hunks turning *before* into *after*.

    Returns ``None`` when both files have the same content.  Files that
    are not valid UTF-8 are reported with a single notice line.
    """
    data_before = Path(before).read_bytes()
    data_after = Path(after).read_bytes()
    if data_before == data_after:
        return None
    try:
        text_before = data_before.decode("utf-8")
        text_after = data_after.decode("utf-8")
    except UnicodeDecodeError:
        return BINARY_NOTICE
    lines = difflib.unified_diff(
        text_before.splitlines(keepends=True),
        text_after.splitlines(keepends=True),
    )
    # Drop the ---/+++ header; the caller prints the file name.
    hunks = itertools.islice(lines, 2, None)
    return "".join(_mark_missing_newlines(hunks))


# ---------------------------------------------------------------------------
# Per-entry comparison
# ---------------------------------------------------------------------------

def compare_entry(root: Path, home: Path, rel: str) -> FileStatus:
    """Classify *rel* as in sync, modified, or missing from Home."""
    source = Path(root) / rel
    destination = Path(home) / rel
    if not destination.is_file():
        state = EntryState.MISSING
    elif files_equal(source, destination):
        state = EntryState.IN_SYNC
    else:
        state = EntryState.MODIFIED
    return FileStatus(path=rel, state=state, is_symlinked=destination.is_symlink())


def diff_entry(root: Path, home: Path, rel: str, *, reverse: bool = False) -> FileDiff | None:
    """Diff *rel* between root and Home; ``None`` if identical.

    By default the root copy is "before" and the Home copy is "after";
    *reverse* swaps them.
    """
    source = Path(root) / rel
    destination = Path(home) / rel
    if not destination.is_file():
        return FileDiff(path=rel, diff=MISSING_NOTICE, missing=True)
    if reverse:
        text = diff_files(destination, source)
    else:
        text = diff_files(source, destination)
    if text is None:
        return None
    return FileDiff(path=rel, diff=text)

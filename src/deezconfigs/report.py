"""Results of reconciliation and comparison runs.

Reports are filled concurrently by walker threads.  Every mutation goes
through a method that holds the report's lock for a single update;
:meth:`finalize` sorts the collected entries once traversal is over.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .compare import EntryState, FileDiff, FileStatus


@dataclass
class EntryError:
    """A relative entry that failed during a run.

    Attributes:
        path: The relative entry that caused the error.
        error: Human-readable error message.
    """
    path: str
    error: str


@dataclass
class _Report:
    errors: list[EntryError] = field(default_factory=list)
    hooks_ran: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_error(self, path: str, error: str) -> None:
        with self._lock:
            self.errors.append(EntryError(path=path, error=error))

    @property
    def ok(self) -> bool:
        """``True`` if no entry failed."""
        return not self.errors

    def _finalize(self) -> None:
        self.errors.sort(key=lambda e: e.path)


@dataclass
class RunOutcome(_Report):
    """Result of a sync, rsync, link, or clean run.

    Attributes:
        command: Command that produced the outcome.
        processed: Entries written, linked, or removed.
        skipped: Entries that needed no change.
        touched: Processed entries, collected only when *track_paths* is on.
        errors: Per-entry errors.
        hooks_ran: Number of hooks executed.
    """
    command: str = ""
    processed: int = 0
    skipped: int = 0
    touched: list[str] = field(default_factory=list)
    track_paths: bool = False

    def record_success(self, path: str) -> None:
        with self._lock:
            self.processed += 1
            if self.track_paths:
                self.touched.append(path)

    def record_skip(self, path: str) -> None:
        with self._lock:
            self.skipped += 1

    @property
    def total(self) -> int:
        """Entries seen by the run, whatever happened to them."""
        return self.processed + self.skipped + len(self.errors)

    def finalize(self) -> RunOutcome:
        self._finalize()
        self.touched.sort()
        return self


@dataclass
class StatusReport(_Report):
    """Result of a status run, sorted by path once finalized."""
    statuses: list[FileStatus] = field(default_factory=list)
    hooks: list[str] = field(default_factory=list)

    def add(self, status: FileStatus) -> None:
        with self._lock:
            self.statuses.append(status)

    def count(self, state: EntryState) -> int:
        return sum(1 for s in self.statuses if s.state == state)

    @property
    def in_sync(self) -> bool:
        """``True`` if every entry is in sync."""
        return all(s.state == EntryState.IN_SYNC for s in self.statuses)

    def finalize(self) -> StatusReport:
        self._finalize()
        self.statuses.sort(key=lambda s: s.path)
        return self


@dataclass
class DiffReport(_Report):
    """Result of a diff run; identical entries are not listed."""
    diffs: list[FileDiff] = field(default_factory=list)
    reverse: bool = False

    def add(self, diff: FileDiff) -> None:
        with self._lock:
            self.diffs.append(diff)

    @property
    def in_sync(self) -> bool:
        return not self.diffs

    def finalize(self) -> DiffReport:
        self._finalize()
        self.diffs.sort(key=lambda d: d.path)
        return self

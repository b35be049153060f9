"""Reconcile a configuration root with Home.

Each operation is a :class:`Transition`: a per-entry state change applied
to every relative entry the walker finds.  The shared driver brackets the
traversal with the command's ``pre-`` and ``post-`` hooks and collects the
per-entry results.

==========  =========================================================
``sync``    copy root files into Home, mirroring root symlinks as-is
``rsync``   copy Home files back into the root
``link``    symlink Home entries to the root files
``clean``   remove mirrored entries from Home, pruning emptied dirs
==========  =========================================================

``status`` and ``diff`` use the same scaffolding with the read-only
comparator instead of a transition.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable

from .compare import compare_entry, diff_entry, files_equal
from .config import Config
from .exceptions import HookError
from .hooks import HookCategory, Hooks
from .report import DiffReport, RunOutcome, StatusReport
from .walk import walk_parallel

logger = logging.getLogger(__name__)

PRUNE_DEPTH_LIMIT = 20


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------

def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def _clear_directory(path: Path) -> None:
    """Remove *path* if it is an empty directory.

    A populated directory is never removed; the entry fails instead.
    """
    if not _is_real_dir(path):
        return
    try:
        path.rmdir()
    except OSError as exc:
        raise IsADirectoryError(
            exc.errno, "Destination is a non-empty directory", str(path),
        ) from exc


def _remove_file(path: Path) -> None:
    """Remove the file or symlink at *path*, if any."""
    if path.is_symlink() or path.exists():
        path.unlink()


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

class Transition:
    """State change applied to one relative entry.

    :meth:`apply` returns ``True`` when it changed something and
    ``False`` when the entry needed nothing.  Failures are raised as
    :class:`OSError` and recorded by the driver.
    """

    command: str = ""
    verb: str = ""

    def __init__(self, config: Config) -> None:
        self.root = config.root
        self.home = config.home

    def apply(self, rel: str) -> bool:
        raise NotImplementedError


class SyncTransition(Transition):
    """Root -> Home, copying content and mirroring root symlinks."""

    command = "sync"
    verb = "copy"

    def apply(self, rel: str) -> bool:
        source = self.root / rel
        destination = self.home / rel

        destination.parent.mkdir(parents=True, exist_ok=True)
        _clear_directory(destination)

        if source.is_symlink():
            # Mirror the link itself, keeping a relative target relative.
            target = os.readlink(source)
            _remove_file(destination)
            os.symlink(target, destination)
            return True

        # Copying over a symlink would write through it into its target.
        if destination.is_symlink():
            destination.unlink()
        shutil.copy(source, destination)
        return True


class RSyncTransition(Transition):
    """Home -> root, copying content back into the configuration root."""

    command = "rsync"
    verb = "update"

    def apply(self, rel: str) -> bool:
        source = self.home / rel
        destination = self.root / rel

        if source.is_symlink():
            # A Home link back into the root is already current; copying
            # it would truncate the root file through its own alias.
            try:
                target = source.resolve(strict=True)
                canonical = destination.resolve(strict=True)
            except (OSError, RuntimeError) as exc:
                raise OSError(f"Could not resolve '{rel}': {exc}") from exc
            if target == canonical:
                return False
        elif not source.exists():
            return False

        if source.is_dir():
            raise IsADirectoryError(f"Source in Home is a directory: '{source}'")

        # A root alias whose content Home already matches stays an alias.
        if destination.is_symlink() and destination.exists() and files_equal(source, destination):
            return False

        _clear_directory(destination)
        if destination.is_symlink():
            destination.unlink()
        shutil.copy(source, destination)
        return True


class LinkTransition(Transition):
    """Root -> Home, replacing Home entries with links to the root files."""

    command = "link"
    verb = "link"

    def apply(self, rel: str) -> bool:
        source = self.root / rel
        destination = self.home / rel

        destination.parent.mkdir(parents=True, exist_ok=True)
        _clear_directory(destination)
        _remove_file(destination)
        os.symlink(source, destination)
        return True


class CleanTransition(Transition):
    """Remove mirrored entries from Home, then prune emptied parents."""

    command = "clean"
    verb = "remove"

    def apply(self, rel: str) -> bool:
        destination = self.home / rel

        if _is_real_dir(destination):
            _clear_directory(destination)
        elif destination.is_symlink() or destination.exists():
            destination.unlink()
        else:
            return False

        self._prune_parents(destination)
        return True

    def _prune_parents(self, path: Path) -> None:
        """Remove empty ancestors of *path*, stopping below Home."""
        for depth, directory in enumerate(path.parents):
            if depth >= PRUNE_DEPTH_LIMIT:
                break
            if directory == self.home or self.home not in directory.parents:
                break
            try:
                directory.rmdir()
            except OSError:
                # Not empty (or already pruned by another worker).
                break


TRANSITIONS: dict[str, type[Transition]] = {
    t.command: t
    for t in (SyncTransition, RSyncTransition, LinkTransition, CleanTransition)
}


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

def _bracket(report, hooks: Hooks, command: str, traverse: Callable[[], None]):
    """Run pre-hooks, *traverse*, then post-hooks, filling *report*."""
    report.hooks_ran += hooks.run(HookCategory.pre(command))
    traverse()
    try:
        report.hooks_ran += hooks.run(HookCategory.post(command))
    except HookError as exc:
        exc.outcome = report.finalize()
        raise
    return report.finalize()


def _hooks_for(config: Config, hooks: Hooks | None) -> Hooks:
    if hooks is not None:
        return hooks
    return Hooks.for_root(config.root, config.home, verbose=config.verbose)


def apply_transition(
    config: Config,
    transition: Transition | type[Transition] | str,
    *,
    hooks: Hooks | None = None,
) -> RunOutcome:
    """Apply *transition* to every entry of ``config.root``.

    *transition* may be an instance, a :class:`Transition` subclass, or a
    command name (``"sync"``, ``"rsync"``, ``"link"``, ``"clean"``).

    Raises:
        HookAbortedError: A hook exited non-zero.  Raised before any file
            is touched when a pre-hook fails; when a post-hook fails,
            ``exc.outcome`` carries the finished file report.
        HookError: Hooks could not be discovered or started.
    """
    if isinstance(transition, str):
        transition = TRANSITIONS[transition]
    if isinstance(transition, type):
        transition = transition(config)
    hooks = _hooks_for(config, hooks)
    outcome = RunOutcome(command=transition.command, track_paths=config.verbose)

    def visit(rel: str) -> None:
        try:
            changed = transition.apply(rel)
        except OSError as exc:
            logger.error("Could not %s '%s': %s", transition.verb, rel, exc)
            outcome.record_error(rel, str(exc))
            return
        if changed:
            logger.debug("%s: %s", transition.command, rel)
            outcome.record_success(rel)
        else:
            outcome.record_skip(rel)

    return _bracket(
        outcome, hooks, transition.command,
        lambda: walk_parallel(config.root, visit, max_workers=config.workers),
    )


def sync(config: Config, *, hooks: Hooks | None = None) -> RunOutcome:
    """Update Home from the configuration root."""
    return apply_transition(config, SyncTransition, hooks=hooks)


def rsync(config: Config, *, hooks: Hooks | None = None) -> RunOutcome:
    """Update the configuration root from Home."""
    return apply_transition(config, RSyncTransition, hooks=hooks)


def link(config: Config, *, hooks: Hooks | None = None) -> RunOutcome:
    """Symlink the configuration root's files into Home."""
    return apply_transition(config, LinkTransition, hooks=hooks)


def clean(config: Config, *, hooks: Hooks | None = None) -> RunOutcome:
    """Remove the configuration root's files from Home."""
    return apply_transition(config, CleanTransition, hooks=hooks)


# ---------------------------------------------------------------------------
# Read-only comparisons
# ---------------------------------------------------------------------------

def status(config: Config, *, hooks: Hooks | None = None) -> StatusReport:
    """Classify every entry as in sync, modified, or missing from Home."""
    hooks = _hooks_for(config, hooks)
    report = StatusReport(hooks=hooks.list_all())

    def visit(rel: str) -> None:
        try:
            entry = compare_entry(config.root, config.home, rel)
        except OSError as exc:
            logger.error("Could not compare '%s': %s", rel, exc)
            report.record_error(rel, str(exc))
            return
        report.add(entry)

    return _bracket(
        report, hooks, "status",
        lambda: walk_parallel(config.root, visit, max_workers=config.workers),
    )


def diff(config: Config, *, reverse: bool = False, hooks: Hooks | None = None) -> DiffReport:
    """Unified diffs of every entry that differs between root and Home.

    By default the root is "before" and Home is "after"; *reverse*
    swaps them.
    """
    hooks = _hooks_for(config, hooks)
    report = DiffReport(reverse=reverse)

    def visit(rel: str) -> None:
        try:
            entry = diff_entry(config.root, config.home, rel, reverse=reverse)
        except OSError as exc:
            logger.error("Could not compare '%s': %s", rel, exc)
            report.record_error(rel, str(exc))
            return
        if entry is not None:
            report.add(entry)

    return _bracket(
        report, hooks, "diff",
        lambda: walk_parallel(config.root, visit, max_workers=config.workers),
    )

"""Exceptions for deezconfigs."""

from __future__ import annotations


class DeezError(Exception):
    """Base class for whole-run failures.

    Per-file failures never raise out of a run; they are recorded in the
    run's report instead.
    """


class RootNotFoundError(DeezError):
    """Raised when the configuration root is not an existing directory."""


class HomeNotFoundError(DeezError):
    """Raised when the Home directory cannot be determined."""


class RemoteCloneError(DeezError):
    """Raised when a remote configuration root cannot be cloned."""


class HookError(DeezError):
    """Raised when hooks cannot be discovered or a hook cannot be started.

    When raised by a post-hook, :attr:`outcome` holds the report of the
    files processed before it.
    """

    outcome = None


class HookAbortedError(HookError):
    """Raised when a hook exits with a non-zero status.

    The whole command stops immediately.  When the abort happens after
    files were processed, :attr:`outcome` holds the partial report.
    """

    def __init__(self, hook: str, returncode: int) -> None:
        super().__init__(f"Aborted by hook '{hook}' (exit status {returncode}).")
        self.hook = hook
        self.returncode = returncode

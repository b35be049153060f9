from .config import Config, resolve_root, home_directory, is_config_root
from .compare import EntryState, FileStatus, FileDiff
from .exceptions import (
    DeezError, RootNotFoundError, HomeNotFoundError, RemoteCloneError,
    HookError, HookAbortedError,
)
from .hooks import HookCategory, Hooks
from .reconcile import (
    Transition, SyncTransition, RSyncTransition, LinkTransition, CleanTransition,
    apply_transition, sync, rsync, link, clean, status, diff,
)
from .report import EntryError, RunOutcome, StatusReport, DiffReport
from .walk import walk, walk_parallel

__all__ = [
    "Config", "resolve_root", "home_directory", "is_config_root",
    "EntryState", "FileStatus", "FileDiff",
    "DeezError", "RootNotFoundError", "HomeNotFoundError", "RemoteCloneError",
    "HookError", "HookAbortedError",
    "HookCategory", "Hooks",
    "Transition", "SyncTransition", "RSyncTransition", "LinkTransition", "CleanTransition",
    "apply_transition", "sync", "rsync", "link", "clean", "status", "diff",
    "EntryError", "RunOutcome", "StatusReport", "DiffReport",
    "walk", "walk_parallel",
]

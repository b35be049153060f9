"""Hook scripts run before and after each command.

Hooks are files directly inside the configuration root, named
``pre-<command>`` or ``post-<command>``, optionally followed by one or
more dot-separated suffixes (``post-sync.001.sh``).  Within a category,
hooks run one at a time in ascending filename order.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from enum import Enum
from pathlib import Path

from .exceptions import HookAbortedError, HookError

logger = logging.getLogger(__name__)


class HookCategory(str, Enum):
    """The twelve hook categories, in listing order."""
    PRE_SYNC = "pre-sync"
    POST_SYNC = "post-sync"
    PRE_RSYNC = "pre-rsync"
    POST_RSYNC = "post-rsync"
    PRE_LINK = "pre-link"
    POST_LINK = "post-link"
    PRE_STATUS = "pre-status"
    POST_STATUS = "post-status"
    PRE_DIFF = "pre-diff"
    POST_DIFF = "post-diff"
    PRE_CLEAN = "pre-clean"
    POST_CLEAN = "post-clean"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @classmethod
    def pre(cls, command: str) -> HookCategory:
        return cls(f"pre-{command}")

    @classmethod
    def post(cls, command: str) -> HookCategory:
        return cls(f"post-{command}")


HOOK_NAMES = frozenset(c.value for c in HookCategory)


def file_prefix(name: str) -> str:
    """Return *name* up to its first dot, not counting a leading dot.

    ``post-sync.001.sh`` -> ``post-sync``, ``.bashrc`` -> ``.bashrc``.
    """
    if name == "..":
        return name
    i = name.find(".", 1)
    return name if i == -1 else name[:i]


def is_hook(name: str) -> bool:
    """True if file *name* names a hook script."""
    return file_prefix(name) in HOOK_NAMES


def os_identifier() -> str:
    """Host operating system, as exposed to hooks in ``DEEZ_OS``."""
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        return "macos"
    if sys.platform in ("win32", "cygwin"):
        return "windows"
    return sys.platform


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------

class Hooks:
    """Hook scripts of one configuration root.

    Attributes:
        root: Configuration root (hooks run with it as working directory).
        home: Home directory, exposed as ``DEEZ_HOME``.
        verbose: Whether ``DEEZ_VERBOSE`` is set for the scripts.
    """

    def __init__(
        self,
        root: Path,
        home: Path,
        *,
        verbose: bool = False,
        scripts: dict[HookCategory, list[str]] | None = None,
    ) -> None:
        self.root = Path(root)
        self.home = Path(home)
        self.verbose = verbose
        self._scripts: dict[HookCategory, list[str]] = {c: [] for c in HookCategory}
        for category, names in (scripts or {}).items():
            self._scripts[HookCategory(category)] = sorted(names)

    @classmethod
    def for_root(cls, root: Path, home: Path, *, verbose: bool = False) -> Hooks:
        """Discover the hooks inside *root*."""
        scripts: dict[HookCategory, list[str]] = {c: [] for c in HookCategory}
        try:
            with os.scandir(root) as it:
                for entry in it:
                    if not entry.is_file():
                        continue
                    prefix = file_prefix(entry.name)
                    if prefix in HOOK_NAMES:
                        scripts[HookCategory(prefix)].append(entry.name)
        except OSError as exc:
            raise HookError(f"Could not read root directory for hooks: {exc}") from exc
        return cls(root, home, verbose=verbose, scripts=scripts)

    # ------------------------------------------------------------------
    def scripts(self, category: HookCategory) -> list[str]:
        """Root-relative hook names of *category*, in execution order."""
        return list(self._scripts[HookCategory(category)])

    def list_all(self) -> list[str]:
        """All hooks, grouped by category and in execution order."""
        return [name for category in HookCategory for name in self._scripts[category]]

    @property
    def environment(self) -> dict[str, str]:
        """Variables added to the environment of every hook."""
        env = {
            "DEEZ_ROOT": os.path.realpath(self.root),
            "DEEZ_HOME": os.path.realpath(self.home),
            "DEEZ_OS": os_identifier(),
        }
        if self.verbose:
            env["DEEZ_VERBOSE"] = "true"
        return env

    # ------------------------------------------------------------------
    def run(self, category: HookCategory) -> int:
        """Run every hook of *category*; return how many ran.

        Raises:
            HookAbortedError: A hook exited with a non-zero status.  No
                further hook of the batch runs.
            HookError: A hook could not be started.
        """
        names = self._scripts[HookCategory(category)]
        for name in names:
            self._run_hook(name)
        return len(names)

    def _run_hook(self, name: str) -> None:
        logger.info("hook: %s", name)
        env = {k: v for k, v in os.environ.items() if k != "DEEZ_VERBOSE"}
        env.update(self.environment)
        try:
            proc = subprocess.run(
                ["sh", "-c", shlex.quote(str(self.root / name))],
                cwd=self.root, env=env,
            )
        except OSError as exc:
            raise HookError(f"Could not run hook '{name}': {exc}") from exc
        if proc.returncode != 0:
            raise HookAbortedError(name, proc.returncode)

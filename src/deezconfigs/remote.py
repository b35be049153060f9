"""Configuration roots hosted in a git remote.

A remote root is cloned shallowly into a fresh temporary directory, and
the clone is then used as a regular local root.

Accepted forms::

    git:../configs                  any URL or path git understands
    gh:user/configs                 git@github.com:user/configs
    ssh://, git@, https://, http:// URLs as-is
    <any of the above>[sub/root]    use a sub-directory of the clone
"""

from __future__ import annotations

import io
import logging
import os
import sys
import tempfile
from pathlib import Path

from dulwich import porcelain
from dulwich.client import HTTPProxyUnauthorized, HTTPUnauthorized
from dulwich.errors import GitProtocolError, NotGitRepository

from .exceptions import RemoteCloneError

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("git:", "ssh://", "git@", "https://", "http://", "gh:")


def is_git_remote_uri(root: str | None) -> bool:
    """True if a root argument designates a git remote."""
    return bool(root) and root.startswith(REMOTE_PREFIXES)


def normalize_remote_uri(uri: str) -> str:
    """Expand the ``git:`` and ``gh:`` shorthands."""
    if uri.startswith("git:"):
        return uri[len("git:"):]
    if uri.startswith("gh:"):
        return f"git@github.com:{uri[len('gh:'):]}"
    return uri


def extract_sub_root(uri: str) -> tuple[str, str | None]:
    """Split a trailing ``[sub/root]`` selector off *uri*.

    The selector is stripped of whitespace and leading slashes; an empty
    selector means no sub-root.
    """
    base, sep, rest = uri.rpartition("[")
    if not sep or not rest.endswith("]"):
        return uri, None
    sub_root = rest[:-1].strip().lstrip("/")
    return base, sub_root or None


def _is_local_source(url: str) -> bool:
    return url.startswith("file://") or os.path.isdir(os.path.expanduser(url))


def clone_config_root(uri: str, *, verbose: bool = False, tmp_dir: str | None = None) -> Path:
    """Clone the remote root *uri* and return the local root to use.

    Raises:
        RemoteCloneError: The clone failed, or the requested sub-root
            does not exist inside it.
    """
    url, sub_root = extract_sub_root(normalize_remote_uri(uri))
    if _is_local_source(url):
        url = os.path.expanduser(url)
    clone_path = Path(tempfile.mkdtemp(prefix="deez-", dir=tmp_dir)) / "root"
    logger.info("Cloning %s into %s", url, clone_path)

    # Local clones ignore depth, like `git clone --depth=1` does.
    depth = None if _is_local_source(url) else 1
    errstream = getattr(sys.stderr, "buffer", io.BytesIO()) if verbose else io.BytesIO()
    try:
        repo = porcelain.clone(url, str(clone_path), depth=depth, errstream=errstream)
    except (OSError, ValueError, GitProtocolError, NotGitRepository, porcelain.Error,
            HTTPUnauthorized, HTTPProxyUnauthorized) as exc:
        msg = "Could not clone the configuration repository."
        if not verbose:
            msg += " Retry with `--verbose` for additional detail."
        raise RemoteCloneError(f"{msg} ({exc})") from exc
    repo.close()

    if sub_root is None:
        return clone_path
    root = clone_path / sub_root
    if not root.is_dir():
        raise RemoteCloneError(f"Cannot find sub-root inside Git repository: '{sub_root}'.")
    return root

"""Commands that write: sync, rsync, link, clean."""

from __future__ import annotations

import click

from .. import reconcile
from ._helpers import (
    main,
    _exit_for,
    _handle_run_errors,
    _print_summary,
    _resolve_config,
    _root_argument,
)


@main.command()
@_root_argument
@click.pass_context
def sync(ctx, root):
    """Update Home from configs.

    Copies every file of the root into Home. Symlinks in the root are
    recreated as identical symlinks; symlinks in Home are replaced, never
    written through.
    """
    config = _resolve_config(ctx, root, check_marker=True)
    with _handle_run_errors(ctx):
        outcome = reconcile.sync(config)
    _print_summary("Wrote", outcome, config)
    _exit_for(ctx, outcome)


@main.command()
@_root_argument
@click.pass_context
def rsync(ctx, root):
    """Update configs from Home.

    Copies the Home version of every root file back into the root. Home
    symlinks that point at the root file itself are left alone.
    """
    config = _resolve_config(ctx, root, check_marker=True, allow_remote=False)
    with _handle_run_errors(ctx):
        outcome = reconcile.rsync(config)
    _print_summary("Updated", outcome, config)
    _exit_for(ctx, outcome)


@main.command()
@_root_argument
@click.pass_context
def link(ctx, root):
    """Symlink configs to Home.

    Replaces every Home entry with a symlink to the absolute path of the
    root file.
    """
    config = _resolve_config(ctx, root, check_marker=True)
    with _handle_run_errors(ctx):
        outcome = reconcile.link(config)
    _print_summary("Linked", outcome, config)
    _exit_for(ctx, outcome)


@main.command()
@_root_argument
@click.pass_context
def clean(ctx, root):
    """Remove all configs from Home.

    Deletes the Home copy of every root file, then removes the parent
    directories that became empty (never Home itself).
    """
    config = _resolve_config(ctx, root, check_marker=True)
    with _handle_run_errors(ctx):
        outcome = reconcile.clean(config)
    _print_summary("Removed", outcome, config)
    _exit_for(ctx, outcome)

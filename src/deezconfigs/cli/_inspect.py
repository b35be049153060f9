"""Read-only commands: status, diff."""

from __future__ import annotations

import click

from .. import reconcile
from ..compare import EntryState
from ..report import DiffReport, StatusReport
from ._helpers import (
    main,
    _exit_for,
    _handle_run_errors,
    _print_hooks_summary,
    _resolve_config,
    _root_argument,
    _style,
)

_STATE_COLORS = {
    EntryState.IN_SYNC: "green",
    EntryState.MODIFIED: "yellow",
    EntryState.MISSING: "red",
}


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------

def _print_status(report: StatusReport) -> None:
    click.echo("Files")
    for s in report.statuses:
        marker = _style(s.state.symbol, fg=_STATE_COLORS[s.state])
        link = _style("@", fg="blue") if s.is_symlinked else ""
        click.echo(f"  {marker}  {s.path}{link}")
    if report.hooks:
        click.echo("Hooks")
        for hook in report.hooks:
            click.echo(f"  {hook}")
    click.echo(
        f"{report.count(EntryState.IN_SYNC)} in sync, "
        f"{report.count(EntryState.MODIFIED)} modified, "
        f"{report.count(EntryState.MISSING)} missing."
    )


@main.command()
@_root_argument
@click.pass_context
def status(ctx, root):
    """List files and their status.

    \b
    S  in sync
    M  modified in Home
    !  missing from Home
    @  Home entry is a symlink
    """
    config = _resolve_config(ctx, root, check_marker=False)
    with _handle_run_errors(ctx):
        report = reconcile.status(config)
    _print_status(report)
    _print_hooks_summary(report.hooks_ran)
    _exit_for(ctx, report)


# ---------------------------------------------------------------------------
# diff
# ---------------------------------------------------------------------------

def _color_diff_line(line: str) -> str:
    if line.startswith("+"):
        return _style(line, fg="green")
    if line.startswith(("-", "!")):
        return _style(line, fg="red")
    if line.startswith("@"):
        return _style(line, fg="blue")
    return line


def _format_diffs(report: DiffReport) -> str:
    blocks = []
    for d in report.diffs:
        body = "\n".join(_color_diff_line(line) for line in d.diff.splitlines())
        blocks.append(f"{_style(d.path, bold=True, underline=True)}\n{body}\n")
    return "\n".join(blocks)


@main.command()
@_root_argument
@click.option("-r", "--reversed", "reverse", is_flag=True,
              help="Show changes from Home to root instead of root to Home.")
@click.pass_context
def diff(ctx, root, reverse):
    """Show what has changed.

    By default, lines prefixed with '+' are in Home but not in the root.
    """
    config = _resolve_config(ctx, root, check_marker=False)
    with _handle_run_errors(ctx):
        report = reconcile.diff(config, reverse=reverse)
    if report.in_sync and report.ok:
        click.echo("Home is in sync.")
    elif report.diffs:
        click.echo_via_pager(_format_diffs(report))
    _print_hooks_summary(report.hooks_ran)
    _exit_for(ctx, report)

"""The run command."""

from __future__ import annotations

import subprocess

import click

from ..config import ROOT_ENV_VAR, ensure_root_exists, root_from_environment
from ..exceptions import RootNotFoundError
from ._helpers import main, FatalError


@main.command(context_settings={"ignore_unknown_options": True,
                                "allow_interspersed_args": False})
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run(ctx, command):
    """Run a command inside the DEEZ_ROOT directory.

    The command's exit code is forwarded:

        deez run git pull
    """
    root = root_from_environment()
    if root is None:
        raise FatalError(f"The '{ROOT_ENV_VAR}' environment variable is not set.")
    try:
        root = ensure_root_exists(root)
    except RootNotFoundError as exc:
        raise FatalError(str(exc))
    if not command:
        raise click.UsageError("Run deez what?")
    if ctx.obj["verbose"]:
        click.echo(f"root: {root}")
    try:
        proc = subprocess.run(list(command), cwd=root)
    except OSError as exc:
        raise FatalError(f"Command '{command[0]}' not found. ({exc})")
    ctx.exit(proc.returncode)

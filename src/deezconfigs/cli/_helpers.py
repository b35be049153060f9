"""Shared helpers, exit codes, and the main CLI group."""

from __future__ import annotations

import contextlib
import logging
import os

import click

from ..config import Config, home_directory, is_config_root, resolve_root
from ..exceptions import DeezError, HookAbortedError, HookError
from ..remote import clone_config_root, is_git_remote_uri
from ..report import RunOutcome

EXIT_FILE_ERRORS = 1
EXIT_DECLINED = 3
EXIT_HOOK_ABORTED = 4
EXIT_FATAL = 5


class FatalError(click.ClickException):
    """Whole-run failure before any work was done."""

    exit_code = EXIT_FATAL

    def show(self, file=None):
        click.echo(f"{_style('fatal', fg='red')}: {self.format_message()}", err=True)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _style(text: str, **styles) -> str:
    """Color *text* unless NO_COLOR is set."""
    if os.environ.get("NO_COLOR"):
        return text
    return click.style(text, **styles)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'' if n == 1 else 's'}"


def _print_hooks_summary(hooks_ran: int) -> None:
    if hooks_ran:
        click.echo(f"Ran {_plural(hooks_ran, 'hook')}.")


def _print_summary(verb: str, outcome: RunOutcome, config: Config) -> None:
    """Print touched paths (verbose), then file and hook counts."""
    for path in outcome.touched:
        click.echo(path)
    if outcome.total == 0:
        click.echo(f"No config files found in '{config.root}'.")
    line = f"{verb} {_plural(outcome.processed, 'file')}"
    if outcome.errors:
        line += f", {_plural(len(outcome.errors), 'error')}"
    click.echo(line + ".")
    _print_hooks_summary(outcome.hooks_ran)


class _EchoHandler(logging.Handler):
    """Send log records to stderr through click."""

    _PREFIX = {logging.ERROR: ("error", "red"), logging.WARNING: ("warning", "yellow")}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:
            self.handleError(record)
            return
        level = max((lvl for lvl in self._PREFIX if record.levelno >= lvl), default=None)
        if level is not None:
            word, color = self._PREFIX[level]
            msg = f"{_style(word, fg=color)}: {msg}"
        click.echo(msg, err=True)


def _setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("deezconfigs")
    for handler in [h for h in logger.handlers if isinstance(h, _EchoHandler)]:
        logger.removeHandler(handler)
    logger.addHandler(_EchoHandler())
    logger.setLevel(logging.INFO if verbose else logging.WARNING)


# ---------------------------------------------------------------------------
# Root and Home resolution
# ---------------------------------------------------------------------------

def _root_argument(f):
    """Shared optional ROOT argument (local path or git remote)."""
    return click.argument("root", required=False)(f)


def _confirm_non_root(ctx, root) -> None:
    """Ask before mutating a directory that lacks the ``.deez`` marker."""
    click.echo(
        f"{_style('warning', fg='yellow')}: `root` is not a configuration root.\n"
        "\n"
        "To make it a configuration root, create a `.deez` file inside of it.\n"
        "This is a security feature. `deez` doesn't want to mess up your Home\n"
        "directory if you run it in the wrong root.\n"
        "\n"
        f"Selected root: '{root}'.\n",
        err=True,
    )
    try:
        proceed = click.confirm("Proceed?", default=False)
    except click.Abort:
        proceed = False
    if not proceed:
        click.echo("Aborting.", err=True)
        ctx.exit(EXIT_DECLINED)
    click.echo()


def _resolve_config(ctx, root_arg: str | None, *, check_marker: bool,
                    allow_remote: bool = True) -> Config:
    """Resolve root and Home for a command, or exit."""
    verbose = ctx.obj["verbose"]
    try:
        if is_git_remote_uri(root_arg):
            if not allow_remote:
                raise FatalError(f"'{ctx.info_name}' needs a local root.")
            click.echo("Fetching config files remotely...")
            root = clone_config_root(root_arg, verbose=verbose)
            click.echo("Done.")
        else:
            root = resolve_root(root_arg)
            if check_marker and not is_config_root(root):
                _confirm_non_root(ctx, root)
        home = home_directory()
    except DeezError as exc:
        raise FatalError(str(exc))
    if verbose:
        click.echo(f"root: {root}", err=True)
    return Config(root=root, home=home, verbose=verbose, workers=ctx.obj["workers"])


@contextlib.contextmanager
def _handle_run_errors(ctx):
    """Map whole-run failures raised by the core to exit codes."""
    try:
        yield
    except HookError as exc:
        # Only a hook failing before traversal leaves Home untouched.
        if not isinstance(exc, HookAbortedError) and exc.outcome is None:
            raise FatalError(str(exc))
        click.echo(f"{_style('fatal', fg='red')}: {exc}", err=True)
        if exc.outcome is not None:
            click.echo("Files were processed before the abort.", err=True)
        ctx.exit(EXIT_HOOK_ABORTED)
    except DeezError as exc:
        raise FatalError(str(exc))


def _exit_for(ctx, report) -> None:
    if not report.ok:
        ctx.exit(EXIT_FILE_ERRORS)


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

class AliasedGroup(click.Group):
    """Group accepting the short command names (``s``, ``rs``, ...)."""

    ALIASES = {"s": "sync", "rs": "rsync", "l": "link",
               "st": "status", "df": "diff", "c": "clean"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


@click.group(cls=AliasedGroup)
@click.option("-v", "--verbose", is_flag=True, help="Show files being processed.")
@click.option("--workers", type=click.IntRange(min=1), default=None, hidden=True,
              help="Number of traversal threads.")
@click.version_option(package_name="deezconfigs", prog_name="deez")
@click.pass_context
def main(ctx, verbose, workers):
    """deez: manage deez config files.

    \b
    Update Home:
      sync [<root>|<git>]    Update Home from configs  (alias: s)
      rsync [<root>]         Update configs from Home  (alias: rs)
      link [<root>|<git>]    Symlink configs to Home   (alias: l)

    \b
    Inspect:
      status [<root>|<git>]  List files and their status (alias: st)
      diff [<root>|<git>]    Show what has changed       (alias: df)
      clean [<root>|<git>]   Remove all configs from Home (alias: c)

    \b
    A root is a directory holding a `.deez` file. Without an argument,
    the current directory, its closest root ancestor, or DEEZ_ROOT is
    used. Git remotes (git:, gh:, ssh://, git@, https://) are cloned to
    a temporary directory first.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["workers"] = workers
    _setup_logging(verbose)

"""Console-script entry point for ``deez``.

The library installs without click; only the command line needs the
``cli`` extra.
"""

import sys

INSTALL_HINT = "Install it with:  pip install 'deezconfigs[cli]'"


def main(argv=None):
    try:
        from .cli import main as cli_main
    except ModuleNotFoundError as exc:
        # Only a missing click is reported; other import errors propagate.
        if exc.name != "click":
            raise
        sys.exit(f"deez: the command line requires click.\n{INSTALL_HINT}")
    cli_main(args=argv, prog_name="deez")

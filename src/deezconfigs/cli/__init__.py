"""deez CLI: keep configuration files in sync with Home."""

from ._helpers import main  # noqa: F401

# Import command modules to register Click commands with the main group.
from . import _reconcile, _inspect, _run  # noqa: F401

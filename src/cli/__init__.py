"""CLI entrypoints for hashspec."""

from cli.app import main, run
from cli.exit_codes import ExitCode

__all__ = ["ExitCode", "main", "run"]

"""Main application setup for the hashspec CLI."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Annotated, Literal

import msgspec
from cyclopts import App, Parameter
from cyclopts.exceptions import CycloptsError

from cli.commands.version import get_version
from cli.exit_codes import ExitCode
from cli.groups import session_group
from hashspec.errors import HashSpecError

_LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_HELP_EPILOGUE = """
Examples:
  hashspec verify checkout_page state.json        Compare against Specs/checkout_page.hash
  hashspec verify checkout_page state.json --update
                                                  Accept the current state as the baseline
  hashspec fingerprint state.json --ignore token  Print the digest without 'token' fields
  hashspec show checkout_page                     Print a stored baseline
  hashspec list                                   List stored baselines

Environment Variables:
  HASHSPEC_UPDATE         Overwrite baselines instead of comparing (1/true/yes)
  HASHSPEC_SPEC_DIR       Baseline directory (default: ./Specs)
  HASHSPEC_ARTIFACTS_DIR  Mismatch artifact directory (default: ./Artifacts)
  HASHSPEC_LOG_LEVEL      Default log level (DEBUG, INFO, WARNING, ERROR)
"""

app = App(
    name="hashspec",
    help="HashSpec - semantic state fingerprints and baseline verification.",
    help_format="rich",
    help_epilogue=_HELP_EPILOGUE,
    version=get_version(),
    version_flags=["--version", "-V"],
    default_parameter=Parameter(
        show_default=True,
        show_env_var=True,
    ),
    exit_on_error=True,
    print_error=True,
    help_on_error=False,
)

app.meta.group_parameters = session_group


@app.meta.default
def meta_launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"],
        Parameter(
            name="--log-level",
            help="Logging verbosity level.",
            env_var="HASHSPEC_LOG_LEVEL",
            group=session_group,
        ),
    ] = "INFO",
) -> int:
    """Configure logging, then dispatch to the selected command.

    Returns
    -------
    int
        Exit status code from command execution.
    """
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    return run(tokens)


def run(tokens: Sequence[str]) -> int:
    """Parse and execute one command, mapping failures to exit codes.

    Parameters
    ----------
    tokens
        Command tokens, without the program name.

    Returns
    -------
    int
        Exit status code.
    """
    try:
        command, bound, _ignored = app.parse_args(
            list(tokens),
            exit_on_error=False,
            print_error=True,
        )
    except CycloptsError as exc:
        return ExitCode.from_exception(exc)
    try:
        result = command(*bound.args, **bound.kwargs)
    except (HashSpecError, msgspec.DecodeError, OSError, ValueError, TypeError) as exc:
        _LOGGER.error("%s", exc)
        return ExitCode.from_exception(exc)
    return int(result) if isinstance(result, int) else ExitCode.SUCCESS


# Lazy-loaded commands
app.command("cli.commands.baseline:verify_command", name="verify")
app.command("cli.commands.baseline:fingerprint_command", name="fingerprint", alias="fp")
app.command("cli.commands.baseline:show_command", name="show")
app.command("cli.commands.baseline:list_command", name="list", alias="ls")
app.command("cli.commands.version:version_command", name="version", alias="v")


def main() -> None:
    """Run the hashspec CLI."""
    app.meta()


__all__ = ["app", "main", "run"]

"""Exit code taxonomy for the hashspec CLI."""

from __future__ import annotations

from enum import IntEnum

import msgspec

from hashspec.errors import ErrorKind, HashSpecError


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Exit codes follow Unix conventions with domain-specific extensions:
    - 0: Success (pass, created, updated)
    - 1: Baseline mismatch
    - 2-9: Usage, configuration, storage and encoding errors
    """

    SUCCESS = 0
    MISMATCH = 1
    PARSE_ERROR = 2
    VALIDATION_ERROR = 3
    CONFIG_ERROR = 4
    STORAGE_ERROR = 5
    CANONICAL_ERROR = 6
    GENERAL_ERROR = 9

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExitCode:
        """Map an exception to an appropriate exit code.

        Parameters
        ----------
        exc
            Exception to classify.

        Returns
        -------
        ExitCode
            Exit code appropriate for the exception type.
        """
        cyclopts_code = _exit_code_for_cyclopts(exc)
        if cyclopts_code is not None:
            return cyclopts_code

        if isinstance(exc, HashSpecError):
            return _KIND_CODES.get(exc.kind, cls.GENERAL_ERROR)

        type_code = _exit_code_for_exception_type(exc)
        if type_code is not None:
            return type_code

        return cls.GENERAL_ERROR


_KIND_CODES: dict[ErrorKind, ExitCode] = {
    ErrorKind.CONFIG: ExitCode.CONFIG_ERROR,
    ErrorKind.STORAGE: ExitCode.STORAGE_ERROR,
    ErrorKind.CANONICAL: ExitCode.CANONICAL_ERROR,
    ErrorKind.MISMATCH: ExitCode.MISMATCH,
}


def _exit_code_for_cyclopts(exc: BaseException) -> ExitCode | None:
    module = exc.__class__.__module__
    if not module.startswith("cyclopts"):
        return None
    if exc.__class__.__name__ == "ValidationError":
        return ExitCode.VALIDATION_ERROR
    return ExitCode.PARSE_ERROR


def _exit_code_for_exception_type(exc: BaseException) -> ExitCode | None:
    if isinstance(exc, msgspec.DecodeError):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, (ValueError, TypeError)):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, (FileNotFoundError, IsADirectoryError, PermissionError)):
        return ExitCode.CONFIG_ERROR
    return None


__all__ = ["ExitCode"]

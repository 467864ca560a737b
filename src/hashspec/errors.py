"""Error types for fingerprinting and baseline verification."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hashspec.verify import VerifyResult


class ErrorKind(StrEnum):
    """Categorize hashspec errors by subsystem."""

    GENERIC = "generic"
    CONFIG = "config"
    STORAGE = "storage"
    CANONICAL = "canonical"
    MISMATCH = "mismatch"


class HashSpecError(Exception):
    """Base exception for hashspec failures."""

    kind: ErrorKind = ErrorKind.GENERIC


class ConfigurationError(HashSpecError, ValueError):
    """Raised when a spec name or configuration value is invalid."""

    kind = ErrorKind.CONFIG


class StorageError(HashSpecError, OSError):
    """Raised when baseline artifacts cannot be read or written."""

    kind = ErrorKind.STORAGE


class CanonicalizationError(HashSpecError, ValueError):
    """Raised when a value cannot be reduced to canonical form."""

    kind = ErrorKind.CANONICAL

    def __init__(self, message: str, *, path: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.path = path


class CyclicStructureError(CanonicalizationError):
    """Raised when a container is re-entered while canonicalizing it."""


class UnsupportedValueError(CanonicalizationError, TypeError):
    """Raised when a value has no canonical representation."""


class SpecMismatchError(HashSpecError, AssertionError):
    """Raised when a value no longer matches its accepted baseline.

    This is an ``AssertionError`` so test runners report a failed check
    instead of an internal error.
    """

    kind = ErrorKind.MISMATCH

    def __init__(self, result: VerifyResult) -> None:
        message = (
            f"HashSpec mismatch for {result.name!r}: expected {result.expected_digest}, "
            f"got {result.digest}."
        )
        if result.artifact_path is not None:
            message += f" Actual snapshot written to {result.artifact_path}."
        if result.diff is not None and result.diff.entries:
            message += "\n" + result.diff.to_text()
        super().__init__(message)
        self.result = result


def format_path(path: tuple[str, ...]) -> str:
    """Return a dotted, human-readable rendering of a field path."""
    return ".".join(path) if path else "<root>"


__all__ = [
    "CanonicalizationError",
    "ConfigurationError",
    "CyclicStructureError",
    "ErrorKind",
    "HashSpecError",
    "SpecMismatchError",
    "StorageError",
    "UnsupportedValueError",
    "format_path",
]

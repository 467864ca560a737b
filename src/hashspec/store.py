"""Persisted baselines and mismatch artifacts.

For a spec named ``N`` the store keeps two sibling files in ``spec_dir``:

- ``N.hash``: the fingerprint, the authoritative comparison value;
- ``N.json``: the pretty-printed canonical snapshot, used for diffs.

Failing verifications write ``N.actual.json`` into ``artifacts_dir``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

from core_types import HashStr, SpecNameStr
from hashspec.errors import ConfigurationError, StorageError
from hashspec.fingerprint import is_fingerprint
from serde_msgspec import StructBaseStrict
from utils.file_io import read_text, write_text_atomic

if TYPE_CHECKING:
    from hashspec.config import HashSpecConfig

_LOGGER = logging.getLogger(__name__)

HASH_SUFFIX: Final = ".hash"
SNAPSHOT_SUFFIX: Final = ".json"
ACTUAL_SUFFIX: Final = ".actual.json"

_RESERVED_NAMES: Final = frozenset({".", ".."})
_SEPARATORS: Final = ("/", "\\", "\x00")


class Spec(StructBaseStrict, frozen=True):
    """A named baseline; ``text`` is None when the snapshot file is missing."""

    name: SpecNameStr
    digest: HashStr
    text: str | None = None


def validate_spec_name(name: str) -> str:
    """Return the spec name or raise when it cannot name an artifact.

    Raises
    ------
    ConfigurationError
        Raised for empty names, path separators and ``.``/``..``.
    """
    if not name or not name.strip():
        msg = "Spec name cannot be empty."
        raise ConfigurationError(msg)
    if name in _RESERVED_NAMES or any(sep in name for sep in _SEPARATORS):
        msg = f"Spec name {name!r} must be a plain file stem."
        raise ConfigurationError(msg)
    return name


class BaselineStore:
    """Read and write baseline artifact pairs under a directory."""

    def __init__(self, spec_dir: Path, artifacts_dir: Path) -> None:
        self.spec_dir = Path(spec_dir)
        self.artifacts_dir = Path(artifacts_dir)

    @classmethod
    def from_config(cls, config: HashSpecConfig) -> BaselineStore:
        return cls(config.spec_dir, config.artifacts_dir)

    def hash_path(self, name: str) -> Path:
        return self.spec_dir / f"{validate_spec_name(name)}{HASH_SUFFIX}"

    def snapshot_path(self, name: str) -> Path:
        return self.spec_dir / f"{validate_spec_name(name)}{SNAPSHOT_SUFFIX}"

    def artifact_path(self, name: str) -> Path:
        return self.artifacts_dir / f"{validate_spec_name(name)}{ACTUAL_SUFFIX}"

    def load(self, name: str) -> Spec | None:
        """Return the stored baseline, or None when none exists.

        Parameters
        ----------
        name
            Spec name.

        Returns
        -------
        Spec | None
            Stored baseline; ``text`` is None when only the digest exists.

        Raises
        ------
        StorageError
            Raised when an artifact cannot be read or the digest is malformed.
        """
        hash_path = self.hash_path(name)
        if not hash_path.exists():
            return None
        digest = self._read(hash_path).strip()
        if not is_fingerprint(digest):
            msg = f"Malformed digest in {hash_path}: {digest[:80]!r}."
            raise StorageError(msg)
        snapshot_path = self.snapshot_path(name)
        text: str | None = None
        if snapshot_path.exists():
            text = self._read(snapshot_path)
        else:
            _LOGGER.warning("Baseline snapshot missing for %s: %s", name, snapshot_path)
        return Spec(name=name, digest=digest, text=text)

    def save(self, spec: Spec) -> None:
        """Persist a baseline, snapshot text first and digest last.

        Raises
        ------
        ConfigurationError
            Raised when the spec carries a malformed digest.
        StorageError
            Raised when the artifacts cannot be written.
        """
        if not is_fingerprint(spec.digest):
            msg = f"Refusing to save malformed digest for {spec.name!r}: {spec.digest!r}."
            raise ConfigurationError(msg)
        if spec.text is not None:
            self._write(self.snapshot_path(spec.name), spec.text)
        self._write(self.hash_path(spec.name), spec.digest)

    def write_mismatch(self, name: str, text: str) -> Path:
        """Write the actual snapshot of a failing verification.

        Returns
        -------
        Path
            Path of the written artifact.
        """
        path = self.artifact_path(name)
        self._write(path, text)
        return path

    def names(self) -> tuple[str, ...]:
        """Return the sorted names of stored baselines."""
        if not self.spec_dir.is_dir():
            return ()
        return tuple(
            sorted(
                path.name.removesuffix(HASH_SUFFIX)
                for path in self.spec_dir.glob(f"*{HASH_SUFFIX}")
                if path.is_file()
            )
        )

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read baseline artifact {path}: {exc}"
            raise StorageError(msg) from exc

    @staticmethod
    def _write(path: Path, text: str) -> None:
        try:
            write_text_atomic(path, text)
        except OSError as exc:
            msg = f"Cannot write baseline artifact {path}: {exc}"
            raise StorageError(msg) from exc


__all__ = [
    "ACTUAL_SUFFIX",
    "HASH_SUFFIX",
    "SNAPSHOT_SUFFIX",
    "BaselineStore",
    "Spec",
    "validate_spec_name",
]

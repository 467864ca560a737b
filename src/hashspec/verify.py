"""Baseline verification: create, compare, update.

Each ``Verifier.verify`` call runs to completion:

1. canonicalize and fingerprint the current value;
2. load the baseline; when it is absent, or update mode is on, write the
   current snapshot and finish as ``CREATED`` / ``UPDATED``;
3. otherwise compare digests; equal finishes as ``PASS`` with no writes,
   unequal renders a diff, writes the mismatch artifact and finishes as
   ``FAIL``.

A mismatch never rewrites the baseline. ``FAIL`` is a result, not an
exception; ``VerifyResult.raise_for_status`` turns it into a
``SpecMismatchError`` for test frameworks.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Final

from rich.text import Text

from core_types import ConverterMap, HashStr, SpecNameStr
from hashspec.config import HashSpecConfig
from hashspec.diff import DiffReport, format_mismatch_report, render_diff
from hashspec.errors import SpecMismatchError, StorageError
from hashspec.exclusions import NO_EXCLUSIONS, ExclusionPolicy
from hashspec.fingerprint import Snapshot, take_snapshot
from hashspec.store import BaselineStore, Spec, validate_spec_name
from serde_msgspec import StructBaseStrict

_LOGGER = logging.getLogger(__name__)

MISSING_BASELINE_TEXT: Final = '{\n  "error": "Baseline JSON missing"\n}\n'


class VerifyStatus(StrEnum):
    """Terminal state of one verification."""

    PASS = "pass"
    CREATED = "created"
    UPDATED = "updated"
    FAIL = "fail"


class VerifyResult(StructBaseStrict, frozen=True):
    """Outcome of one verification call."""

    name: SpecNameStr
    status: VerifyStatus
    digest: HashStr
    expected_digest: HashStr | None = None
    diff: DiffReport | None = None
    artifact_path: Path | None = None

    @property
    def passed(self) -> bool:
        return self.status is not VerifyStatus.FAIL

    def raise_for_status(self) -> VerifyResult:
        """Return self, or raise when the verification failed.

        Raises
        ------
        SpecMismatchError
            Raised for ``FAIL`` results.
        """
        if self.status is VerifyStatus.FAIL:
            raise SpecMismatchError(self)
        return self

    def summary(self) -> str:
        """Return a one-line description naming the spec."""
        if self.status is VerifyStatus.CREATED:
            return f"[HashSpec] Created new baseline for: {self.name}"
        if self.status is VerifyStatus.UPDATED:
            return f"[HashSpec] Updated baseline for: {self.name}"
        if self.status is VerifyStatus.PASS:
            return f"[HashSpec] Baseline matched for: {self.name}"
        return f"[HashSpec] MISMATCH DETECTED in {self.name}"

    def report(self) -> Text:
        """Return the console report for this result."""
        if self.status is VerifyStatus.FAIL:
            return format_mismatch_report(self.name, self.diff or DiffReport())
        style = "green" if self.status is VerifyStatus.PASS else "cyan"
        return Text(self.summary(), style=style)


class Verifier:
    """Verify values against baselines held in a ``BaselineStore``.

    Parameters
    ----------
    store
        Baseline storage.
    update
        When True every verification overwrites its baseline.
    exclusions
        Exclusion policy applied to every call.
    converters
        Per-type conversion functions for the canonical encoder.
    """

    def __init__(
        self,
        store: BaselineStore,
        *,
        update: bool = False,
        exclusions: ExclusionPolicy | None = None,
        converters: ConverterMap | None = None,
    ) -> None:
        self.store = store
        self.update = update
        self.exclusions = exclusions or NO_EXCLUSIONS
        self.converters = converters

    @classmethod
    def from_config(
        cls,
        config: HashSpecConfig,
        *,
        exclusions: ExclusionPolicy | None = None,
        converters: ConverterMap | None = None,
    ) -> Verifier:
        return cls(
            BaselineStore.from_config(config),
            update=config.update,
            exclusions=exclusions,
            converters=converters,
        )

    def snapshot(self, value: object, *, exclusions: ExclusionPolicy | None = None) -> Snapshot:
        """Return the snapshot of a value under this verifier's rules."""
        policy = self.exclusions.merge(exclusions)
        return take_snapshot(value, policy, converters=self.converters)

    def verify(
        self,
        name: str,
        value: object,
        *,
        update: bool | None = None,
        exclusions: ExclusionPolicy | None = None,
    ) -> VerifyResult:
        """Verify a value against the baseline stored under ``name``.

        Parameters
        ----------
        name
            Spec name.
        value
            Current state value.
        update
            Overrides the verifier's update mode for this call.
        exclusions
            Extra exclusions for this call.

        Returns
        -------
        VerifyResult
            ``PASS``, ``CREATED``, ``UPDATED`` or ``FAIL``.
        """
        validate_spec_name(name)
        current = self.snapshot(value, exclusions=exclusions)
        force = self.update if update is None else update
        try:
            baseline = self.store.load(name)
        except StorageError as exc:
            if not force:
                raise
            _LOGGER.warning("Overwriting unreadable baseline for %s: %s", name, exc)
            baseline = None

        if baseline is None or force:
            existed = baseline is not None or self.store.hash_path(name).exists()
            self.store.save(Spec(name=name, digest=current.digest, text=current.text))
            status = VerifyStatus.UPDATED if existed else VerifyStatus.CREATED
            result = VerifyResult(
                name=name,
                status=status,
                digest=current.digest,
                expected_digest=None if baseline is None else baseline.digest,
            )
            _LOGGER.info("%s", result.summary())
            return result

        if baseline.digest == current.digest:
            _LOGGER.debug("Baseline matched for %s (%s)", name, current.digest)
            return VerifyResult(
                name=name,
                status=VerifyStatus.PASS,
                digest=current.digest,
                expected_digest=baseline.digest,
            )
        return self._report_mismatch(baseline, current)

    def check(
        self,
        name: str,
        value: object,
        *,
        update: bool | None = None,
        exclusions: ExclusionPolicy | None = None,
    ) -> VerifyResult:
        """Verify and raise ``SpecMismatchError`` on ``FAIL``."""
        return self.verify(name, value, update=update, exclusions=exclusions).raise_for_status()

    def _report_mismatch(self, baseline: Spec, current: Snapshot) -> VerifyResult:
        expected_text = baseline.text if baseline.text is not None else MISSING_BASELINE_TEXT
        diff = render_diff(expected_text, current.text)
        artifact = self.store.write_mismatch(baseline.name, current.text)
        result = VerifyResult(
            name=baseline.name,
            status=VerifyStatus.FAIL,
            digest=current.digest,
            expected_digest=baseline.digest,
            diff=diff,
            artifact_path=artifact,
        )
        _LOGGER.warning("%s\nActual snapshot: %s", result.report().plain, artifact)
        return result


def verify_state(
    name: str,
    value: object,
    *,
    exclusions: ExclusionPolicy | None = None,
    converters: ConverterMap | None = None,
    config: HashSpecConfig | None = None,
) -> VerifyResult:
    """Verify a value using environment configuration.

    Returns
    -------
    VerifyResult
        ``PASS``, ``CREATED`` or ``UPDATED`` result.

    Raises
    ------
    SpecMismatchError
        Raised when the value no longer matches its baseline.
    """
    resolved = config or HashSpecConfig.from_env()
    verifier = Verifier.from_config(resolved, exclusions=exclusions, converters=converters)
    return verifier.check(name, value)


__all__ = [
    "MISSING_BASELINE_TEXT",
    "VerifyResult",
    "VerifyStatus",
    "Verifier",
    "verify_state",
]

"""SHA-256 fingerprints of canonical forms."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hashspec.canonical import canonicalize, render_canonical
from serde_msgspec import StructBaseStrict
from utils.hashing import hash_json_canonical, is_sha256_hex

if TYPE_CHECKING:
    from core_types import ConverterMap, JsonValue
    from hashspec.exclusions import ExclusionPolicy


class Snapshot(StructBaseStrict, frozen=True):
    """Canonical form of one value with its digest and snapshot text."""

    canonical: object
    digest: str
    text: str


def fingerprint(canonical: JsonValue) -> str:
    """Return the fingerprint of a canonical form.

    Parameters
    ----------
    canonical
        Output of ``canonicalize``.

    Returns
    -------
    str
        64-character lowercase SHA-256 hex digest of the compact encoding.
    """
    return hash_json_canonical(canonical)


def fingerprint_value(
    value: object,
    exclusions: ExclusionPolicy | None = None,
    *,
    converters: ConverterMap | None = None,
) -> str:
    """Canonicalize a value and return its fingerprint."""
    return fingerprint(canonicalize(value, exclusions, converters=converters))


def take_snapshot(
    value: object,
    exclusions: ExclusionPolicy | None = None,
    *,
    converters: ConverterMap | None = None,
) -> Snapshot:
    """Canonicalize a value once and derive its digest and snapshot text.

    Returns
    -------
    Snapshot
        Canonical form, digest and pretty-printed text.
    """
    canonical = canonicalize(value, exclusions, converters=converters)
    return Snapshot(
        canonical=canonical,
        digest=fingerprint(canonical),
        text=render_canonical(canonical),
    )


def is_fingerprint(text: str) -> bool:
    """Return True when the text is a well-formed fingerprint."""
    return is_sha256_hex(text)


__all__ = [
    "Snapshot",
    "fingerprint",
    "fingerprint_value",
    "is_fingerprint",
    "take_snapshot",
]

"""Semantic state fingerprints and baseline verification for regression tests."""

from hashspec.canonical import canonicalize, encode_canonical, render_canonical
from hashspec.config import HashSpecConfig
from hashspec.diff import DiffEntry, DiffReport, render_diff
from hashspec.errors import (
    ConfigurationError,
    CyclicStructureError,
    HashSpecError,
    SpecMismatchError,
    StorageError,
    UnsupportedValueError,
)
from hashspec.exclusions import (
    IGNORED_META,
    ExclusionPolicy,
    HashIgnore,
    ignored_field,
    register_exclusions,
)
from hashspec.fingerprint import Snapshot, fingerprint, fingerprint_value, take_snapshot
from hashspec.store import BaselineStore, Spec
from hashspec.verify import Verifier, VerifyResult, VerifyStatus, verify_state

__all__ = [
    "IGNORED_META",
    "BaselineStore",
    "ConfigurationError",
    "CyclicStructureError",
    "DiffEntry",
    "DiffReport",
    "ExclusionPolicy",
    "HashIgnore",
    "HashSpecConfig",
    "HashSpecError",
    "Snapshot",
    "Spec",
    "SpecMismatchError",
    "StorageError",
    "UnsupportedValueError",
    "Verifier",
    "VerifyResult",
    "VerifyStatus",
    "canonicalize",
    "encode_canonical",
    "fingerprint",
    "fingerprint_value",
    "ignored_field",
    "register_exclusions",
    "render_canonical",
    "render_diff",
    "take_snapshot",
    "verify_state",
]

"""Explicit hash utilities with stable serialization semantics."""

from __future__ import annotations

import hashlib
import re

from serde_msgspec import JSON_ENCODER_SORTED

SHA256_HEX_LENGTH = 64

_SHA256_HEX_RE = re.compile(rf"^[0-9a-f]{{{SHA256_HEX_LENGTH}}}$")


def hash_sha256_hex(payload: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes.

    Returns:
    -------
    str
        64-character lowercase hex digest.
    """
    return hashlib.sha256(payload).hexdigest()


def hash_json_canonical(payload: object) -> str:
    """Return SHA-256 hexdigest using JSON_ENCODER_SORTED.

    Parameters
    ----------
    payload
        Builtin payload to encode.

    Returns:
    -------
    str
        SHA-256 hexdigest.
    """
    buffer = bytearray()
    JSON_ENCODER_SORTED.encode_into(payload, buffer)
    return hash_sha256_hex(bytes(buffer))


def is_sha256_hex(value: str) -> bool:
    """Return True when the value is a full lowercase SHA-256 hex digest."""
    return _SHA256_HEX_RE.match(value) is not None


__all__ = [
    "SHA256_HEX_LENGTH",
    "hash_json_canonical",
    "hash_sha256_hex",
    "is_sha256_hex",
]

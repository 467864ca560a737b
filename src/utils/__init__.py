"""Shared utilities for hashspec."""

from utils.file_io import read_json, read_text, write_text_atomic
from utils.hashing import hash_json_canonical, hash_sha256_hex, is_sha256_hex

__all__ = [
    "hash_json_canonical",
    "hash_sha256_hex",
    "is_sha256_hex",
    "read_json",
    "read_text",
    "write_text_atomic",
]

"""Shared type aliases and small typing helpers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Annotated

from msgspec import Meta

type PathLike = str | Path

HASH_PATTERN = "^[a-f0-9]{64}$"
SPEC_NAME_PATTERN = r"^[^/\\]+$"

type JsonPrimitive = str | int | float | bool | None
type JsonValue = JsonPrimitive | dict[str, JsonValue] | list[JsonValue]

type FieldPath = tuple[str, ...]
type Converter = Callable[[object], object]
type ConverterMap = Mapping[type, Converter]

HashStr = Annotated[
    str,
    Meta(
        pattern=HASH_PATTERN,
        title="Fingerprint",
        description="Lowercase SHA-256 hex digest.",
    ),
]
SpecNameStr = Annotated[
    str,
    Meta(
        min_length=1,
        pattern=SPEC_NAME_PATTERN,
        title="Specification Name",
        description="Baseline name; used as the artifact file stem.",
    ),
]

__all__ = [
    "HASH_PATTERN",
    "SPEC_NAME_PATTERN",
    "Converter",
    "ConverterMap",
    "FieldPath",
    "HashStr",
    "JsonPrimitive",
    "JsonValue",
    "PathLike",
    "SpecNameStr",
]

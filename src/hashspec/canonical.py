"""Canonical encoding of arbitrary state values.

A canonical form is a builtin tree (``dict``/``list``/``str``/``int``/
``float``/``bool``/``None``) whose mappings are ordered by key code point,
which equals the byte-wise order of the UTF-8 encoded keys. Sequences keep
their order. Sets are ordered by the compact encoding of their elements.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import math
from collections.abc import Callable, Iterator, Mapping, Set
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Final
from uuid import UUID

import msgspec

from hashspec.errors import CyclicStructureError, UnsupportedValueError, format_path
from hashspec.exclusions import NO_EXCLUSIONS, ExclusionPolicy, marked_fields
from serde_msgspec import dumps_json_sorted

if TYPE_CHECKING:
    from core_types import ConverterMap, FieldPath, JsonValue

# Integral floats beyond this lose exactness as ints; they stay floats.
_EXACT_INT_LIMIT: Final = 2**53

NAN_TEXT: Final = "NaN"
POS_INF_TEXT: Final = "Infinity"
NEG_INF_TEXT: Final = "-Infinity"

_SET_SEGMENT: Final = "*"


def normalize_float(value: float) -> int | float | str:
    """Return the single canonical representation of a float.

    Integral values become ints (``100.0`` -> ``100``, ``-0.0`` -> ``0``).
    Non-finite values become strings so they never collide with ``null``.

    Returns
    -------
    int | float | str
        Canonical scalar.
    """
    if math.isnan(value):
        return NAN_TEXT
    if math.isinf(value):
        return POS_INF_TEXT if value > 0 else NEG_INF_TEXT
    if value.is_integer() and abs(value) < _EXACT_INT_LIMIT:
        return int(value)
    return float(value)


def normalize_decimal(value: Decimal) -> int | float | str:
    """Return the canonical representation of a Decimal.

    Values take the same form as the equal float, so ``Decimal("1E+20")``
    and ``1e20`` share a digest.
    """
    if value.is_nan():
        return NAN_TEXT
    if value.is_infinite():
        return POS_INF_TEXT if value > 0 else NEG_INF_TEXT
    if value == value.to_integral_value() and abs(value) < _EXACT_INT_LIMIT:
        return int(value)
    return normalize_float(float(value))


def encode_canonical(canonical: JsonValue) -> bytes:
    """Return the compact, whitespace-free encoding of a canonical form."""
    return dumps_json_sorted(canonical)


def render_canonical(canonical: JsonValue) -> str:
    """Return the pretty-printed snapshot text of a canonical form.

    Returns
    -------
    str
        Two-space indented JSON with a trailing newline.
    """
    return dumps_json_sorted(canonical, pretty=True).decode("utf-8") + "\n"


def canonicalize(
    value: object,
    exclusions: ExclusionPolicy | None = None,
    *,
    converters: ConverterMap | None = None,
) -> JsonValue:
    """Rewrite a state value into its canonical form.

    Parameters
    ----------
    value
        Scalar, sequence, mapping, set, msgspec struct, dataclass instance,
        or any value with a registered converter.
    exclusions
        Per-call exclusion policy, applied on top of type markers.
    converters
        Conversion functions keyed by type, consulted along the MRO
        before the built-in conversions.

    Returns
    -------
    JsonValue
        Canonical builtin tree.
    """
    walker = _Canonicalizer(exclusions or NO_EXCLUSIONS, converters or {})
    return walker.visit(value, ())


class _Canonicalizer:
    def __init__(self, policy: ExclusionPolicy, converters: ConverterMap) -> None:
        self._policy = policy
        self._converters = converters
        self._active: set[int] = set()

    def visit(self, value: object, path: FieldPath) -> JsonValue:
        converter = self._converter_for(type(value))
        if converter is not None:
            converted = converter(value)
            if type(converted) is type(value):
                msg = (
                    f"Converter for {type(value).__qualname__} returned the same type "
                    f"at {format_path(path)}."
                )
                raise UnsupportedValueError(msg, path=path)
            return self.visit(converted, path)
        if isinstance(value, Enum):
            return self.visit(value.value, path)
        scalar = _scalar(value)
        if scalar is not _NOT_SCALAR:
            return scalar
        return self._visit_container(value, path)

    def _visit_container(self, value: object, path: FieldPath) -> JsonValue:
        marker = id(value)
        if marker in self._active:
            msg = f"Cyclic structure detected at {format_path(path)}."
            raise CyclicStructureError(msg, path=path)
        self._active.add(marker)
        try:
            if isinstance(value, msgspec.Struct):
                return self._visit_fields(type(value), _struct_items(value), path)
            if dataclasses.is_dataclass(value) and not isinstance(value, type):
                return self._visit_fields(type(value), _dataclass_items(value), path)
            if isinstance(value, Mapping):
                return self._visit_mapping(value, path)
            if isinstance(value, Set):
                return self._visit_set(value, path)
            if isinstance(value, (list, tuple)):
                return [self.visit(item, (*path, str(index))) for index, item in enumerate(value)]
        finally:
            self._active.discard(marker)
        msg = f"Unsupported value of type {type(value).__qualname__} at {format_path(path)}."
        raise UnsupportedValueError(msg, path=path)

    def _visit_fields(
        self,
        cls: type,
        items: Iterator[tuple[str, str, object]],
        path: FieldPath,
    ) -> dict[str, JsonValue]:
        marked = marked_fields(cls)
        kept: dict[str, object] = {}
        for name, key, item in items:
            if name in marked or self._policy.excludes((*path, key)):
                continue
            kept[key] = item
        return {key: self.visit(kept[key], (*path, key)) for key in sorted(kept)}

    def _visit_mapping(self, value: Mapping[object, object], path: FieldPath) -> dict[str, JsonValue]:
        kept: dict[str, object] = {}
        seen: set[str] = set()
        for raw_key, item in value.items():
            key = _mapping_key(raw_key, path)
            if key in seen:
                msg = f"Duplicate key {key!r} after key normalization at {format_path(path)}."
                raise UnsupportedValueError(msg, path=path)
            seen.add(key)
            if self._policy.excludes((*path, key)):
                continue
            kept[key] = item
        return {key: self.visit(kept[key], (*path, key)) for key in sorted(kept)}

    def _visit_set(self, value: Set[object], path: FieldPath) -> list[JsonValue]:
        child = (*path, _SET_SEGMENT)
        items = [self.visit(item, child) for item in value]
        return sorted(items, key=encode_canonical)

    def _converter_for(self, cls: type) -> Callable[[object], object] | None:
        if not self._converters:
            return None
        for base in cls.__mro__:
            converter = self._converters.get(base)
            if converter is not None:
                return converter
        return None


_NOT_SCALAR: Final = object()


def _scalar(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, bool):
        return bool(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return normalize_float(value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, Decimal):
        return normalize_decimal(value)
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, PurePath):
        return value.as_posix()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return _NOT_SCALAR


def _mapping_key(key: object, path: FieldPath) -> str:
    if isinstance(key, Enum):
        key = key.value
    if isinstance(key, str):
        return str(key)
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (int, UUID)):
        return str(key)
    msg = f"Unsupported mapping key of type {type(key).__qualname__} at {format_path(path)}."
    raise UnsupportedValueError(msg, path=path)


def _struct_items(value: msgspec.Struct) -> Iterator[tuple[str, str, object]]:
    for info in msgspec.structs.fields(value):
        yield info.name, info.encode_name, getattr(value, info.name)


def _dataclass_items(value: object) -> Iterator[tuple[str, str, object]]:
    for item in dataclasses.fields(value):  # type: ignore[arg-type]
        yield item.name, item.name, getattr(value, item.name)


__all__ = [
    "NAN_TEXT",
    "NEG_INF_TEXT",
    "POS_INF_TEXT",
    "canonicalize",
    "encode_canonical",
    "normalize_decimal",
    "normalize_float",
    "render_canonical",
]

"""Canonical encoder tests."""

from __future__ import annotations

import dataclasses
import datetime as dt
from decimal import Decimal
from enum import IntEnum, StrEnum
from pathlib import PurePosixPath
from uuid import UUID

import msgspec
import pytest

from hashspec.canonical import (
    NAN_TEXT,
    NEG_INF_TEXT,
    POS_INF_TEXT,
    canonicalize,
    encode_canonical,
    normalize_float,
    render_canonical,
)
from hashspec.errors import CyclicStructureError, UnsupportedValueError
from hashspec.exclusions import ExclusionPolicy


class Color(StrEnum):
    RED = "red"


class Priority(IntEnum):
    HIGH = 1


class Point(msgspec.Struct):
    x: int
    y: int


class Contact(msgspec.Struct, rename="camel"):
    first_name: str


@dataclasses.dataclass
class LineItem:
    sku: str
    qty: int


class Money:
    def __init__(self, cents: int) -> None:
        self.cents = cents


def test_mapping_keys_sorted_recursively() -> None:
    """Ensure nested mappings are rebuilt in key order."""
    canonical = canonicalize({"b": 1, "a": {"d": 2, "c": 3}})
    assert isinstance(canonical, dict)
    assert list(canonical) == ["a", "b"]
    assert list(canonical["a"]) == ["c", "d"]


def test_key_order_is_code_point_order() -> None:
    """Ensure keys sort by code point, not case-folded or locale order."""
    canonical = canonicalize({"a": 1, "é": 2, "B": 3, "_": 4})
    assert isinstance(canonical, dict)
    assert list(canonical) == ["B", "_", "a", "é"]


def test_sequences_keep_order() -> None:
    """Ensure sequence order is significant."""
    assert canonicalize([3, 1, 2]) == [3, 1, 2]
    assert canonicalize((3, 1, 2)) == [3, 1, 2]


def test_sets_are_ordered_by_encoding() -> None:
    """Ensure set iteration order does not leak into the canonical form."""
    assert canonicalize({"tags": {"b", "c", "a"}}) == {"tags": ["a", "b", "c"]}
    assert canonicalize(frozenset({3, 1, 2})) == [1, 2, 3]


def test_numeric_normalization() -> None:
    """Ensure equivalent numbers share a single representation."""
    canonical = canonicalize(
        {
            "a": 100.0,
            "b": -0.0,
            "c": 100.01,
            "d": Decimal("100.00"),
            "e": Decimal("1.5"),
            "f": Decimal("1E+20"),
            "g": 1e20,
        }
    )
    assert canonical == {"a": 100, "b": 0, "c": 100.01, "d": 100, "e": 1.5, "f": 1e20, "g": 1e20}
    assert isinstance(canonical, dict)
    assert type(canonical["a"]) is int
    assert type(canonical["d"]) is int
    assert type(canonical["f"]) is float
    assert encode_canonical(canonicalize(Decimal("1E+20"))) == encode_canonical(canonicalize(1e20))
    assert canonicalize(Decimal(2**53 - 1)) == 2**53 - 1


def test_non_finite_floats_do_not_collide_with_null() -> None:
    """Ensure NaN and infinities become distinct strings."""
    assert normalize_float(float("nan")) == NAN_TEXT
    assert normalize_float(float("inf")) == POS_INF_TEXT
    assert normalize_float(float("-inf")) == NEG_INF_TEXT
    assert canonicalize(Decimal("NaN")) == NAN_TEXT
    assert encode_canonical(canonicalize(float("nan"))) != encode_canonical(canonicalize(None))


def test_booleans_are_not_numbers() -> None:
    """Ensure True and 1 encode differently."""
    assert canonicalize({"flag": True}) == {"flag": True}
    assert encode_canonical(canonicalize(True)) != encode_canonical(canonicalize(1))


def test_native_scalar_types() -> None:
    """Ensure common library types convert to stable text."""
    canonical = canonicalize(
        {
            "when": dt.datetime(2025, 1, 1, 12, 0, tzinfo=dt.UTC),
            "day": dt.date(2025, 1, 2),
            "id": UUID(int=1),
            "color": Color.RED,
            "priority": Priority.HIGH,
            "raw": b"\x01\x02",
            "path": PurePosixPath("a/b.txt"),
        }
    )
    assert canonical == {
        "color": "red",
        "day": "2025-01-02",
        "id": "00000000-0000-0000-0000-000000000001",
        "path": "a/b.txt",
        "priority": 1,
        "raw": "0102",
        "when": "2025-01-01T12:00:00+00:00",
    }


def test_structs_and_dataclasses_become_mappings() -> None:
    """Ensure structs and dataclasses are keyed by their encoded field names."""
    assert canonicalize(Point(x=1, y=2)) == {"x": 1, "y": 2}
    assert canonicalize(Contact(first_name="Ada")) == {"firstName": "Ada"}
    assert canonicalize([LineItem(sku="ABC", qty=1)]) == [{"qty": 1, "sku": "ABC"}]


def test_mapping_key_coercion() -> None:
    """Ensure scalar keys are coerced to text."""
    assert canonicalize({2: "a", False: "b", Color.RED: "c"}) == {
        "2": "a",
        "false": "b",
        "red": "c",
    }


def test_duplicate_keys_after_coercion_fail() -> None:
    """Ensure keys colliding after coercion are rejected."""
    with pytest.raises(UnsupportedValueError, match="Duplicate key"):
        canonicalize({1: "a", "1": "b"})


def test_cyclic_structures_fail_fast() -> None:
    """Ensure cycles raise instead of recursing forever."""
    node: dict[str, object] = {"name": "root"}
    node["self"] = node
    with pytest.raises(CyclicStructureError, match="self"):
        canonicalize(node)

    items: list[object] = []
    items.append(items)
    with pytest.raises(CyclicStructureError):
        canonicalize(items)


def test_shared_references_are_not_cycles() -> None:
    """Ensure the same object may appear twice in an acyclic tree."""
    shared = {"v": 1}
    assert canonicalize({"a": shared, "b": [shared, shared]}) == {
        "a": {"v": 1},
        "b": [{"v": 1}, {"v": 1}],
    }


def test_unsupported_values_name_their_path() -> None:
    """Ensure unsupported values fail with the offending path."""
    with pytest.raises(UnsupportedValueError, match=r"order\.items\.1"):
        canonicalize({"order": {"items": [1, object()]}})


def test_converters_extend_supported_types() -> None:
    """Ensure registered converters are applied and their output canonicalized."""
    canonical = canonicalize(
        {"total": Money(1050)},
        converters={Money: lambda value: {"currency": "USD", "cents": value.cents}},
    )
    assert canonical == {"total": {"cents": 1050, "currency": "USD"}}


def test_converter_returning_same_type_fails() -> None:
    """Ensure a converter cannot loop on its own type."""
    with pytest.raises(UnsupportedValueError, match="same type"):
        canonicalize(Money(1), converters={Money: lambda value: value})


def test_exclusion_policy_drops_fields_everywhere() -> None:
    """Ensure excluded keys vanish at every depth."""
    canonical = canonicalize(
        {"a": 1, "token": "x", "nested": {"token": "y", "b": 2}},
        ExclusionPolicy.of(names=["token"]),
    )
    assert canonical == {"a": 1, "nested": {"b": 2}}


def test_encode_canonical_is_compact() -> None:
    """Ensure the hashed encoding carries no whitespace."""
    assert encode_canonical(canonicalize({"b": 1, "a": "x y"})) == b'{"a":"x y","b":1}'


def test_render_canonical_is_indented_json() -> None:
    """Ensure snapshot text is pretty JSON that decodes back to the canonical form."""
    canonical = canonicalize({"b": 1, "a": [1, 2]})
    text = render_canonical(canonical)
    lines = text.splitlines()
    assert text.endswith("\n")
    assert lines[0] == "{"
    assert lines[1].startswith('  "a"')
    assert msgspec.json.decode(text) == canonical

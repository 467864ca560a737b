"""Fingerprint generator tests."""

from __future__ import annotations

import dataclasses
import datetime as dt
import hashlib
from typing import Annotated

import msgspec

from hashspec.exclusions import IGNORED_META, HashIgnore, ignored_field
from hashspec.fingerprint import fingerprint, fingerprint_value, is_fingerprint, take_snapshot


class UserSessionRecord(msgspec.Struct):
    username: str
    session_id: Annotated[str, HashIgnore]
    login_time: Annotated[dt.datetime, IGNORED_META]


class PlainSessionRecord(msgspec.Struct):
    username: str
    session_id: str
    login_time: dt.datetime


@dataclasses.dataclass
class DataclassSession:
    username: str
    session_id: str = ignored_field(default="")


_EARLY = dt.datetime(2025, 1, 1, 9, 0, tzinfo=dt.UTC)
_LATE = dt.datetime(2025, 6, 1, 17, 30, tzinfo=dt.UTC)


def _product(price: float) -> dict[str, object]:
    return {
        "Name": "Product A",
        "Price": price,
        "InStock": True,
        "Tags": ["sale", "new"],
        "Dimensions": {"Width": 10, "Height": 20},
    }


def test_insertion_order_does_not_change_digest() -> None:
    """Ensure mappings built in different orders hash identically."""
    first = {"Name": "Product A", "Price": 100.00, "InStock": True}
    second = {"InStock": True, "Price": 100.00, "Name": "Product A"}
    assert fingerprint_value(first) == fingerprint_value(second)


def test_independent_constructions_match() -> None:
    """Ensure two separately built equal values share a digest."""
    assert fingerprint_value(_product(100.0)) == fingerprint_value(_product(100.0))


def test_small_value_change_changes_digest() -> None:
    """Ensure a one-cent price change is detected."""
    assert fingerprint_value(_product(100.00)) != fingerprint_value(_product(100.01))


def test_sequence_order_changes_digest() -> None:
    """Ensure reordering a list is a semantic change."""
    assert fingerprint_value({"items": [1, 2]}) != fingerprint_value({"items": [2, 1]})


def test_digest_is_lowercase_hex() -> None:
    """Ensure digests are 64 lowercase hex characters."""
    digest = fingerprint_value(_product(100.0))
    assert len(digest) == 64
    assert set(digest) <= set("0123456789abcdef")
    assert is_fingerprint(digest)
    assert not is_fingerprint(digest.upper())
    assert not is_fingerprint(digest[:-1])


def test_digest_hashes_compact_encoding() -> None:
    """Ensure the digest is SHA-256 over the compact sorted JSON."""
    expected = hashlib.sha256(b'{"a":1,"b":[true,null]}').hexdigest()
    assert fingerprint({"a": 1, "b": [True, None]}) == expected
    assert fingerprint_value({"b": [True, None], "a": 1.0}) == expected


def test_marked_fields_are_ignored() -> None:
    """Ensure volatile marked fields do not affect the digest."""
    first = UserSessionRecord(username="ada", session_id="s-1", login_time=_EARLY)
    second = UserSessionRecord(username="ada", session_id="s-2", login_time=_LATE)
    assert fingerprint_value(first) == fingerprint_value(second)
    assert fingerprint_value(first) != fingerprint_value(
        UserSessionRecord(username="bob", session_id="s-1", login_time=_EARLY)
    )


def test_unmarked_fields_are_hashed() -> None:
    """Ensure the same fields without markers do change the digest."""
    first = PlainSessionRecord(username="ada", session_id="s-1", login_time=_EARLY)
    second = PlainSessionRecord(username="ada", session_id="s-2", login_time=_LATE)
    assert fingerprint_value(first) != fingerprint_value(second)


def test_markers_apply_inside_collections() -> None:
    """Ensure markers follow the type at any depth."""
    first = {"sessions": [UserSessionRecord(username="ada", session_id="a", login_time=_EARLY)]}
    second = {"sessions": [UserSessionRecord(username="ada", session_id="b", login_time=_LATE)]}
    assert fingerprint_value(first) == fingerprint_value(second)


def test_dataclass_field_marker() -> None:
    """Ensure ``ignored_field`` drops the field from dataclass snapshots."""
    snapshot = take_snapshot(DataclassSession(username="ada", session_id="xyz"))
    assert snapshot.canonical == {"username": "ada"}
    assert "session_id" not in snapshot.text


def test_snapshot_fields_agree() -> None:
    """Ensure snapshot digest and text derive from one canonical form."""
    snapshot = take_snapshot(UserSessionRecord(username="ada", session_id="s", login_time=_EARLY))
    assert snapshot.canonical == {"username": "ada"}
    assert snapshot.digest == fingerprint(snapshot.canonical)
    assert msgspec.json.decode(snapshot.text) == snapshot.canonical

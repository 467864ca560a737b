"""Shared fixtures for hashspec tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hashspec.config import ENV_ARTIFACTS_DIR, ENV_SPEC_DIR, ENV_UPDATE
from hashspec.exclusions import clear_registered_exclusions
from hashspec.store import BaselineStore
from hashspec.verify import Verifier

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolate_hashspec_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment settings out of the tests."""
    for name in (ENV_UPDATE, ENV_SPEC_DIR, ENV_ARTIFACTS_DIR, "HASHSPEC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_exclusion_registry() -> Iterator[None]:
    """Drop registry entries added by a test."""
    yield
    clear_registered_exclusions()


@pytest.fixture
def store(tmp_path: Path) -> BaselineStore:
    """Return a store rooted in the test's temporary directory.

    Returns
    -------
    BaselineStore
        Store writing to ``tmp_path/Specs`` and ``tmp_path/Artifacts``.
    """
    return BaselineStore(tmp_path / "Specs", tmp_path / "Artifacts")


@pytest.fixture
def verifier(store: BaselineStore) -> Verifier:
    """Return a compare-or-create verifier over ``store``.

    Returns
    -------
    Verifier
        Verifier with update mode off.
    """
    return Verifier(store)

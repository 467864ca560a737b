"""Shared help-panel groups for the hashspec CLI."""

from __future__ import annotations

from cyclopts import Group

session_group = Group(
    "Session",
    help="Logging and session options.",
    sort_key=0,
)

storage_group = Group(
    "Storage",
    help="Baseline and artifact locations.",
    sort_key=1,
)

exclusion_group = Group(
    "Exclusions",
    help="Fields left out of the fingerprint and snapshot.",
    sort_key=2,
)

__all__ = ["exclusion_group", "session_group", "storage_group"]

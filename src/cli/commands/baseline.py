"""Baseline commands: verify, fingerprint, show and list."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import msgspec
from cyclopts import Parameter
from rich.console import Console

from cli.exit_codes import ExitCode
from cli.groups import exclusion_group, storage_group
from hashspec.config import HashSpecConfig
from hashspec.exclusions import ExclusionPolicy
from hashspec.fingerprint import take_snapshot
from hashspec.store import BaselineStore
from hashspec.verify import Verifier, VerifyStatus
from utils.file_io import read_json

_LOGGER = logging.getLogger(__name__)

SpecDirOption = Annotated[
    Path | None,
    Parameter(
        name="--spec-dir",
        help="Baseline directory (default: ./Specs or HASHSPEC_SPEC_DIR).",
        group=storage_group,
    ),
]
ArtifactsDirOption = Annotated[
    Path | None,
    Parameter(
        name="--artifacts-dir",
        help="Mismatch artifact directory (default: ./Artifacts or HASHSPEC_ARTIFACTS_DIR).",
        group=storage_group,
    ),
]
IgnoreOption = Annotated[
    list[str] | None,
    Parameter(
        name="--ignore",
        help="Field name excluded at any depth. Repeatable.",
        group=exclusion_group,
    ),
]
IgnorePathOption = Annotated[
    list[str] | None,
    Parameter(
        name="--ignore-path",
        help="Dotted field path excluded exactly; '*' matches one segment. Repeatable.",
        group=exclusion_group,
    ),
]


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True)


def _policy(ignore: list[str] | None, ignore_path: list[str] | None) -> ExclusionPolicy:
    return ExclusionPolicy.of(names=ignore or (), paths=ignore_path or ())


def _config(
    spec_dir: Path | None,
    artifacts_dir: Path | None = None,
    update: bool | None = None,
) -> HashSpecConfig:
    config = HashSpecConfig.from_env()
    changes: dict[str, object] = {}
    if spec_dir is not None:
        changes["spec_dir"] = spec_dir
    if artifacts_dir is not None:
        changes["artifacts_dir"] = artifacts_dir
    if update is not None:
        changes["update"] = update
    return msgspec.structs.replace(config, **changes) if changes else config


def verify_command(
    name: Annotated[str, Parameter(help="Spec name; used as the baseline file stem.")],
    path: Annotated[Path, Parameter(help="JSON document holding the current state.")],
    /,
    *,
    update: Annotated[
        bool | None,
        Parameter(
            name="--update",
            negative="",
            help="Overwrite the baseline with the current state (default: HASHSPEC_UPDATE).",
        ),
    ] = None,
    spec_dir: SpecDirOption = None,
    artifacts_dir: ArtifactsDirOption = None,
    ignore: IgnoreOption = None,
    ignore_path: IgnorePathOption = None,
) -> int:
    """Verify a JSON document against its baseline.

    Returns
    -------
    int
        0 for pass/created/updated, 1 for a mismatch.
    """
    config = _config(spec_dir, artifacts_dir, update)
    verifier = Verifier.from_config(config, exclusions=_policy(ignore, ignore_path))
    result = verifier.verify(name, read_json(path))
    console = _console()
    console.print(result.report())
    if result.status is VerifyStatus.FAIL:
        console.print(f"Actual snapshot written to {result.artifact_path}", markup=False)
        return ExitCode.MISMATCH
    return ExitCode.SUCCESS


def fingerprint_command(
    path: Annotated[Path, Parameter(help="JSON document to fingerprint.")],
    /,
    *,
    snapshot: Annotated[
        bool,
        Parameter(name="--snapshot", negative="", help="Also print the canonical snapshot."),
    ] = False,
    ignore: IgnoreOption = None,
    ignore_path: IgnorePathOption = None,
) -> int:
    """Print the fingerprint of a JSON document.

    Returns
    -------
    int
        Exit status code.
    """
    current = take_snapshot(read_json(path), _policy(ignore, ignore_path))
    sys.stdout.write(current.digest + "\n")
    if snapshot:
        sys.stdout.write(current.text)
    return ExitCode.SUCCESS


def show_command(
    name: Annotated[str, Parameter(help="Spec name.")],
    /,
    *,
    spec_dir: SpecDirOption = None,
) -> int:
    """Print a stored baseline's digest and snapshot.

    Returns
    -------
    int
        Exit status code.
    """
    config = _config(spec_dir)
    spec = BaselineStore.from_config(config).load(name)
    if spec is None:
        _LOGGER.error("No baseline stored for %s in %s", name, config.spec_dir)
        return ExitCode.STORAGE_ERROR
    sys.stdout.write(spec.digest + "\n")
    if spec.text is not None:
        sys.stdout.write(spec.text)
    return ExitCode.SUCCESS


def list_command(*, spec_dir: SpecDirOption = None) -> int:
    """List stored baseline names.

    Returns
    -------
    int
        Exit status code.
    """
    for name in BaselineStore.from_config(_config(spec_dir)).names():
        sys.stdout.write(name + "\n")
    return ExitCode.SUCCESS


__all__ = ["fingerprint_command", "list_command", "show_command", "verify_command"]

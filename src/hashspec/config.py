"""Configuration for baseline locations and update mode."""

from __future__ import annotations

from pathlib import Path
from typing import Final

import msgspec

from core_types import PathLike
from serde_msgspec import StructBaseStrict
from utils.env_utils import env_bool, env_text

ENV_UPDATE: Final = "HASHSPEC_UPDATE"
ENV_SPEC_DIR: Final = "HASHSPEC_SPEC_DIR"
ENV_ARTIFACTS_DIR: Final = "HASHSPEC_ARTIFACTS_DIR"

DEFAULT_SPEC_DIRNAME: Final = "Specs"
DEFAULT_ARTIFACTS_DIRNAME: Final = "Artifacts"


class HashSpecConfig(StructBaseStrict, frozen=True):
    """Resolved locations and update mode for one verifier.

    ``update`` forces every verification to overwrite its baseline.
    """

    spec_dir: Path
    artifacts_dir: Path
    update: bool = False

    @classmethod
    def from_base_dir(cls, base_dir: PathLike, *, update: bool = False) -> HashSpecConfig:
        """Return the default layout under a base directory.

        Returns
        -------
        HashSpecConfig
            ``<base_dir>/Specs`` and ``<base_dir>/Artifacts``.
        """
        base = Path(base_dir)
        return cls(
            spec_dir=base / DEFAULT_SPEC_DIRNAME,
            artifacts_dir=base / DEFAULT_ARTIFACTS_DIRNAME,
            update=update,
        )

    @classmethod
    def from_env(
        cls,
        base_dir: PathLike | None = None,
        *,
        spec_dir: PathLike = DEFAULT_SPEC_DIRNAME,
        artifacts_dir: PathLike = DEFAULT_ARTIFACTS_DIRNAME,
    ) -> HashSpecConfig:
        """Resolve configuration from the environment.

        Parameters
        ----------
        base_dir
            Directory relative locations resolve against; defaults to the
            current working directory.
        spec_dir
            Baseline directory used when ``HASHSPEC_SPEC_DIR`` is unset.
        artifacts_dir
            Artifact directory used when ``HASHSPEC_ARTIFACTS_DIR`` is unset.

        Returns
        -------
        HashSpecConfig
            Resolved configuration.
        """
        base = Path.cwd() if base_dir is None else Path(base_dir)
        return cls(
            spec_dir=base / env_text(ENV_SPEC_DIR, default=str(spec_dir)),
            artifacts_dir=base / env_text(ENV_ARTIFACTS_DIR, default=str(artifacts_dir)),
            update=env_bool(ENV_UPDATE, default=False, on_invalid="false", log_invalid=True),
        )

    def with_update(self, update: bool) -> HashSpecConfig:
        """Return a copy with the given update mode."""
        return msgspec.structs.replace(self, update=update)


__all__ = [
    "DEFAULT_ARTIFACTS_DIRNAME",
    "DEFAULT_SPEC_DIRNAME",
    "ENV_ARTIFACTS_DIR",
    "ENV_SPEC_DIR",
    "ENV_UPDATE",
    "HashSpecConfig",
]

"""Pytest integration for baseline verification.

Enable with ``-p hashspec.pytest_plugin`` (or ``pytest_plugins`` in the
root conftest). Provides the ``hashspec`` fixture, the
``--hashspec-update`` option and the ``hashspec_spec_dir`` /
``hashspec_artifacts_dir`` ini options.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

import pytest

from hashspec.config import DEFAULT_ARTIFACTS_DIRNAME, DEFAULT_SPEC_DIRNAME, HashSpecConfig
from hashspec.verify import Verifier, VerifyResult

if TYPE_CHECKING:
    from hashspec.exclusions import ExclusionPolicy

_UNSAFE_NAME_RE: Final = re.compile(r"[^A-Za-z0-9_.\-\[\]]+")


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register hashspec options."""
    group = parser.getgroup("hashspec")
    group.addoption(
        "--hashspec-update",
        action="store_true",
        default=False,
        help="Overwrite hashspec baselines with the current values.",
    )
    parser.addini(
        "hashspec_spec_dir",
        help="Baseline directory, relative to the rootdir.",
        default=DEFAULT_SPEC_DIRNAME,
    )
    parser.addini(
        "hashspec_artifacts_dir",
        help="Mismatch artifact directory, relative to the rootdir.",
        default=DEFAULT_ARTIFACTS_DIRNAME,
    )


def spec_name_for(node: pytest.Item) -> str:
    """Return the default spec name for a test item.

    Returns
    -------
    str
        ``<module stem>.<test name>`` with unsafe characters replaced.
    """
    stem = node.path.stem if node.path is not None else "tests"
    return _UNSAFE_NAME_RE.sub("_", f"{stem}.{node.name}")


class SpecAsserter:
    """Callable bound to one test; verifies values and fails the test on mismatch."""

    def __init__(self, verifier: Verifier, default_name: str) -> None:
        self.verifier = verifier
        self.default_name = default_name

    def __call__(
        self,
        value: object,
        *,
        name: str | None = None,
        exclusions: ExclusionPolicy | None = None,
    ) -> VerifyResult:
        """Verify ``value`` and raise ``SpecMismatchError`` on mismatch."""
        return self.verifier.check(name or self.default_name, value, exclusions=exclusions)

    def verify(
        self,
        value: object,
        *,
        name: str | None = None,
        exclusions: ExclusionPolicy | None = None,
    ) -> VerifyResult:
        """Verify ``value`` and return the result without raising."""
        return self.verifier.verify(name or self.default_name, value, exclusions=exclusions)


@pytest.fixture(scope="session")
def hashspec_config(pytestconfig: pytest.Config) -> HashSpecConfig:
    """Return the session configuration.

    Returns
    -------
    HashSpecConfig
        Environment configuration resolved against the rootdir, with update
        mode forced on by ``--hashspec-update``.
    """
    config = HashSpecConfig.from_env(
        pytestconfig.rootpath,
        spec_dir=str(pytestconfig.getini("hashspec_spec_dir")),
        artifacts_dir=str(pytestconfig.getini("hashspec_artifacts_dir")),
    )
    if pytestconfig.getoption("--hashspec-update"):
        return config.with_update(True)
    return config


@pytest.fixture
def hashspec(request: pytest.FixtureRequest, hashspec_config: HashSpecConfig) -> SpecAsserter:
    """Return a verifier bound to the requesting test's name.

    Returns
    -------
    SpecAsserter
        Callable verifying values against ``<module>.<test>`` baselines.
    """
    return SpecAsserter(Verifier.from_config(hashspec_config), spec_name_for(request.node))


__all__ = ["SpecAsserter", "hashspec", "hashspec_config", "spec_name_for"]

"""Field exclusion markers, registry and per-call exclusion policies.

Three ways to keep a field out of a fingerprint:

- mark it on its type definition (``Annotated[str, HashIgnore]``,
  ``msgspec.Meta(extra={"hashspec": "ignore"})`` or a dataclass field with
  ``metadata={"hashspec": "ignore"}``);
- register it for a type you cannot annotate with ``register_exclusions``;
- pass an ``ExclusionPolicy`` naming keys, dotted paths or a predicate.

Markers follow the type wherever it appears in the tree. Policies are
matched against the path of each mapping entry.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import sys
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import cache
from typing import Annotated, Final, get_args, get_origin

import msgspec

from core_types import FieldPath
from hashspec.errors import ConfigurationError

_LOGGER = logging.getLogger(__name__)

MARKER_KEY: Final = "hashspec"
MARKER_IGNORE: Final = "ignore"
WILDCARD: Final = "*"

type ExclusionPredicate = Callable[[FieldPath], bool]


class HashIgnore:
    """Annotation marker excluding a field from fingerprints and snapshots.

    Use the class itself or an instance inside ``typing.Annotated``::

        session_id: Annotated[str, HashIgnore]
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "HashIgnore"


IGNORED_META: Final = msgspec.Meta(extra={MARKER_KEY: MARKER_IGNORE})


def ignored_field(**kwargs: typing.Any) -> typing.Any:
    """Return a dataclass ``field`` carrying the exclusion marker."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[MARKER_KEY] = MARKER_IGNORE
    return dataclasses.field(metadata=metadata, **kwargs)


_REGISTRY: dict[type, frozenset[str]] = {}


def register_exclusions(cls: type, *names: str) -> None:
    """Register excluded field names for a type.

    Parameters
    ----------
    cls
        Type whose instances should drop the fields.
    *names
        Attribute names to exclude.

    Raises
    ------
    ConfigurationError
        Raised when no names are given or a name is empty.
    """
    if not names or any(not name for name in names):
        msg = f"register_exclusions({cls.__name__}) requires non-empty field names."
        raise ConfigurationError(msg)
    _REGISTRY[cls] = _REGISTRY.get(cls, frozenset()) | frozenset(names)
    marked_fields.cache_clear()


def clear_registered_exclusions() -> None:
    """Drop every registered exclusion."""
    _REGISTRY.clear()
    marked_fields.cache_clear()


def _is_marker(item: object) -> bool:
    if item is HashIgnore or isinstance(item, HashIgnore):
        return True
    if isinstance(item, msgspec.Meta):
        return (item.extra or {}).get(MARKER_KEY) == MARKER_IGNORE
    return False


def _annotation_marked(annotation: object) -> bool:
    if get_origin(annotation) is not Annotated:
        return False
    return any(_is_marker(item) for item in get_args(annotation)[1:])


def _annotated_fields(cls: type) -> frozenset[str]:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        _LOGGER.debug("Resolving %s annotations field by field: %s", cls.__qualname__, exc)
        return _per_field_marked(cls)
    return frozenset(name for name, hint in hints.items() if _annotation_marked(hint))


def _per_field_marked(cls: type) -> frozenset[str]:
    marked: set[str] = set()
    for base in reversed(cls.__mro__):
        module = sys.modules.get(base.__module__)
        namespace = {**(vars(module) if module is not None else {}), **vars(base)}
        for name, annotation in inspect.get_annotations(base).items():
            if _annotation_marked(_resolve_field_annotation(cls, name, annotation, namespace)):
                marked.add(name)
            else:
                marked.discard(name)
    return frozenset(marked)


def _resolve_field_annotation(
    cls: type,
    name: str,
    annotation: object,
    namespace: dict[str, object],
) -> object:
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, namespace)
    except (NameError, AttributeError, SyntaxError, TypeError) as exc:
        # Without Annotated the field cannot carry a marker.
        if "Annotated" not in annotation:
            return None
        msg = (
            f"Cannot resolve annotation {annotation!r} of {cls.__qualname__}.{name}: {exc}. "
            "Define the referenced types at module level or use register_exclusions."
        )
        raise ConfigurationError(msg) from exc


def _dataclass_fields(cls: type) -> frozenset[str]:
    if not dataclasses.is_dataclass(cls):
        return frozenset()
    return frozenset(
        item.name
        for item in dataclasses.fields(cls)
        if item.metadata.get(MARKER_KEY) == MARKER_IGNORE
    )


@cache
def marked_fields(cls: type) -> frozenset[str]:
    """Return attribute names excluded for a type.

    Combines annotation markers, dataclass field metadata and registry
    entries for the type and its bases.

    Returns
    -------
    frozenset[str]
        Excluded attribute names.
    """
    registered = frozenset().union(*(_REGISTRY.get(base, frozenset()) for base in cls.__mro__))
    return registered | _annotated_fields(cls) | _dataclass_fields(cls)


def parse_field_path(path: str | Iterable[str]) -> FieldPath:
    """Parse a dotted field path into segments.

    Parameters
    ----------
    path
        Dotted path such as ``"items.*.sku"`` or an iterable of segments.

    Returns
    -------
    FieldPath
        Path segments.

    Raises
    ------
    ConfigurationError
        Raised when the path is empty or has empty segments.
    """
    segments = tuple(path.split(".")) if isinstance(path, str) else tuple(path)
    if not segments or any(not segment for segment in segments):
        msg = f"Invalid exclusion path: {path!r}."
        raise ConfigurationError(msg)
    return segments


def path_matches(pattern: FieldPath, path: FieldPath) -> bool:
    """Return True when ``path`` matches ``pattern`` segment by segment."""
    if len(pattern) != len(path):
        return False
    return all(want in {WILDCARD, got} for want, got in zip(pattern, path, strict=True))


@dataclass(frozen=True)
class ExclusionPolicy:
    """Per-call exclusion rules applied on top of type markers.

    Parameters
    ----------
    names
        Keys excluded at any depth.
    paths
        Field paths excluded exactly; ``*`` matches one segment.
    predicate
        Optional rule receiving the full path of each entry.
    """

    names: frozenset[str] = frozenset()
    paths: tuple[FieldPath, ...] = ()
    predicate: ExclusionPredicate | None = field(default=None, compare=False)

    @classmethod
    def of(
        cls,
        *,
        names: Iterable[str] = (),
        paths: Iterable[str | Iterable[str]] = (),
        predicate: ExclusionPredicate | None = None,
    ) -> ExclusionPolicy:
        """Build a policy from names, dotted paths and a predicate.

        Returns
        -------
        ExclusionPolicy
            Policy instance.
        """
        return cls(
            names=frozenset(names),
            paths=tuple(parse_field_path(path) for path in paths),
            predicate=predicate,
        )

    @property
    def is_empty(self) -> bool:
        """Return True when the policy excludes nothing."""
        return not self.names and not self.paths and self.predicate is None

    def ignore(self, *names: str) -> ExclusionPolicy:
        """Return a copy that also excludes the given keys."""
        return dataclasses.replace(self, names=self.names | frozenset(names))

    def ignore_path(self, *paths: str | Iterable[str]) -> ExclusionPolicy:
        """Return a copy that also excludes the given paths."""
        parsed = tuple(parse_field_path(path) for path in paths)
        return dataclasses.replace(self, paths=self.paths + parsed)

    def merge(self, other: ExclusionPolicy | None) -> ExclusionPolicy:
        """Return the union of two policies."""
        if other is None or other.is_empty:
            return self
        if self.is_empty:
            return other
        return ExclusionPolicy(
            names=self.names | other.names,
            paths=self.paths + tuple(path for path in other.paths if path not in self.paths),
            predicate=_either(self.predicate, other.predicate),
        )

    def excludes(self, path: FieldPath) -> bool:
        """Return True when the entry at ``path`` is excluded.

        Parameters
        ----------
        path
            Full path of the entry, its own key last.

        Returns
        -------
        bool
            Whether the entry is dropped.
        """
        if not path:
            return False
        if path[-1] in self.names:
            return True
        if any(path_matches(pattern, path) for pattern in self.paths):
            return True
        return self.predicate is not None and bool(self.predicate(path))


def _either(
    first: ExclusionPredicate | None,
    second: ExclusionPredicate | None,
) -> ExclusionPredicate | None:
    if first is None:
        return second
    if second is None:
        return first

    def _combined(path: FieldPath) -> bool:
        return bool(first(path)) or bool(second(path))

    return _combined


NO_EXCLUSIONS: Final = ExclusionPolicy()


__all__ = [
    "IGNORED_META",
    "NO_EXCLUSIONS",
    "ExclusionPolicy",
    "ExclusionPredicate",
    "HashIgnore",
    "clear_registered_exclusions",
    "ignored_field",
    "marked_fields",
    "parse_field_path",
    "path_matches",
    "register_exclusions",
]

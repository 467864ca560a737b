"""Semantic UI state capture against a document adapter.

The capture functions turn locators into plain state values that the
verifier can fingerprint. They work against the ``DocumentLike`` and
``ElementLike`` protocols, whose element surface follows the WebDriver
element API (``tag_name``, ``text``, ``get_attribute`` ...), so a thin
adapter over any browser driver or a test fake can be passed in.

Absent elements are not errors: they are captured as sentinel strings, so
an element disappearing changes the fingerprint.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Final, Protocol

_LOGGER = logging.getLogger(__name__)

TIMEOUT_SENTINEL: Final = "[TIMEOUT/NOT FOUND]"
NOT_FOUND_SENTINEL: Final = "[NOT FOUND]"

DEFAULT_TIMEOUT_S: Final = 5.0
DEFAULT_INTERVAL_S: Final = 0.1

IDENTITY_ATTRIBUTES: Final = ("placeholder", "data-testid", "aria-label", "type", "title")
INPUT_TAGS: Final = frozenset({"input", "select", "textarea"})
TOGGLE_INPUT_TYPES: Final = frozenset({"checkbox", "radio"})


class ElementLike(Protocol):
    """Element surface used for semantic extraction."""

    @property
    def tag_name(self) -> str: ...

    @property
    def text(self) -> str: ...

    @property
    def location(self) -> Mapping[str, int]: ...

    @property
    def size(self) -> Mapping[str, int]: ...

    def get_attribute(self, name: str) -> str | None: ...

    def is_displayed(self) -> bool: ...

    def is_enabled(self) -> bool: ...

    def is_selected(self) -> bool: ...

    def query_all(self, selector: str) -> Sequence[ElementLike]: ...


class DocumentLike(Protocol):
    """Document surface used to resolve locators.

    ``query`` returns None or raises ``LookupError`` when nothing matches.
    """

    def query(self, selector: str) -> ElementLike | None: ...

    def query_all(self, selector: str) -> Sequence[ElementLike]: ...


def poll_until[T](
    resolver: Callable[[], T | None],
    *,
    timeout: float = DEFAULT_TIMEOUT_S,
    interval: float = DEFAULT_INTERVAL_S,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    ignored: tuple[type[BaseException], ...] = (LookupError,),
) -> T | None:
    """Call ``resolver`` until it returns a value or the timeout elapses.

    Parameters
    ----------
    resolver
        Zero-argument callable; None or an ``ignored`` exception means
        "not yet".
    timeout
        Total wait in seconds. The resolver is always called at least once.
    interval
        Pause between attempts in seconds.
    clock
        Monotonic time source.
    sleep
        Sleep function.
    ignored
        Exception types treated as "not yet".

    Returns
    -------
    T | None
        First non-None result, or None on timeout.
    """
    deadline = clock() + timeout
    while True:
        try:
            result = resolver()
        except ignored:
            result = None
        if result is not None:
            return result
        remaining = deadline - clock()
        if remaining <= 0:
            return None
        sleep(min(interval, remaining))


def element_metadata(element: ElementLike) -> dict[str, str]:
    """Return the non-empty identity attributes of an element."""
    metadata: dict[str, str] = {}
    for attribute in IDENTITY_ATTRIBUTES:
        value = element.get_attribute(attribute)
        if value:
            metadata[attribute] = value
    return metadata


def extract_semantic_value(element: ElementLike) -> dict[str, object]:
    """Return the semantic state of one element.

    Buttons, checkboxes and radios yield text and interaction state; other
    form fields yield their value; everything else yields text plus layout,
    so moves and resizes are detected.

    Returns
    -------
    dict[str, object]
        Semantic value for the element.
    """
    tag = element.tag_name.lower()
    metadata = element_metadata(element)
    input_type = metadata.get("type", "").lower()
    if tag == "button" or (tag == "input" and input_type in TOGGLE_INPUT_TYPES):
        return {
            "text": element.text.strip(),
            "enabled": element.is_enabled(),
            "selected": element.is_selected(),
            "metadata": metadata,
        }
    if tag in INPUT_TAGS:
        return {
            "value": element.get_attribute("value") or "",
            "displayed": element.is_displayed(),
            "metadata": metadata,
        }
    location = element.location
    size = element.size
    return {
        "text": element.text.strip(),
        "location": {"x": int(location["x"]), "y": int(location["y"])},
        "size": {"width": int(size["width"]), "height": int(size["height"])},
        "metadata": metadata,
    }


def _resolver(document: DocumentLike, selector: str) -> Callable[[], ElementLike | None]:
    def _resolve() -> ElementLike | None:
        return document.query(selector)

    return _resolve


def capture_state(
    document: DocumentLike,
    locators: Mapping[str, str],
    *,
    timeout: float = DEFAULT_TIMEOUT_S,
    interval: float = DEFAULT_INTERVAL_S,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, object]:
    """Capture the semantic state of named locators.

    Parameters
    ----------
    document
        Document adapter.
    locators
        Logical field name to CSS-like selector.
    timeout
        Per-locator wait in seconds.
    interval
        Poll interval in seconds.
    clock
        Monotonic time source.
    sleep
        Sleep function.

    Returns
    -------
    dict[str, object]
        Field name to semantic value, or ``TIMEOUT_SENTINEL`` for locators
        that never resolved.
    """
    state: dict[str, object] = {}
    for name, selector in locators.items():
        element = poll_until(
            _resolver(document, selector),
            timeout=timeout,
            interval=interval,
            clock=clock,
            sleep=sleep,
        )
        if element is None:
            _LOGGER.debug("Locator %r for %s not found within %.1fs", selector, name, timeout)
            state[name] = TIMEOUT_SENTINEL
            continue
        state[name] = extract_semantic_value(element)
    return state


def capture_collection(
    document: DocumentLike,
    container_selector: str,
    item_selector: str,
    *,
    timeout: float = DEFAULT_TIMEOUT_S,
    interval: float = DEFAULT_INTERVAL_S,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> list[dict[str, object]] | str:
    """Capture repeating items inside a container, in document order.

    Returns
    -------
    list[dict[str, object]] | str
        One semantic value per item, or ``NOT_FOUND_SENTINEL`` when the
        container never resolved.
    """
    container = poll_until(
        _resolver(document, container_selector),
        timeout=timeout,
        interval=interval,
        clock=clock,
        sleep=sleep,
    )
    if container is None:
        _LOGGER.debug("Container %r not found within %.1fs", container_selector, timeout)
        return NOT_FOUND_SENTINEL
    return [extract_semantic_value(item) for item in container.query_all(item_selector)]


__all__ = [
    "DEFAULT_INTERVAL_S",
    "DEFAULT_TIMEOUT_S",
    "IDENTITY_ATTRIBUTES",
    "NOT_FOUND_SENTINEL",
    "TIMEOUT_SENTINEL",
    "DocumentLike",
    "ElementLike",
    "capture_collection",
    "capture_state",
    "element_metadata",
    "extract_semantic_value",
    "poll_until",
]

"""Positional line diff between expected and actual snapshot text.

Lines are compared index by index after trimming surrounding whitespace.
There is no alignment step: an inserted line shows up as drift on every
following index.
"""

from __future__ import annotations

import re
from typing import Final, Literal

from rich.text import Text

from serde_msgspec import StructBaseStrict

REMOVED: Final = "-"
ADDED: Final = "+"
REMOVED_STYLE: Final = "red"
ADDED_STYLE: Final = "green"
SEPARATOR: Final = "-" * 50

_LINE_BREAK_RE: Final = re.compile(r"\r\n|\r|\n")


class DiffEntry(StructBaseStrict, frozen=True):
    """One differing line index; a missing side is ``None``."""

    index: int
    expected: str | None = None
    actual: str | None = None


class DiffLine(StructBaseStrict, frozen=True):
    """One annotated output line."""

    index: int
    marker: Literal["-", "+"]
    text: str

    def render(self) -> str:
        return f"{self.marker} {self.text}"


class DiffReport(StructBaseStrict, frozen=True):
    """Structured result of a positional diff."""

    entries: tuple[DiffEntry, ...] = ()
    expected_line_count: int = 0
    actual_line_count: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.entries)

    def lines(self) -> tuple[DiffLine, ...]:
        """Return removed/added lines in index order.

        A marker is omitted when its side of the entry is empty.

        Returns
        -------
        tuple[DiffLine, ...]
            Annotated lines.
        """
        lines: list[DiffLine] = []
        for entry in self.entries:
            if entry.expected:
                lines.append(DiffLine(index=entry.index, marker=REMOVED, text=entry.expected))
            if entry.actual:
                lines.append(DiffLine(index=entry.index, marker=ADDED, text=entry.actual))
        return tuple(lines)

    def to_text(self) -> str:
        """Return the diff as plain text."""
        return "\n".join(line.render() for line in self.lines())

    def to_rich(self) -> Text:
        """Return the diff with red removals and green additions."""
        text = Text()
        for line in self.lines():
            style = REMOVED_STYLE if line.marker == REMOVED else ADDED_STYLE
            text.append(line.render() + "\n", style=style)
        return text

    def to_payload(self) -> list[dict[str, object]]:
        """Return entries as plain mappings for test reports."""
        return [
            {"index": entry.index, "expected": entry.expected, "actual": entry.actual}
            for entry in self.entries
        ]


def _split_lines(text: str) -> list[str]:
    # Other Unicode line separators may appear raw inside JSON strings.
    lines = _LINE_BREAK_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def render_diff(expected_text: str, actual_text: str) -> DiffReport:
    """Compare two snapshot texts line by line.

    Parameters
    ----------
    expected_text
        Stored baseline text.
    actual_text
        Text of the current value.

    Returns
    -------
    DiffReport
        Differing indices up to the longer of the two texts.
    """
    expected_lines = _split_lines(expected_text)
    actual_lines = _split_lines(actual_text)
    entries: list[DiffEntry] = []
    for index in range(max(len(expected_lines), len(actual_lines))):
        expected = expected_lines[index].strip() if index < len(expected_lines) else None
        actual = actual_lines[index].strip() if index < len(actual_lines) else None
        if (expected or "") != (actual or ""):
            entries.append(DiffEntry(index=index, expected=expected, actual=actual))
    return DiffReport(
        entries=tuple(entries),
        expected_line_count=len(expected_lines),
        actual_line_count=len(actual_lines),
    )


def format_mismatch_report(name: str, diff: DiffReport) -> Text:
    """Return the console report for a failed verification.

    Returns
    -------
    Text
        Header, separators and the colored diff.
    """
    report = Text()
    report.append(f"[HashSpec] MISMATCH DETECTED in {name}\n", style="bold red")
    report.append(SEPARATOR + "\n")
    report.append_text(diff.to_rich())
    report.append(SEPARATOR)
    return report


__all__ = [
    "DiffEntry",
    "DiffLine",
    "DiffReport",
    "format_mismatch_report",
    "render_diff",
]

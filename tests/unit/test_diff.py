"""Diff renderer tests."""

from __future__ import annotations

from hashspec.diff import SEPARATOR, DiffEntry, format_mismatch_report, render_diff

_EXPECTED = '{\n  "a": 1,\n  "b": 2\n}\n'
_ACTUAL = '{\n  "a": 1,\n  "b": 3\n}\n'


def test_single_changed_line() -> None:
    """Ensure one changed line yields one entry at its index."""
    report = render_diff(_EXPECTED, _ACTUAL)
    assert report.entries == (DiffEntry(index=2, expected='"b": 2', actual='"b": 3'),)
    assert report.to_text() == '- "b": 2\n+ "b": 3'
    assert report.expected_line_count == 4
    assert report.actual_line_count == 4


def test_identical_text_has_no_changes() -> None:
    """Ensure equal texts produce an empty report."""
    report = render_diff(_EXPECTED, _EXPECTED)
    assert not report.has_changes
    assert report.to_text() == ""


def test_indentation_changes_are_ignored() -> None:
    """Ensure surrounding whitespace does not count as a change."""
    assert not render_diff('{\n  "a": 1\n}', '{\n    "a": 1  \n}').has_changes


def test_longer_actual_only_adds() -> None:
    """Ensure lines past the end of the baseline are additions only."""
    report = render_diff("[\n1\n]", "[\n1\n2\n]")
    assert [(line.index, line.marker, line.text) for line in report.lines()] == [
        (2, "-", "]"),
        (2, "+", "2"),
        (3, "+", "]"),
    ]
    assert report.entries[-1] == DiffEntry(index=3, expected=None, actual="]")


def test_shorter_actual_only_removes() -> None:
    """Ensure lines missing from the actual text are removals only."""
    report = render_diff("a\nb", "a")
    assert report.to_text() == "- b"


def test_rich_rendering_colours_lines() -> None:
    """Ensure removals are red and additions green."""
    text = render_diff(_EXPECTED, _ACTUAL).to_rich()
    assert text.plain == '- "b": 2\n+ "b": 3\n'
    assert [span.style for span in text.spans] == ["red", "green"]


def test_payload_is_plain_data() -> None:
    """Ensure the payload form can be attached to reports."""
    payload = render_diff("x", "y").to_payload()
    assert payload == [{"index": 0, "expected": "x", "actual": "y"}]


def test_mismatch_report_layout() -> None:
    """Ensure the report has a header, separators and the diff."""
    plain = format_mismatch_report("cart", render_diff(_EXPECTED, _ACTUAL)).plain
    assert plain.splitlines() == [
        "[HashSpec] MISMATCH DETECTED in cart",
        SEPARATOR,
        '- "b": 2',
        '+ "b": 3',
        SEPARATOR,
    ]


def test_unicode_line_separators_stay_inside_lines() -> None:
    """Ensure only CR and LF break lines, not separators inside JSON strings."""
    expected = '{\n  "a": "x\u2028y",\n  "b": "p\x85q"\n}\n'
    actual = '{\n  "a": "x\u2028z",\n  "b": "p\x85q"\n}\n'
    report = render_diff(expected, actual)
    assert report.expected_line_count == 4
    assert report.entries == (
        DiffEntry(index=1, expected='"a": "x\u2028y",', actual='"a": "x\u2028z",'),
    )


def test_windows_line_endings() -> None:
    """Ensure CRLF and LF texts compare equal."""
    assert not render_diff('{\r\n  "a": 1\r\n}\r\n', '{\n  "a": 1\n}\n').has_changes

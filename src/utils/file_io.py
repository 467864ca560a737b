"""File I/O utilities with consistent encoding handling."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import msgspec


def read_text(path: Path, *, encoding: str = "utf-8") -> str:
    """Read text file with consistent encoding.

    Parameters
    ----------
    path
        Path to the file.
    encoding
        Text encoding.

    Returns
    -------
    str
        File contents.
    """
    return path.read_text(encoding=encoding)


def read_json(path: Path) -> Any:
    """Read and parse a JSON file.

    Parameters
    ----------
    path
        Path to the JSON file.

    Returns
    -------
    Any
        Parsed JSON content.
    """
    return msgspec.json.decode(path.read_bytes())


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write text through a sibling temp file and an atomic replace.

    Parameters
    ----------
    path
        Destination path. Parent directories are created when missing.
    text
        Text content to write.
    encoding
        Text encoding.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    # newline="" keeps the text byte-identical across platforms.
    with tmp.open("w", encoding=encoding, newline="") as handle:
        handle.write(text)
    os.replace(tmp, path)


__all__ = [
    "read_json",
    "read_text",
    "write_text_atomic",
]

"""
Pipe-table helpers shared by the document generator and the diff renderer.
"""

from __future__ import annotations
import re
from typing import Sequence


_SEPARATOR_ROW = re.compile(r"^\|[-\s|]+\|$")


def column_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[int]:
    """Width of each column: the longest of its header and its cells."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(widths):
                widths[i] = max(widths[i], len(cell))
    return widths


def format_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    padded = [
        (cells[i] if i < len(cells) else "").ljust(width)
        for i, width in enumerate(widths)
    ]
    return "| " + " | ".join(padded) + " |"


def format_separator(widths: Sequence[int]) -> str:
    return "|" + "|".join("-" * (w + 2) for w in widths) + "|"


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    """
    Render a header row, a dashed separator and the data rows.

    Returns the lines without a trailing newline so callers can decorate
    individual lines (e.g. colour them) before joining.
    """
    widths = column_widths(headers, rows)
    lines = [format_row(headers, widths), format_separator(widths)]
    for row in rows:
        lines.append(format_row(row, widths))
    return lines


def is_table_row(line: str) -> bool:
    return line.startswith("|")


def split_row(line: str) -> list[str]:
    """Split `| a | b |` into stripped cells, tolerating a missing trailing pipe."""
    inner = line.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|"):
        inner = inner[:-1]
    return [cell.strip() for cell in inner.split("|")]


def is_separator_row(line: str) -> bool:
    """True for `|-----|----|` style rows."""
    stripped = line.strip()
    return bool(_SEPARATOR_ROW.match(stripped)) and "-" in stripped

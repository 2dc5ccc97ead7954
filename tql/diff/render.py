"""
Diff renderers.

- render_diff_markdown: git-style markdown tables, optionally coloured for a
  terminal. The uncoloured form is what gets embedded in .tql conversations.
- render_diff_json: plain JSON-compatible data for programmatic consumers.
"""

from __future__ import annotations
import json
from typing import Any

from ..document.facets import schema_columns
from ..utils.tables import column_widths, format_row, format_separator
from .models import DocumentDiff, FacetDiff


RED = "\033[31m"
GREEN = "\033[32m"
RESET = "\033[0m"

_INDEX_HEADER = "index"
_MARKER_HEADER = ""


def _colorize(line: str, marker: str, color_enabled: bool) -> str:
    if not color_enabled:
        return line
    if marker == "-":
        return f"{RED}{line}{RESET}"
    if marker == "+":
        return f"{GREEN}{line}{RESET}"
    return line


def _facet_table(facet_diff: FacetDiff, color_enabled: bool) -> list[str]:
    columns = list(schema_columns(facet_diff.facet))
    headers = [_MARKER_HEADER, _INDEX_HEADER, *columns]

    # (marker, cells) pairs; a modification is a "-" row directly followed by a "+" row
    marked_rows: list[tuple[str, list[str]]] = []
    for change in facet_diff.changes:
        index = str(change.index)
        if change.before is not None:
            marked_rows.append(("-", ["-", index, *(change.before.get(c, "") for c in columns)]))
        if change.after is not None:
            marked_rows.append(("+", ["+", index, *(change.after.get(c, "") for c in columns)]))

    widths = column_widths(headers, [cells for _, cells in marked_rows])
    lines = [format_row(headers, widths), format_separator(widths)]
    for marker, cells in marked_rows:
        lines.append(_colorize(format_row(cells, widths), marker, color_enabled))
    return lines


def _rows_label(count: int) -> str:
    return f"{count} row" if count == 1 else f"{count} rows"


def render_diff_markdown(diff: DocumentDiff, color_enabled: bool = False) -> str:
    """
    Render a diff as markdown.

    Args:
        diff: Diff to render
        color_enabled: Wrap "-" rows in red and "+" rows in green (ANSI)

    Returns:
        Markdown text without a trailing newline
    """
    summary = diff.summary
    lines = [
        "## Diff",
        "",
        "**Summary**",
        f"- Facets modified: {summary.facets_modified}",
        f"- Facets unchanged: {summary.facets_unchanged}",
        f"- Row changes: {summary.row_changes} "
        f"(+{summary.rows_added} -{summary.rows_removed} ~{summary.rows_modified})",
    ]

    if diff.is_identical:
        lines.append("")
        lines.append("No changes")

    for facet_diff in diff.changed_facets():
        lines.append("")
        lines.append(
            f"### @{facet_diff.facet} ({facet_diff.status}, "
            f"{facet_diff.before_count} → {facet_diff.after_count} rows)"
        )
        lines.append("")
        lines.extend(_facet_table(facet_diff, color_enabled))

    unchanged = diff.unchanged_facets()
    if unchanged:
        lines.append("")
        lines.append("### Unchanged")
        lines.append("")
        for facet_diff in unchanged:
            lines.append(f"- @{facet_diff.facet}: {_rows_label(facet_diff.after_count)}")

    return "\n".join(lines)


def render_diff_json(diff: DocumentDiff) -> dict[str, Any]:
    """Render a diff as JSON-compatible data (summary plus per-facet changes)."""
    return {
        "summary": diff.summary.model_dump(mode="json"),
        "facets": [facet_diff.model_dump(mode="json") for facet_diff in diff.facets],
    }


def render_diff_json_text(diff: DocumentDiff, indent: int | None = 2) -> str:
    return json.dumps(render_diff_json(diff), indent=indent, ensure_ascii=False)

"""
TQL generator - Document / Conversation to text.

The inverse of tql.format.parser: for any document built through
tql.operations, parse_document(generate_document(doc)) == doc.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path

from ..diff.render import render_diff_markdown
from ..document.conversation import Conversation, DiffEntry, DocumentEntry
from ..document.facets import FACET_COLUMNS, FacetName, INDEX_COLUMN
from ..document.models import Document, Facet
from ..utils.tables import format_table


logger = logging.getLogger(__name__)


def generate_facet(name: FacetName, facet: Facet) -> str:
    """
    Render one facet section: `@name[count]:`, a header row, a separator and
    one padded row per data row.
    """
    lines = [f"@{name}[{len(facet.rows)}]:"]

    if name.is_table:
        headers = list(facet.rows[0].keys()) if facet.rows else [INDEX_COLUMN]
        rows = [[row.get(h, "") for h in headers] for row in facet.rows]
    else:
        headers = list(FACET_COLUMNS[name])
        rows = [
            [str(position) if h == INDEX_COLUMN else row.get(h, "") for h in headers]
            for position, row in enumerate(facet.rows, start=1)
        ]

    lines.extend(format_table(headers, rows))
    return "\n".join(lines)


def generate_document(doc: Document) -> str:
    """Render all nine facets in order, separated by blank lines."""
    return "\n\n".join(generate_facet(name, facet) for name, facet in doc.iter_facets())


def _generate_diff_body(entry: DiffEntry) -> str:
    if entry.diff is not None:
        return render_diff_markdown(entry.diff, color_enabled=False)
    return entry.body or ""


def generate_conversation(conversation: Conversation) -> str:
    """
    Render a conversation: the `#conversation[N]:` header followed by every
    entry in order, entries separated by one blank line.
    """
    sections = [f"#conversation[{conversation.document_count}]:", ""]

    for i, entry in enumerate(conversation.entries):
        sections.append(entry.header)
        match entry:
            case DocumentEntry():
                sections.append(generate_document(entry.document))
            case DiffEntry():
                sections.append(_generate_diff_body(entry))

        if i < len(conversation.entries) - 1:
            sections.append("")

    return "\n".join(sections)


def write_text_atomic(path: str | Path, content: str, encoding: str = "utf-8") -> None:
    """Write `content` to a sibling temp file, then replace `path` with it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp-{os.getpid()}")
    try:
        tmp.write_text(content, encoding=encoding)
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


def write_conversation(path: str | Path, conversation: Conversation, encoding: str = "utf-8") -> None:
    """Render and atomically write a conversation to `path`."""
    content = generate_conversation(conversation)
    write_text_atomic(path, content, encoding=encoding)
    logger.info("Wrote %s (%d documents, %d entries)", path, conversation.document_count, len(conversation))

"""
TQL parser - text to Document / Conversation.

Two levels of line scanning:

1. Conversation level: `#conversation[N]:` on the first line switches on
   conversation mode. `#document[+n]:` and `$diff[+i→+j]:` headers split the
   rest of the text into sections. Text without the conversation header is a
   legacy single document and becomes revision 0.

2. Document level: `@facet[count]:` opens a facet, the first `|` row is the
   column header, a dashed `|---|` row ends the header, and every following
   `|` row is a data row. A blank line ends the table.

Usage:
    conversation = parse_conversation(text)
    doc = parse_document(facets_text)
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from ..document.conversation import Conversation, DiffEntry, DocumentEntry
from ..document.facets import FacetName, INDEX_COLUMN
from ..document.models import Document
from ..errors import FormatError, UnknownFacetError
from ..utils.tables import is_separator_row, is_table_row, split_row


logger = logging.getLogger(__name__)


CONVERSATION_HEADER = re.compile(r"^#conversation\[(\d+)\]:")
DOCUMENT_HEADER = re.compile(r"^#document\[\+(\d+)\]:")
DIFF_HEADER = re.compile(r"^\$diff\[\+(\d+)→\+(\d+)\]:")
FACET_HEADER = re.compile(r"^@(\w+)\[(\d+)\]:")


# =============================================================================
# Conversation level
# =============================================================================

@dataclass
class _Section:
    """A document or diff section being collected."""
    kind: Literal["document", "diff"]
    numbers: tuple[int, ...]
    lines: list[str] = field(default_factory=list)


def _flush_section(conversation: Conversation, section: _Section | None) -> None:
    if section is None:
        return
    if section.kind == "document":
        (revision,) = section.numbers
        logger.debug("Parsing #document[+%d] (%d lines)", revision, len(section.lines))
        conversation.append(DocumentEntry(
            revision=revision,
            document=parse_document("\n".join(section.lines)),
        ))
    else:
        from_revision, to_revision = section.numbers
        lines = list(section.lines)
        while lines and not lines[-1].strip():
            lines.pop()
        while lines and not lines[0].strip():
            lines.pop(0)
        conversation.append(DiffEntry(
            from_revision=from_revision,
            to_revision=to_revision,
            body="\n".join(lines),
        ))


def parse_conversation(text: str) -> Conversation:
    """
    Parse TQL text into a Conversation.

    Raises:
        FormatError: the declared document count does not match the number of
            `#document[+n]:` sections, a facet header names an unknown facet, or
            revision headers appear without a `#conversation[N]:` header
    """
    lines = text.removeprefix("\ufeff").splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)

    header = CONVERSATION_HEADER.match(lines[0]) if lines else None
    if header is None:
        for line in lines:
            if DOCUMENT_HEADER.match(line) or DIFF_HEADER.match(line):
                raise FormatError(f"Revision header without a conversation header: {line}")
        logger.debug("No conversation header, parsing as a single document")
        return Conversation.from_document(parse_document("\n".join(lines)))

    expected = int(header.group(1))
    conversation = Conversation()
    section: _Section | None = None

    for line in lines[1:]:
        if doc_match := DOCUMENT_HEADER.match(line):
            _flush_section(conversation, section)
            section = _Section(kind="document", numbers=(int(doc_match.group(1)),))
            continue

        if diff_match := DIFF_HEADER.match(line):
            _flush_section(conversation, section)
            section = _Section(kind="diff", numbers=(int(diff_match.group(1)), int(diff_match.group(2))))
            continue

        if section is not None:
            section.lines.append(line)

    _flush_section(conversation, section)

    actual = conversation.document_count
    if actual != expected:
        raise FormatError(
            f"Conversation header indicates {expected} documents, but found {actual}"
        )
    return conversation


def read_conversation(path: str | Path, encoding: str = "utf-8") -> Conversation:
    """Read and parse a .tql file."""
    text = Path(path).read_text(encoding=encoding)
    return parse_conversation(text)


# =============================================================================
# Document level
# =============================================================================

class _FacetState:
    """Header/data tracking for the facet currently being read."""

    def __init__(self, facet: FacetName, declared: int):
        self.facet = facet
        self.declared = declared
        self.columns: list[str] = []
        self.header_parsed = False
        self.row_count = 0

    def reset_table(self) -> None:
        self.columns = []
        self.header_parsed = False


def _make_row(facet: FacetName, columns: list[str], cells: list[str]) -> dict[str, str]:
    row = {}
    for i, column in enumerate(columns):
        if column == INDEX_COLUMN and not facet.is_table:
            continue
        row[column] = cells[i] if i < len(cells) else ""
    return row


def _check_count(state: _FacetState | None) -> None:
    if state is not None and state.row_count != state.declared:
        logger.warning(
            "@%s declares %d rows but %d were found",
            state.facet, state.declared, state.row_count,
        )


def parse_document(text: str) -> Document:
    """
    Parse the facet sections of one document.

    The `index` cell of fixed-schema facets is positional and is not stored.
    Facets missing from the text stay empty.

    Raises:
        FormatError: a facet header names an unknown facet
    """
    doc = Document()
    state: _FacetState | None = None

    for raw_line in text.splitlines():
        line = raw_line.strip()

        # blank line closes the current table
        if not line:
            if state is not None and state.columns:
                state.reset_table()
            continue

        if facet_match := FACET_HEADER.match(line):
            _check_count(state)
            try:
                facet = FacetName.parse(facet_match.group(1))
            except UnknownFacetError:
                raise FormatError(f"Unknown facet header: {line}") from None
            state = _FacetState(facet, int(facet_match.group(2)))
            continue

        if state is None or not is_table_row(line):
            continue

        if not state.header_parsed:
            if is_separator_row(line):
                state.header_parsed = True
            elif not state.columns:
                state.columns = split_row(line)
            continue

        if not state.columns:
            continue

        doc.facet(state.facet).rows.append(_make_row(state.facet, state.columns, split_row(line)))
        state.row_count += 1

    _check_count(state)
    return doc

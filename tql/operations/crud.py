"""
Row operations - insert, update and delete rows of a facet.

In-memory operations work on a Document and address rows by their 1-based
index. The *_in_file variants read the conversation at a path, apply the same
operation to its latest revision (appending a diff and a new revision), and
atomically rewrite the file.

Usage:
    insert_row(doc, "meaning", {"column": "id", "definition": ""})
    update_row(doc, "meaning", 1, {"definition": "Unique identifier"})
    delete_rows(doc, "context", [1, 3])

    update_row_in_file("data.tql", "context", 1, {"value": "PST"})
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..document.conversation import Conversation
from ..document.facets import FacetName, INDEX_COLUMN
from ..document.models import Document, Row
from ..errors import InvalidPatchError, RowIndexError
from ..format import read_conversation, write_conversation
from .evolution import apply_changes_to_conversation


logger = logging.getLogger(__name__)


_FORBIDDEN_CHARS = ("|", "\n", "\r")


def _is_representable(text: str) -> bool:
    """A cell survives render + parse: no pipe, no line break, no outer whitespace."""
    if any(c in text for c in _FORBIDDEN_CHARS):
        return False
    return text == text.strip() and len(text.splitlines()) <= 1


# =============================================================================
# Validation
# =============================================================================

def validate_patch(doc: Document, facet: FacetName, data: Any) -> dict[str, str]:
    """
    Check that `data` can be stored in `facet`.

    Must be a mapping of column name to string, without the positional
    `index`, limited to the facet's columns (for the table facet: the existing
    dataset columns, once there are any), and free of anything the text
    format cannot represent inside a cell (pipes, line breaks, and leading or
    trailing whitespace, which the parser strips).

    Raises:
        InvalidPatchError: otherwise
    """
    if not isinstance(data, Mapping):
        raise InvalidPatchError(f"Row data for @{facet} must be an object, got {type(data).__name__}")

    patch: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidPatchError(
                f"Row data for @{facet} must map strings to strings, got {key!r}: {value!r}"
            )
        if not _is_representable(key) or not _is_representable(value):
            raise InvalidPatchError(
                f"Field {key!r} of @{facet} contains '|', a line break or leading/trailing whitespace"
            )
        patch[key] = value

    if not facet.is_table and INDEX_COLUMN in patch:
        raise InvalidPatchError(f"The index of @{facet} rows is positional and cannot be set")

    columns = doc.columns(facet)
    if columns:
        unknown = [k for k in patch if k not in columns]
        if unknown:
            raise InvalidPatchError(
                f"Unknown column(s) for @{facet}: {', '.join(unknown)} (expected: {', '.join(columns)})"
            )
    return patch


def _check_index(facet: FacetName, rows: list[Row], index: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int) or not 1 <= index <= len(rows):
        raise RowIndexError(str(facet), index, len(rows))


# =============================================================================
# In-memory operations
# =============================================================================

def update_row(doc: Document, facet: FacetName | str, index: int, patch: Mapping[str, str]) -> Row:
    """
    Merge `patch` into the row at the 1-based `index`. Fields not in the patch
    are left untouched.

    Returns:
        The updated row

    Raises:
        RowIndexError: `index` outside [1, row_count]
        InvalidPatchError: malformed patch
    """
    facet_name = FacetName.parse(facet)
    rows = doc.facet(facet_name).rows
    _check_index(facet_name, rows, index)
    fields = validate_patch(doc, facet_name, patch)

    rows[index - 1].update(fields)
    logger.debug("Updated @%s[%d]: %s", facet_name, index, ", ".join(fields))
    return rows[index - 1]


def insert_row(doc: Document, facet: FacetName | str, row: Mapping[str, str]) -> int:
    """
    Append a row at the end of a facet. Existing rows keep their indices.

    Missing columns are filled with empty strings so the row renders and
    parses back unchanged.

    Returns:
        The 1-based index of the new row
    """
    facet_name = FacetName.parse(facet)
    fields = validate_patch(doc, facet_name, row)

    columns = doc.columns(facet_name)
    new_row = {c: fields.get(c, "") for c in columns} if columns else dict(fields)
    if not new_row:
        raise InvalidPatchError(f"Cannot insert an empty row into @{facet_name}")

    rows = doc.facet(facet_name).rows
    rows.append(new_row)
    logger.debug("Inserted @%s[%d]", facet_name, len(rows))
    return len(rows)


def delete_rows(doc: Document, facet: FacetName | str, indices: Iterable[int]) -> list[Row]:
    """
    Delete the rows at the given 1-based indices.

    All indices refer to positions before the deletion, and all of them are
    checked before any row is removed. Duplicates are ignored.

    Returns:
        The removed rows, in their original order
    """
    facet_name = FacetName.parse(facet)
    rows = doc.facet(facet_name).rows
    targets = list(indices)
    for index in targets:
        _check_index(facet_name, rows, index)

    positions = set(targets)
    removed = [row for i, row in enumerate(rows, start=1) if i in positions]
    rows[:] = [row for i, row in enumerate(rows, start=1) if i not in positions]
    logger.debug("Deleted %d row(s) from @%s", len(removed), facet_name)
    return removed


def delete_row(doc: Document, facet: FacetName | str, index: int) -> Row:
    """Delete the row at the 1-based `index` and return it."""
    (removed,) = delete_rows(doc, facet, [index])
    return removed


# =============================================================================
# File operations
# =============================================================================

def _apply_to_file(path: str | Path, mutate, encoding: str) -> Conversation:
    conversation = read_conversation(path, encoding=encoding)
    apply_changes_to_conversation(conversation, mutate)
    write_conversation(path, conversation, encoding=encoding)
    return conversation


def update_row_in_file(
    path: str | Path,
    facet: FacetName | str,
    index: int,
    patch: Mapping[str, str],
    encoding: str = "utf-8",
) -> Conversation:
    return _apply_to_file(path, lambda doc: update_row(doc, facet, index, patch), encoding)


def insert_row_in_file(
    path: str | Path,
    facet: FacetName | str,
    row: Mapping[str, str],
    encoding: str = "utf-8",
) -> Conversation:
    return _apply_to_file(path, lambda doc: insert_row(doc, facet, row), encoding)


def delete_row_in_file(
    path: str | Path,
    facet: FacetName | str,
    index: int,
    encoding: str = "utf-8",
) -> Conversation:
    return _apply_to_file(path, lambda doc: delete_row(doc, facet, index), encoding)


def delete_rows_in_file(
    path: str | Path,
    facet: FacetName | str,
    indices: Iterable[int],
    encoding: str = "utf-8",
) -> Conversation:
    targets = list(indices)
    return _apply_to_file(path, lambda doc: delete_rows(doc, facet, targets), encoding)

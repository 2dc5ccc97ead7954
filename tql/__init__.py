"""
TQL - a structured text format for a dataset and the facets describing it,
with revision history and diffs.

Usage:
    from tql import parse_conversation, apply_changes_to_conversation, update_row, generate_conversation

    conversation = parse_conversation(text)
    apply_changes_to_conversation(conversation, lambda doc: update_row(doc, "meaning", 1, {"definition": "Unique id"}))
    text = generate_conversation(conversation)
"""

# document must be imported before diff (conversation entries embed diffs)
from .document import (
    FacetName,
    Facet,
    Document,
    Row,
    Conversation,
    DocumentEntry,
    DiffEntry,
)
from .diff import (
    DocumentDiff,
    FacetDiff,
    RowChange,
    diff_documents,
    render_diff_markdown,
    render_diff_json,
)
from .format import (
    parse_conversation,
    parse_document,
    read_conversation,
    generate_conversation,
    generate_document,
    write_conversation,
)
from .operations import (
    apply_changes_to_conversation,
    insert_row,
    update_row,
    delete_row,
    delete_rows,
    insert_row_in_file,
    update_row_in_file,
    delete_row_in_file,
    delete_rows_in_file,
)
from .errors import (
    TqlError,
    FormatError,
    RowIndexError,
    DatasetMismatchError,
    InvalidPatchError,
    UnknownFacetError,
    EmptyConversationError,
)

__all__ = [
    "FacetName",
    "Facet",
    "Document",
    "Row",
    "Conversation",
    "DocumentEntry",
    "DiffEntry",
    "DocumentDiff",
    "FacetDiff",
    "RowChange",
    "diff_documents",
    "render_diff_markdown",
    "render_diff_json",
    "parse_conversation",
    "parse_document",
    "read_conversation",
    "generate_conversation",
    "generate_document",
    "write_conversation",
    "apply_changes_to_conversation",
    "insert_row",
    "update_row",
    "delete_row",
    "delete_rows",
    "insert_row_in_file",
    "update_row_in_file",
    "delete_row_in_file",
    "delete_rows_in_file",
    "TqlError",
    "FormatError",
    "RowIndexError",
    "DatasetMismatchError",
    "InvalidPatchError",
    "UnknownFacetError",
    "EmptyConversationError",
]

"""
Operations on documents and conversations.

This module provides:
- insert_row / update_row / delete_row / delete_rows: in-memory row CRUD
- *_in_file variants: the same, applied to the latest revision of a .tql file
- apply_changes_to_conversation: append a mutated revision plus its diff
"""

from .evolution import apply_changes_to_conversation
from .crud import (
    validate_patch,
    insert_row,
    update_row,
    delete_row,
    delete_rows,
    insert_row_in_file,
    update_row_in_file,
    delete_row_in_file,
    delete_rows_in_file,
)

__all__ = [
    "apply_changes_to_conversation",
    "validate_patch",
    "insert_row",
    "update_row",
    "delete_row",
    "delete_rows",
    "insert_row_in_file",
    "update_row_in_file",
    "delete_row_in_file",
    "delete_rows_in_file",
]

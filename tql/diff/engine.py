"""
Diff computation between two revisions of a document.

Rows are compared by position, not by content: row 3 of `before` is compared
with row 3 of `after`. Inserting rows at the end and updating rows in place
(the only mutations tql.operations performs besides deletion) therefore show
up as plain additions and modifications.
"""

from __future__ import annotations
import logging

from ..document.facets import FacetName, SEMANTIC_FACETS
from ..document.models import Document, Row
from ..errors import DatasetMismatchError
from .models import DocumentDiff, FacetDiff, FacetStatus, RowChange


logger = logging.getLogger(__name__)


def _compute_facet_diff(facet: FacetName, rows_a: list[Row], rows_b: list[Row]) -> FacetDiff:
    """
    Compare two row lists position by position.

    Args:
        facet: Facet being compared
        rows_a: Rows from the earlier revision
        rows_b: Rows from the later revision

    Returns:
        FacetDiff with one RowChange per differing position
    """
    changes: list[RowChange] = []

    for i in range(max(len(rows_a), len(rows_b))):
        index = i + 1
        row_a = rows_a[i] if i < len(rows_a) else None
        row_b = rows_b[i] if i < len(rows_b) else None

        if row_a is None and row_b is not None:
            changes.append(RowChange(index=index, change_type="added", after=dict(row_b)))
        elif row_a is not None and row_b is None:
            changes.append(RowChange(index=index, change_type="removed", before=dict(row_a)))
        elif row_a != row_b:
            changes.append(RowChange(index=index, change_type="modified", before=dict(row_a), after=dict(row_b)))

    status: FacetStatus
    if not changes:
        status = "unchanged"
    elif not rows_a:
        status = "added"
    elif not rows_b:
        status = "removed"
    else:
        status = "modified"

    return FacetDiff(
        facet=facet,
        status=status,
        before_count=len(rows_a),
        after_count=len(rows_b),
        changes=changes,
    )


def diff_documents(before: Document, after: Document) -> DocumentDiff:
    """
    Compute the diff between two revisions of the same dataset.

    Args:
        before: Earlier revision
        after: Later revision

    Returns:
        DocumentDiff covering the eight semantic facets

    Raises:
        DatasetMismatchError: the table facets differ, so the documents do not
            describe the same dataset

    Example:
        diff = diff_documents(doc_v0, doc_v1)
        print(diff.describe())
    """
    if before.table.rows != after.table.rows:
        raise DatasetMismatchError()

    facets = [
        _compute_facet_diff(name, before.facet(name).rows, after.facet(name).rows)
        for name in SEMANTIC_FACETS
    ]
    diff = DocumentDiff(facets=facets)
    logger.debug("Computed diff: %s", diff.describe())
    return diff

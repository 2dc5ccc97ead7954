"""
Diff engine - facet-by-facet, row-by-row comparison of two documents.
"""

from .models import DocumentDiff, FacetDiff, RowChange, DiffSummary, ChangeType, FacetStatus
from .engine import diff_documents
from .render import render_diff_markdown, render_diff_json, render_diff_json_text

__all__ = [
    "DocumentDiff",
    "FacetDiff",
    "RowChange",
    "DiffSummary",
    "ChangeType",
    "FacetStatus",
    "diff_documents",
    "render_diff_markdown",
    "render_diff_json",
    "render_diff_json_text",
]

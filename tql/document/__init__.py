"""
TQL document model.

This module provides:
- FacetName: the nine facets, in rendering order
- Facet: ordered rows of one facet
- Document: one snapshot carrying all nine facets
- Conversation: revision history (document and diff entries)
"""

from .facets import FacetName, FACET_COLUMNS, SEMANTIC_FACETS, INDEX_COLUMN, schema_columns
from .models import Document, Facet, Row
from .conversation import Conversation, ConversationEntry, DocumentEntry, DiffEntry

__all__ = [
    "FacetName",
    "FACET_COLUMNS",
    "SEMANTIC_FACETS",
    "INDEX_COLUMN",
    "schema_columns",
    "Document",
    "Facet",
    "Row",
    "Conversation",
    "ConversationEntry",
    "DocumentEntry",
    "DiffEntry",
]

"""
Facet names and column schemas.

A TQL document always carries the same nine facets, in this order. Every
facet except `table` has a fixed column schema; `table` takes its columns from
the dataset it was created from.
"""

from __future__ import annotations
import enum

from ..errors import UnknownFacetError


class FacetName(enum.StrEnum):
    """The nine facets of a document, in rendering order."""
    TABLE = "table"
    MEANING = "meaning"
    STRUCTURE = "structure"
    AMBIGUITY = "ambiguity"
    INTENT = "intent"
    CONTEXT = "context"
    QUERY = "query"
    TASKS = "tasks"
    SCORE = "score"

    @classmethod
    def parse(cls, name: "FacetName | str") -> "FacetName":
        """
        Resolve a facet name given by a user or read from a file.

        Accepts a leading "@" and the legacy alias "data" for the table facet.
        Raises UnknownFacetError for anything else.
        """
        if isinstance(name, FacetName):
            return name
        key = str(name).strip().lstrip("@").lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            raise UnknownFacetError(str(name)) from None

    @property
    def is_table(self) -> bool:
        return self is FacetName.TABLE


_ALIASES: dict[str, FacetName] = {
    "data": FacetName.TABLE,
}


INDEX_COLUMN = "index"


FACET_COLUMNS: dict[FacetName, tuple[str, ...]] = {
    FacetName.MEANING: ("index", "column", "definition"),
    FacetName.STRUCTURE: ("index", "column", "nullAllowed", "dataType", "minValue", "maxValue", "format"),
    FacetName.AMBIGUITY: ("index", "query_trigger", "ambiguity_type", "ambiguity_risk"),
    FacetName.INTENT: ("index", "query_trigger", "clarifying_question", "options", "user_response", "user_confirmed"),
    FacetName.CONTEXT: ("index", "key", "value"),
    FacetName.QUERY: ("index", "user_message", "timestamp_utc"),
    FacetName.TASKS: ("index", "name", "description", "formula"),
    FacetName.SCORE: ("index", "measure", "value"),
}


SEMANTIC_FACETS: tuple[FacetName, ...] = tuple(f for f in FacetName if not f.is_table)


def schema_columns(facet: FacetName) -> tuple[str, ...]:
    """Columns stored in a row of a fixed-schema facet (the index is positional)."""
    if facet.is_table:
        raise ValueError("The table facet has no fixed schema")
    return tuple(c for c in FACET_COLUMNS[facet] if c != INDEX_COLUMN)

"""
Document model - one snapshot of a dataset and its nine facets.

Usage:
    from tql.document import Document, FacetName

    doc = Document()
    doc.facet("meaning").rows          # []
    doc.columns(FacetName.STRUCTURE)   # ["column", "nullAllowed", ...]

Rows are plain dicts of column -> string. The row index is never stored;
it is the 1-based position of the row inside its facet.

Documents are changed through tql.operations (insert_row, update_row,
delete_row), which keep the facet/row shape valid.
"""

from __future__ import annotations
from typing import Iterator, assert_never
from pydantic import BaseModel, Field

from .facets import FacetName, schema_columns


Row = dict[str, str]


class Facet(BaseModel):
    """An ordered collection of rows."""
    rows: list[Row] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def row_at(self, index: int) -> Row | None:
        """Row at a 1-based position, or None if there is none."""
        if 1 <= index <= len(self.rows):
            return self.rows[index - 1]
        return None

    def copy_rows(self) -> list[Row]:
        return [dict(row) for row in self.rows]


class Document(BaseModel):
    """
    A complete TQL snapshot. All nine facets are always present, even when
    empty.
    """
    table: Facet = Field(default_factory=Facet)
    meaning: Facet = Field(default_factory=Facet)
    structure: Facet = Field(default_factory=Facet)
    ambiguity: Facet = Field(default_factory=Facet)
    intent: Facet = Field(default_factory=Facet)
    context: Facet = Field(default_factory=Facet)
    query: Facet = Field(default_factory=Facet)
    tasks: Facet = Field(default_factory=Facet)
    score: Facet = Field(default_factory=Facet)

    def facet(self, name: FacetName | str) -> Facet:
        """Look up a facet by name. Raises UnknownFacetError for unknown names."""
        facet_name = FacetName.parse(name)
        match facet_name:
            case FacetName.TABLE:
                return self.table
            case FacetName.MEANING:
                return self.meaning
            case FacetName.STRUCTURE:
                return self.structure
            case FacetName.AMBIGUITY:
                return self.ambiguity
            case FacetName.INTENT:
                return self.intent
            case FacetName.CONTEXT:
                return self.context
            case FacetName.QUERY:
                return self.query
            case FacetName.TASKS:
                return self.tasks
            case FacetName.SCORE:
                return self.score
            case _:
                assert_never(facet_name)

    def iter_facets(self) -> Iterator[tuple[FacetName, Facet]]:
        """Iterate (name, facet) pairs in rendering order."""
        for name in FacetName:
            yield name, self.facet(name)

    def columns(self, name: FacetName | str) -> list[str]:
        """
        Columns of a facet's rows, without the positional index.

        The table facet uses the keys of its first row; an empty table has no
        columns yet.
        """
        facet_name = FacetName.parse(name)
        if facet_name.is_table:
            return list(self.table.rows[0].keys()) if self.table.rows else []
        return list(schema_columns(facet_name))

    def clone(self) -> Document:
        """Structural deep copy: every facet's rows are copied by value."""
        return Document(**{
            name.value: Facet(rows=facet.copy_rows())
            for name, facet in self.iter_facets()
        })

    def row_counts(self) -> dict[str, int]:
        return {name.value: len(facet) for name, facet in self.iter_facets()}

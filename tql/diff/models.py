"""
Diff models - structured result of comparing two documents.

A DocumentDiff holds one FacetDiff per semantic facet (the table facet is the
dataset itself and must be identical on both sides). Each FacetDiff lists the
rows that changed, addressed by their 1-based index.

Usage:
    diff = diff_documents(before, after)

    if diff:
        print(diff.describe())
        for facet_diff in diff.changed_facets():
            for change in facet_diff.changes:
                print(facet_diff.facet, change.index, change.change_type)
"""

from __future__ import annotations
from typing import Iterator, Literal
from pydantic import BaseModel, Field

from ..document.facets import FacetName


ChangeType = Literal["added", "removed", "modified"]
FacetStatus = Literal["unchanged", "modified", "added", "removed"]


class RowChange(BaseModel):
    """A single changed row. `before` is None for additions, `after` for removals."""
    index: int
    change_type: ChangeType
    before: dict[str, str] | None = None
    after: dict[str, str] | None = None

    def __repr__(self) -> str:
        return f"RowChange(index={self.index}, {self.change_type})"


class FacetDiff(BaseModel):
    """Row-level comparison of one facet."""
    facet: FacetName
    status: FacetStatus = "unchanged"
    before_count: int = 0
    after_count: int = 0
    changes: list[RowChange] = Field(default_factory=list)

    @property
    def is_unchanged(self) -> bool:
        return self.status == "unchanged"

    @property
    def added(self) -> list[RowChange]:
        return [c for c in self.changes if c.change_type == "added"]

    @property
    def removed(self) -> list[RowChange]:
        return [c for c in self.changes if c.change_type == "removed"]

    @property
    def modified(self) -> list[RowChange]:
        return [c for c in self.changes if c.change_type == "modified"]

    def get_change(self, index: int) -> RowChange | None:
        for change in self.changes:
            if change.index == index:
                return change
        return None

    def __repr__(self) -> str:
        if self.is_unchanged:
            return f"FacetDiff(@{self.facet}, unchanged)"
        return f"FacetDiff(@{self.facet}, {self.status}: {len(self.changes)} rows)"


class DiffSummary(BaseModel):
    """Counts reported at the top of a diff."""
    facets_modified: int = 0
    facets_unchanged: int = 0
    row_changes: int = 0
    rows_added: int = 0
    rows_removed: int = 0
    rows_modified: int = 0


class DocumentDiff(BaseModel):
    """
    Complete diff between two documents of the same dataset.

    Facets appear in rendering order. Unchanged facets are kept so the
    renderers can list them with their row counts.
    """
    facets: list[FacetDiff] = Field(default_factory=list)

    @property
    def is_identical(self) -> bool:
        return all(f.is_unchanged for f in self.facets)

    @property
    def change_count(self) -> int:
        return sum(len(f.changes) for f in self.facets)

    @property
    def summary(self) -> DiffSummary:
        changes = [c for f in self.facets for c in f.changes]
        return DiffSummary(
            facets_modified=sum(1 for f in self.facets if not f.is_unchanged),
            facets_unchanged=sum(1 for f in self.facets if f.is_unchanged),
            row_changes=len(changes),
            rows_added=sum(1 for c in changes if c.change_type == "added"),
            rows_removed=sum(1 for c in changes if c.change_type == "removed"),
            rows_modified=sum(1 for c in changes if c.change_type == "modified"),
        )

    def get_facet(self, name: FacetName | str) -> FacetDiff:
        facet_name = FacetName.parse(name)
        for facet_diff in self.facets:
            if facet_diff.facet == facet_name:
                return facet_diff
        raise KeyError(f"Facet @{facet_name} is not part of this diff")

    def changed_facets(self) -> list[FacetDiff]:
        return [f for f in self.facets if not f.is_unchanged]

    def unchanged_facets(self) -> list[FacetDiff]:
        return [f for f in self.facets if f.is_unchanged]

    def iter_changes(self) -> Iterator[tuple[FacetName, RowChange]]:
        """Iterate every row change with the facet it belongs to."""
        for facet_diff in self.facets:
            for change in facet_diff.changes:
                yield facet_diff.facet, change

    def describe(self) -> str:
        """Human-readable one-line summary."""
        if self.is_identical:
            return "Documents are identical"
        summary = self.summary
        parts = []
        if summary.rows_modified:
            parts.append(f"{summary.rows_modified} modified")
        if summary.rows_added:
            parts.append(f"{summary.rows_added} added")
        if summary.rows_removed:
            parts.append(f"{summary.rows_removed} removed")
        return f"{summary.facets_modified} facet(s) changed: " + ", ".join(parts)

    def __bool__(self) -> bool:
        """True if there are any changes."""
        return not self.is_identical

    def __repr__(self) -> str:
        return f"DocumentDiff({self.describe()})"

"""
Errors raised by the TQL core.

All of them derive from TqlError so callers (the CLI in particular) can catch
the whole family in one place. Some also derive from the matching builtin
(IndexError, ValueError) so generic handlers keep working.
"""


class TqlError(Exception):
    """Base class for all TQL errors."""
    pass


class FormatError(TqlError):
    """Text does not follow the TQL grammar (e.g. wrong document count)."""
    pass


class RowIndexError(TqlError, IndexError):
    """Row index outside [1, row_count]."""

    def __init__(self, facet: str, index: int, row_count: int):
        self.facet = facet
        self.index = index
        self.row_count = row_count
        super().__init__(
            f"Row index {index} out of range for @{facet} (valid: 1..{row_count})"
            if row_count
            else f"Row index {index} out of range for @{facet} (facet is empty)"
        )


class DatasetMismatchError(TqlError):
    """Diff attempted between documents describing different datasets."""

    def __init__(self, message: str = "DIFF operations can only be performed on matching datasets"):
        super().__init__(message)


class InvalidPatchError(TqlError, ValueError):
    """Row data or patch is not a mapping of column names to string values."""
    pass


class UnknownFacetError(TqlError, ValueError):
    """Facet name is not one of the nine known facets."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown facet: {name!r}")


class EmptyConversationError(TqlError):
    """Conversation has no document entry to evolve from."""
    pass

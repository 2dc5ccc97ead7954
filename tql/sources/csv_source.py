"""
CSV source - seed a new TQL document from tabular data.

The new document carries the dataset in @table and empty templates for the
facets that are filled in later:

- @meaning: one row per column, definition empty
- @structure: one row per column, constraints empty
- @score: the default quality measures, values empty
- @query: the initial user message, when one is given
"""

from __future__ import annotations
import csv
import io
import logging
from datetime import datetime, timezone
from pathlib import Path
from pydantic import BaseModel, Field

from ..document.conversation import Conversation
from ..document.facets import FacetName
from ..document.models import Document
from ..errors import InvalidPatchError
from ..operations.crud import insert_row


logger = logging.getLogger(__name__)


DEFAULT_SCORE_MEASURES = (
    "range-values",
    "number-of-interpretations",
    "Uncertainty Ratio (UR)",
    "Missing Certainty Ratio",
)


class TableData(BaseModel):
    """Headers and string rows read from a tabular source."""
    headers: list[str]
    rows: list[list[str]] = Field(default_factory=list)


def parse_csv_text(text: str) -> TableData:
    """
    Parse CSV text. The first record is the header. Cells are stripped; short
    records are padded with empty cells and long ones truncated.
    """
    records = [
        [cell.strip() for cell in record]
        for record in csv.reader(io.StringIO(text))
        if any(cell.strip() for cell in record)
    ]
    if not records:
        raise InvalidPatchError("CSV input is empty")

    headers, *body = records
    width = len(headers)
    rows = []
    for line_no, record in enumerate(body, start=2):
        if len(record) != width:
            logger.warning("CSV record %d has %d cells, expected %d", line_no, len(record), width)
        rows.append((record + [""] * width)[:width])
    return TableData(headers=headers, rows=rows)


def read_csv(path: str | Path, encoding: str = "utf-8") -> TableData:
    text = Path(path).read_text(encoding=encoding)
    return parse_csv_text(text)


def create_document(table: TableData, query: str | None = None, now: datetime | None = None) -> Document:
    """
    Build revision 0 of a document from tabular data.

    Args:
        table: Dataset headers and rows
        query: Optional user message recorded in @query
        now: Timestamp for the query row (defaults to the current UTC time)
    """
    if len(set(table.headers)) != len(table.headers):
        raise InvalidPatchError(f"CSV headers must be unique: {', '.join(table.headers)}")

    doc = Document()
    for row in table.rows:
        insert_row(doc, FacetName.TABLE, dict(zip(table.headers, row)))

    for column in table.headers:
        insert_row(doc, FacetName.MEANING, {"column": column})
        insert_row(doc, FacetName.STRUCTURE, {"column": column})

    for measure in DEFAULT_SCORE_MEASURES:
        insert_row(doc, FacetName.SCORE, {"measure": measure})

    query = query.strip() if query else None
    if query:
        timestamp = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        insert_row(doc, FacetName.QUERY, {
            "user_message": query,
            "timestamp_utc": timestamp.isoformat().replace("+00:00", "Z"),
        })

    logger.debug("Created document: %d rows, %d columns", len(table.rows), len(table.headers))
    return doc


def create_conversation(document: Document) -> Conversation:
    """Wrap a freshly created document as revision 0 of a conversation."""
    return Conversation.from_document(document)

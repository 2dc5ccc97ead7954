from .csv_source import (
    TableData,
    DEFAULT_SCORE_MEASURES,
    parse_csv_text,
    read_csv,
    create_document,
    create_conversation,
)

__all__ = [
    "TableData",
    "DEFAULT_SCORE_MEASURES",
    "parse_csv_text",
    "read_csv",
    "create_document",
    "create_conversation",
]

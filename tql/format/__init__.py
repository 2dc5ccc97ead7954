"""
TQL text format - parser and generator.
"""

from .parser import parse_conversation, parse_document, read_conversation
from .generator import (
    generate_conversation,
    generate_document,
    generate_facet,
    write_conversation,
    write_text_atomic,
)

__all__ = [
    "parse_conversation",
    "parse_document",
    "read_conversation",
    "generate_conversation",
    "generate_document",
    "generate_facet",
    "write_conversation",
    "write_text_atomic",
]

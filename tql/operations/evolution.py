"""
Conversation evolution - append a new revision to a conversation.

    #document[+0]                      #document[+0]
                   --- mutate --->     $diff[+0→+1]
                                       #document[+1]

History is never rewritten: the previous document entry is cloned, the clone
is mutated and diffed against the original, and both the diff and the new
document are appended.
"""

from __future__ import annotations
import logging
from typing import Any, Callable

from ..diff.engine import diff_documents
from ..document.conversation import Conversation, DiffEntry, DocumentEntry
from ..document.models import Document
from ..errors import EmptyConversationError


logger = logging.getLogger(__name__)


def apply_changes_to_conversation(
    conversation: Conversation,
    mutate: Callable[[Document], Any],
) -> Conversation:
    """
    Apply `mutate` to a copy of the latest document and append the result.

    Args:
        conversation: Conversation to extend (modified in place)
        mutate: Callable receiving the new document; it should change it
            through tql.operations (insert_row, update_row, delete_row...)

    Returns:
        The same conversation, with a DiffEntry and a DocumentEntry appended

    Raises:
        EmptyConversationError: the conversation has no document entry
        DatasetMismatchError: `mutate` changed the table facet

    Example:
        apply_changes_to_conversation(conversation, lambda doc: (
            update_row(doc, "meaning", 2, {"definition": "ISO 8601 UTC"}),
            insert_row(doc, "context", {"key": "user_timezone", "value": "MST"}),
        ))
    """
    previous = conversation.latest
    if previous is None:
        raise EmptyConversationError("Conversation has no document to apply changes to")

    document = previous.document.clone()
    mutate(document)
    diff = diff_documents(previous.document, document)

    revision = previous.revision + 1
    conversation.append(DiffEntry(from_revision=previous.revision, to_revision=revision, diff=diff))
    conversation.append(DocumentEntry(revision=revision, document=document))

    logger.info("Appended revision +%d: %s", revision, diff.describe())
    return conversation

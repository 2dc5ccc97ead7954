"""
Conversation - the revision history of a document.

A conversation is an ordered list of entries. Document entries carry a full
snapshot at a revision; diff entries describe what changed between two
revisions. The usual shape alternates them:

    #document[+0]  $diff[+0→+1]  #document[+1]  $diff[+1→+2]  #document[+2]

Entries are only ever appended; see tql.operations.apply_changes_to_conversation.
"""

from __future__ import annotations
from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field

from ..diff.models import DocumentDiff
from .models import Document


class DocumentEntry(BaseModel):
    """A document snapshot at a revision."""
    kind: Literal["document"] = "document"
    revision: int
    document: Document

    @property
    def header(self) -> str:
        return f"#document[+{self.revision}]:"


class DiffEntry(BaseModel):
    """
    Changes between two revisions.

    `diff` is set when the entry was computed in memory. `body` holds the
    verbatim rendered text when the entry was read from a file; diff bodies
    are not parsed back into structured form.
    """
    kind: Literal["diff"] = "diff"
    from_revision: int
    to_revision: int
    diff: DocumentDiff | None = None
    body: str | None = None

    @property
    def header(self) -> str:
        return f"$diff[+{self.from_revision}→+{self.to_revision}]:"


ConversationEntry = Annotated[Union[DocumentEntry, DiffEntry], Field(discriminator="kind")]


class Conversation(BaseModel):
    entries: list[ConversationEntry] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: Document) -> Conversation:
        """Start a conversation with a copy of `document` as revision 0."""
        return cls(entries=[DocumentEntry(revision=0, document=document.clone())])

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def documents(self) -> list[DocumentEntry]:
        return [e for e in self.entries if isinstance(e, DocumentEntry)]

    @property
    def diffs(self) -> list[DiffEntry]:
        return [e for e in self.entries if isinstance(e, DiffEntry)]

    @property
    def document_count(self) -> int:
        return len(self.documents)

    @property
    def latest(self) -> DocumentEntry | None:
        """The most recent document entry."""
        for entry in reversed(self.entries):
            if isinstance(entry, DocumentEntry):
                return entry
        return None

    def get_revision(self, revision: int) -> DocumentEntry:
        for entry in self.entries:
            if isinstance(entry, DocumentEntry) and entry.revision == revision:
                return entry
        raise KeyError(f"Revision +{revision} not found")

    def append(self, entry: DocumentEntry | DiffEntry) -> None:
        self.entries.append(entry)

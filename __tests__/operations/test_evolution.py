import pytest

from tql.document import Conversation, DiffEntry, DocumentEntry
from tql.errors import DatasetMismatchError, EmptyConversationError, RowIndexError
from tql.operations import apply_changes_to_conversation, insert_row, update_row


class TestApplyChanges:

    def test_appends_diff_then_document(self, base_document):
        conversation = Conversation.from_document(base_document)

        result = apply_changes_to_conversation(
            conversation,
            lambda doc: update_row(doc, "meaning", 2, {"definition": "ISO 8601 UTC"}),
        )

        assert result is conversation
        assert len(conversation) == 3
        diff_entry, doc_entry = conversation.entries[1:]
        assert isinstance(diff_entry, DiffEntry)
        assert isinstance(doc_entry, DocumentEntry)
        assert (diff_entry.from_revision, diff_entry.to_revision) == (0, 1)
        assert doc_entry.revision == 1
        assert diff_entry.diff.get_facet("meaning").modified[0].index == 2

    def test_history_is_not_rewritten(self, base_document):
        conversation = Conversation.from_document(base_document)
        apply_changes_to_conversation(
            conversation,
            lambda doc: insert_row(doc, "context", {"key": "user_timezone", "value": "MST"}),
        )
        snapshot = [entry.model_dump() for entry in conversation.entries]

        apply_changes_to_conversation(
            conversation,
            lambda doc: update_row(doc, "context", 1, {"value": "PST"}),
        )

        assert [entry.model_dump() for entry in conversation.entries[:3]] == snapshot
        assert [e.revision for e in conversation.documents] == [0, 1, 2]
        assert conversation.get_revision(1).document.context.rows[0]["value"] == "MST"
        assert conversation.latest.document.context.rows[0]["value"] == "PST"

    def test_several_changes_in_one_revision(self, base_document):
        conversation = Conversation.from_document(base_document)
        apply_changes_to_conversation(conversation, lambda doc: (
            update_row(doc, "meaning", 2, {"definition": "ISO 8601 UTC"}),
            insert_row(doc, "context", {"key": "user_timezone", "value": "MST"}),
        ))

        diff = conversation.diffs[0].diff
        assert conversation.document_count == 2
        assert {str(f.facet) for f in diff.changed_facets()} == {"meaning", "context"}

    def test_no_op_mutation_still_appends(self, base_document):
        conversation = Conversation.from_document(base_document)
        apply_changes_to_conversation(conversation, lambda doc: None)

        assert conversation.document_count == 2
        assert conversation.diffs[0].diff.is_identical

    def test_empty_conversation(self):
        with pytest.raises(EmptyConversationError):
            apply_changes_to_conversation(Conversation(), lambda doc: None)

    def test_table_change_rejected(self, base_document):
        conversation = Conversation.from_document(base_document)
        with pytest.raises(DatasetMismatchError):
            apply_changes_to_conversation(
                conversation,
                lambda doc: update_row(doc, "table", 1, {"amount": "0"}),
            )
        assert len(conversation) == 1
        assert conversation.latest.document.table.rows[0]["amount"] == "100.50"

    def test_failed_mutation_leaves_conversation_untouched(self, base_document):
        conversation = Conversation.from_document(base_document)
        before = conversation.model_dump()

        def mutate(doc):
            insert_row(doc, "context", {"key": "a", "value": "b"})
            update_row(doc, "tasks", 1, {"name": "x"})

        with pytest.raises(RowIndexError):
            apply_changes_to_conversation(conversation, mutate)
        assert conversation.model_dump() == before

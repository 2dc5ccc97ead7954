"""Tests for the document model: facets, documents and conversations."""
import pytest

from tql.document import (
    Conversation,
    DiffEntry,
    Document,
    DocumentEntry,
    FacetName,
    SEMANTIC_FACETS,
    schema_columns,
)
from tql.errors import UnknownFacetError
from tql.operations import insert_row


class TestFacetName:

    def test_rendering_order(self):
        assert [f.value for f in FacetName] == [
            "table", "meaning", "structure", "ambiguity", "intent",
            "context", "query", "tasks", "score",
        ]

    def test_parse_accepts_prefix_and_case(self):
        assert FacetName.parse("@Meaning") is FacetName.MEANING
        assert FacetName.parse(FacetName.SCORE) is FacetName.SCORE

    def test_data_is_alias_for_table(self):
        assert FacetName.parse("data") is FacetName.TABLE

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownFacetError, match="bogus"):
            FacetName.parse("bogus")

    def test_semantic_facets_exclude_table(self):
        assert FacetName.TABLE not in SEMANTIC_FACETS
        assert len(SEMANTIC_FACETS) == 8

    def test_schema_columns_drop_index(self):
        assert schema_columns(FacetName.CONTEXT) == ("key", "value")
        assert schema_columns(FacetName.STRUCTURE) == (
            "column", "nullAllowed", "dataType", "minValue", "maxValue", "format",
        )

    def test_table_has_no_schema(self):
        with pytest.raises(ValueError):
            schema_columns(FacetName.TABLE)


class TestDocument:

    def test_new_document_has_all_facets_empty(self):
        doc = Document()
        counts = doc.row_counts()
        assert list(counts) == [f.value for f in FacetName]
        assert all(count == 0 for count in counts.values())

    def test_facet_lookup(self):
        doc = Document()
        assert doc.facet("meaning") is doc.meaning
        assert doc.facet(FacetName.TASKS) is doc.tasks
        assert doc.facet("data") is doc.table

    def test_facet_lookup_unknown(self):
        with pytest.raises(UnknownFacetError):
            Document().facet("nope")

    def test_table_columns_follow_first_row(self, widget_document):
        assert widget_document.columns("table") == ["id", "product", "price"]
        assert Document().columns("table") == []

    def test_clone_is_independent(self, widget_document):
        clone = widget_document.clone()
        clone.table.rows[0]["price"] = "1.00"
        clone.context.rows.append({"key": "k", "value": "v"})

        assert widget_document.table.rows[0]["price"] == "9.99"
        assert widget_document.context.rows == []

    def test_clone_is_equal(self, base_document):
        assert base_document.clone().model_dump() == base_document.model_dump()

    def test_row_at(self, widget_document):
        assert widget_document.table.row_at(1) == {"id": "1", "product": "Widget", "price": "9.99"}
        assert widget_document.table.row_at(0) is None
        assert widget_document.table.row_at(2) is None


class TestConversation:

    def test_from_document(self, widget_document):
        conversation = Conversation.from_document(widget_document)
        assert conversation.document_count == 1
        assert conversation.latest.revision == 0
        assert conversation.latest.document.model_dump() == widget_document.model_dump()

    def test_from_document_owns_its_copy(self, widget_document):
        first = Conversation.from_document(widget_document)
        second = Conversation.from_document(widget_document)

        insert_row(widget_document, "context", {"key": "tz", "value": "MST"})
        insert_row(first.latest.document, "context", {"key": "tz", "value": "PST"})

        assert first.latest.document is not widget_document
        assert first.latest.document.context.rows == [{"key": "tz", "value": "PST"}]
        assert second.latest.document.context.is_empty

    def test_latest_skips_trailing_diff(self, widget_document):
        conversation = Conversation.from_document(widget_document)
        conversation.append(DiffEntry(from_revision=0, to_revision=1, body="## Diff"))
        assert conversation.latest.revision == 0
        assert len(conversation) == 2
        assert len(conversation.diffs) == 1

    def test_get_revision(self, widget_document):
        conversation = Conversation(entries=[
            DocumentEntry(revision=0, document=widget_document),
            DocumentEntry(revision=1, document=widget_document.clone()),
        ])
        assert conversation.get_revision(1).revision == 1
        with pytest.raises(KeyError):
            conversation.get_revision(5)

    def test_entry_headers(self):
        assert DocumentEntry(revision=3, document=Document()).header == "#document[+3]:"
        assert DiffEntry(from_revision=2, to_revision=3).header == "$diff[+2→+3]:"

    def test_entries_validate_from_dict(self):
        conversation = Conversation.model_validate({
            "entries": [
                {"kind": "document", "revision": 0, "document": {}},
                {"kind": "diff", "from_revision": 0, "to_revision": 1, "body": "x"},
            ]
        })
        assert isinstance(conversation.entries[0], DocumentEntry)
        assert isinstance(conversation.entries[1], DiffEntry)

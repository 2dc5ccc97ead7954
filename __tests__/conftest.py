import pytest

from tql import Document, insert_row
from tql.sources import TableData, create_document


@pytest.fixture
def table_data():
    return TableData(
        headers=["id", "timestamp", "amount", "currency"],
        rows=[
            ["1", "2024-01-01T10:00:00Z", "100.50", "USDC"],
            ["2", "2024-01-01T11:30:00Z", "2500", "USDT"],
            ["3", "2024-01-02T09:15:00Z", "75.25", "USDC"],
        ],
    )


@pytest.fixture
def base_document(table_data) -> Document:
    return create_document(table_data, query="How much was transferred yesterday?")


@pytest.fixture
def widget_document() -> Document:
    doc = Document()
    insert_row(doc, "table", {"id": "1", "product": "Widget", "price": "9.99"})
    return doc

import json

import pytest

from tql.cli import build_parser, main
from tql.format import read_conversation


CSV = """id,timestamp,amount,currency
1,2024-01-01T10:00:00Z,100.50,USDC
2,2024-01-01T11:30:00Z,2500,USDT
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TQL_COLOR", "TQL_ENCODING", "TQL_LOG_LEVEL", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "transfers.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


@pytest.fixture
def tql_file(csv_file):
    assert main(["create", "--in", str(csv_file), "--query", "How much was transferred yesterday?"]) == 0
    return csv_file.with_suffix(".tql")


class TestCreate:

    def test_default_output_next_to_input(self, csv_file, capsys):
        assert main(["create", "--in", str(csv_file)]) == 0

        out = capsys.readouterr().out
        path = csv_file.with_suffix(".tql")
        assert path.exists()
        assert f"Created {path}" in out
        assert "Data rows: 2" in out
        assert "Columns: 4" in out

        conversation = read_conversation(path)
        assert conversation.document_count == 1
        assert len(conversation.latest.document.table) == 2

    def test_stdout(self, csv_file, capsys):
        assert main(["create", "--in", str(csv_file), "--out", "-"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("#conversation[1]:")
        assert "@meaning[4]:" in out

    def test_json_format(self, csv_file, tmp_path):
        out = tmp_path / "out.json"
        assert main(["create", "--in", str(csv_file), "--out", str(out), "--format", "json",
                     "--query", "Totals?"]) == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        document = data["entries"][0]["document"]
        assert document["query"]["rows"][0]["user_message"] == "Totals?"

    def test_missing_input(self, tmp_path, capsys):
        assert main(["create", "--in", str(tmp_path / "missing.csv")]) == 1
        assert "missing.csv" in capsys.readouterr().err


class TestRowCommands:

    def test_update(self, tql_file, capsys):
        code = main(["update", "--file", str(tql_file), "-f", "meaning", "-i", "2",
                     "-d", '{"definition": "ISO 8601 UTC"}'])

        assert code == 0
        assert "Updated row 2 in @meaning" in capsys.readouterr().out
        conversation = read_conversation(tql_file)
        assert conversation.document_count == 2
        assert conversation.latest.document.meaning.rows[1]["definition"] == "ISO 8601 UTC"

    def test_insert(self, tql_file, capsys):
        code = main(["insert", "--file", str(tql_file), "-f", "context",
                     "-d", '{"key": "user_timezone", "value": "MST"}'])

        assert code == 0
        assert "Inserted row 1 into @context" in capsys.readouterr().out

    def test_delete_indices(self, tql_file, capsys):
        assert main(["delete", "--file", str(tql_file), "-f", "score", "--indices", "1,3"]) == 0
        assert "Deleted 2 rows from @score" in capsys.readouterr().out

        scores = read_conversation(tql_file).latest.document.score.rows
        assert [r["measure"] for r in scores] == ["number-of-interpretations", "Missing Certainty Ratio"]

    def test_out_of_range_is_reported(self, tql_file, capsys):
        code = main(["update", "--file", str(tql_file), "-f", "score", "-i", "9", "-d", '{"value": "1"}'])

        assert code == 1
        assert "Error: Row index 9 out of range for @score" in capsys.readouterr().err
        assert read_conversation(tql_file).document_count == 1

    @pytest.mark.parametrize("data", ["not json", '["a"]', '{"value": 1}'])
    def test_bad_data(self, tql_file, capsys, data):
        assert main(["update", "--file", str(tql_file), "-f", "score", "-i", "1", "-d", data]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_bad_indices(self, tql_file, capsys):
        assert main(["delete", "--file", str(tql_file), "-f", "score", "--indices", "1,x"]) == 1
        assert "Invalid indices format" in capsys.readouterr().err

    def test_unknown_facet_rejected_by_parser(self, tql_file):
        with pytest.raises(SystemExit):
            main(["insert", "--file", str(tql_file), "-f", "colours", "-d", "{}"])


class TestDiffAndShow:

    def test_diff_latest(self, tql_file, capsys):
        main(["update", "--file", str(tql_file), "-f", "meaning", "-i", "2",
              "-d", '{"definition": "ISO 8601 UTC"}'])
        capsys.readouterr()

        assert main(["diff", "--file", str(tql_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("$diff[+0→+1]:\n## Diff")
        assert "### @meaning (modified, 4 → 4 rows)" in out
        assert "\033[" not in out

    def test_diff_json(self, tql_file, capsys):
        main(["insert", "--file", str(tql_file), "-f", "context", "-d", '{"key": "k", "value": "v"}'])
        capsys.readouterr()

        assert main(["diff", "--file", str(tql_file), "--from", "0", "--to", "1", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert (data["from"], data["to"]) == (0, 1)
        assert data["summary"]["rows_added"] == 1

    def test_diff_single_revision(self, tql_file, capsys):
        assert main(["diff", "--file", str(tql_file)]) == 0
        assert "No changes" in capsys.readouterr().out

    def test_diff_missing_revision(self, tql_file, capsys):
        assert main(["diff", "--file", str(tql_file), "--from", "0", "--to", "5"]) == 1
        assert "Revision +5 not found" in capsys.readouterr().err

    def test_show_revision_json(self, tql_file, capsys):
        assert main(["show", "--file", str(tql_file), "--revision", "0", "--json"]) == 0
        document = json.loads(capsys.readouterr().out)
        assert len(document["table"]["rows"]) == 2

    def test_show_conversation(self, tql_file, capsys):
        assert main(["show", "--file", str(tql_file)]) == 0
        assert capsys.readouterr().out.rstrip("\n") == tql_file.read_text(encoding="utf-8")


def test_parser_accepts_data_alias():
    args = build_parser().parse_args(["insert", "--file", "x.tql", "-f", "data", "-d", "{}"])
    assert args.facet == "data"

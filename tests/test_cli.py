# ==============================================
# Tests for the CLI and text rendering
# ==============================================

import json
from unittest.mock import patch

import pytest

from field_insights import cli
from field_insights.aggregation import ValueEntry
from field_insights.errors import ExportError, FieldInsightsError
from field_insights.render import (
    EMPTY_MESSAGE,
    progress_bar,
    render_dashboard,
    render_field_card,
    render_remaining_entry,
    render_top_entry,
)


@pytest.fixture
def records_file(tmp_path, sample_records):
    path = tmp_path / "records.json"
    path.write_text(json.dumps({"data": sample_records}), encoding="utf-8")
    return path


class TestRender:

    def test_progress_bar(self):
        assert progress_bar(0.0, width=10) == ".........."
        assert progress_bar(50.0, width=10) == "#####....."
        assert progress_bar(100.0, width=10) == "##########"
        assert progress_bar(250.0, width=10) == "##########"

    def test_entries(self):
        entry = ValueEntry(label="Open", count=2, percentage="66.7", rank=1)
        assert render_top_entry(entry, width=3).splitlines() == [
            "  [1] Open  2 (66.7%)",
            "      ##.",
        ]
        assert render_remaining_entry(entry) == "  1. Open  2 (66.7%)"

    def test_card_collapsed_mentions_hidden_values(self):
        card = {
            "field": "Stage",
            "total_entries": 5,
            "top_values": [ValueEntry("Won", 3, "60.0", 1)],
            "remaining_values": [],
            "hidden_values": 2,
            "expanded": False,
        }
        text = render_field_card(card)
        assert text.splitlines()[0] == "Stage"
        assert "Total entries: 5" in text
        assert "2 more value(s)" in text

    def test_card_expanded_lists_remaining(self):
        card = {
            "field": "Stage",
            "total_entries": 5,
            "top_values": [ValueEntry("Won", 3, "60.0", 1)],
            "remaining_values": [ValueEntry("Lost", 2, "40.0", 2)],
            "hidden_values": 0,
            "expanded": True,
        }
        assert "  2. Lost  2 (40.0%)" in render_field_card(card).splitlines()

    def test_empty_dashboard(self):
        assert render_dashboard([]) == EMPTY_MESSAGE


class TestLoadRecordsFile:

    def test_export_payload_shape(self, records_file, sample_records):
        assert cli.load_records_file(records_file) == sample_records

    def test_bare_list(self, tmp_path, status_records):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps(status_records), encoding="utf-8")
        assert cli.load_records_file(path) == status_records

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps({"rows": []}), encoding="utf-8")
        with pytest.raises(FieldInsightsError):
            cli.load_records_file(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(FieldInsightsError):
            cli.load_records_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FieldInsightsError):
            cli.load_records_file(tmp_path / "absent.json")


class TestMain:

    def test_report_text(self, records_file, capsys):
        assert cli.main(["report", str(records_file)]) == 0

        out = capsys.readouterr().out
        assert "✓ Export completed: 5 records" in out
        assert "Owner" in out
        assert "[1] Ana  3 (60.0%)" in out
        assert "Id" not in out.split()

    def test_report_json(self, records_file, capsys):
        assert cli.main(["report", str(records_file), "--json", "--field", "Stage"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert list(data) == ["Stage"]
        assert data["Stage"]["totalEntries"] == 5
        assert data["Stage"]["allValues"][0] == {
            "label": "Won", "count": 3, "percentage": "60.0", "rank": 1,
        }
        assert data["Stage"]["chart"]["labels"] == ["Won", "Lost", "Open"]

    def test_report_expand(self, tmp_path, capsys):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([{"F": v} for v in "aabbccdde"]), encoding="utf-8")

        assert cli.main(["report", str(path), "--expand", "F"]) == 0

        out = capsys.readouterr().out
        assert "  5. e  1 (11.1%)" in out

    def test_report_unknown_field_warns(self, records_file, capsys):
        assert cli.main(["report", str(records_file), "--field", "Nope"]) == 0
        assert "Unknown field: Nope" in capsys.readouterr().err

    def test_report_bad_file(self, tmp_path, capsys):
        assert cli.main(["report", str(tmp_path / "absent.json")]) == 1
        assert "✗ Error" in capsys.readouterr().err

    def test_export_success(self, capsys, status_records):
        with patch("field_insights.dashboard.ExportClient.fetch_all", return_value=status_records) as fetch_all:
            assert cli.main(["export", "--path", "/a", "--path", "/b"]) == 0

        fetch_all.assert_called_once_with(["/a", "/b"])
        assert "[1] Open  2 (66.7%)" in capsys.readouterr().out

    def test_export_failure(self, capsys):
        with patch("field_insights.dashboard.ExportClient.fetch_all",
                   side_effect=ExportError("Request failed: 503")):
            assert cli.main(["export"]) == 1

        assert "✗ Error: Request failed: 503" in capsys.readouterr().err

    def test_bad_config(self, monkeypatch, records_file, capsys):
        monkeypatch.setenv("INSIGHT_TOP_N", "many")
        assert cli.main(["report", str(records_file)]) == 1
        assert "INSIGHT_TOP_N" in capsys.readouterr().err

    def test_log_level_option_case_insensitive(self, records_file):
        with patch("field_insights.cli.set_level") as set_level:
            assert cli.main(["--log-level", "debug", "report", str(records_file)]) == 0
        set_level.assert_called_once_with("DEBUG")

    def test_unknown_log_level_rejected(self, records_file, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--log-level", "chatty", "report", str(records_file)])
        assert exc_info.value.code == 2
        assert "--log-level" in capsys.readouterr().err

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])

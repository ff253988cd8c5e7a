"""
End-to-end tests for the typer CLI against a temporary file-backed store.
"""

from __future__ import annotations

import csv
import json
import re
from pathlib import Path

from typer.testing import CliRunner

from croptracker.main import app
from croptracker.seed import SAMPLE_CROPS

runner = CliRunner()

ID_PATTERN = re.compile(r"id ([0-9a-f-]{36})")


def _add(*extra: str) -> str:
    result = runner.invoke(
        app,
        ["add", "--name", "Rice", "--planted", "2024-05-15", "--acreage", "1.5", "--expenses", "30000", *extra],
    )
    assert result.exit_code == 0, result.output
    match = ID_PATTERN.search(result.output)
    assert match, result.output
    return match.group(1)


def _slot(data_dir: Path) -> list:
    return json.loads((data_dir / "crop_tracker_data.json").read_text(encoding="utf-8"))


class TestCrudCommands:
    def test_add_persists_record(self, cli_env: Path):
        record_id = _add("--notes", "lowland plot")
        payload = _slot(cli_env)
        assert payload[0]["id"] == record_id
        assert payload[0]["notes"] == "lowland plot"
        assert payload[0]["confirmed"] is False

    def test_add_rejects_non_positive_acreage(self, cli_env: Path):
        result = runner.invoke(
            app, ["add", "-n", "Rice", "-d", "2024-05-15", "-a", "0", "-e", "10"]
        )
        assert result.exit_code == 1
        assert "acreage" in result.output
        assert not (cli_env / "crop_tracker_data.json").exists()

    def test_update_changes_only_supplied_fields(self, cli_env: Path):
        record_id = _add()
        result = runner.invoke(app, ["update", record_id, "--expenses", "35000", "--confirmed"])
        assert result.exit_code == 0, result.output
        record = _slot(cli_env)[0]
        assert record["expenses"] == 35000
        assert record["acreage"] == 1.5
        assert record["confirmed"] is True

    def test_update_unknown_id_fails(self, cli_env: Path):
        result = runner.invoke(app, ["update", "missing", "--notes", "x"])
        assert result.exit_code == 1
        assert "No crop record" in result.output

    def test_delete_with_yes(self, cli_env: Path):
        record_id = _add()
        result = runner.invoke(app, ["delete", record_id, "--yes"])
        assert result.exit_code == 0, result.output
        assert _slot(cli_env) == []

    def test_clear_asks_for_confirmation(self, cli_env: Path):
        _add()
        declined = runner.invoke(app, ["clear"], input="n\n")
        assert declined.exit_code != 0
        assert len(_slot(cli_env)) == 1

        accepted = runner.invoke(app, ["clear"], input="y\n")
        assert accepted.exit_code == 0
        assert not (cli_env / "crop_tracker_data.json").exists()


class TestViewsAndExports:
    def test_list_filters_by_search(self, cli_env: Path):
        assert runner.invoke(app, ["seed", "--yes"]).exit_code == 0
        result = runner.invoke(app, ["list", "--search", "rice"])
        assert result.exit_code == 0, result.output
        assert "Crop Records (1)" in result.output
        assert "Showing 1 to 1 of 1 results" in result.output

    def test_list_status_and_pagination(self, cli_env: Path):
        runner.invoke(app, ["seed", "--yes"])
        result = runner.invoke(app, ["list", "--status", "confirmed", "--page-size", "2", "--page", "2"])
        assert result.exit_code == 0, result.output
        confirmed = sum(1 for crop in SAMPLE_CROPS if crop.confirmed)
        assert f"Showing 3 to 4 of {confirmed} results" in result.output

    def test_stats_dashboard(self, cli_env: Path):
        _add("--confirmed")
        result = runner.invoke(app, ["stats"])
        assert result.exit_code == 0, result.output
        assert "₦30,000" in result.output
        assert "100% confirmed" in result.output

    def test_export_csv_writes_file(self, cli_env: Path, tmp_path: Path):
        runner.invoke(app, ["seed", "--yes"])
        target = tmp_path / "out.csv"
        result = runner.invoke(app, ["export-csv", "--output", str(target)])
        assert result.exit_code == 0, result.output
        with target.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0][0] == "Crop Name"
        assert len(rows) == 1 + len(SAMPLE_CROPS)

    def test_report_to_file(self, cli_env: Path, tmp_path: Path):
        _add()
        target = tmp_path / "report.txt"
        result = runner.invoke(app, ["report", "--output", str(target)])
        assert result.exit_code == 0, result.output
        text = target.read_text(encoding="utf-8")
        assert "Crop Yield & Expense Report" in text
        assert "Rice" in text

    def test_info_shows_backend(self, cli_env: Path):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "backend=file" in result.output

"""Tests for the mentionkit command line interface."""

import json

import pytest
from typer.testing import CliRunner

from mentionkit.main import cli

runner = CliRunner()


@pytest.fixture
def items_file(tmp_path, people_items):
    path = tmp_path / "items.json"
    path.write_text(json.dumps(people_items))
    return path


class TestScanCommand:
    def test_scan_lists_suggestions(self, items_file):
        result = runner.invoke(cli, ["scan", "ping @jo", "--items", str(items_file)])

        assert result.exit_code == 0
        assert "Johanna" in result.stdout
        assert "John Doe" in result.stdout

    def test_scan_without_trigger(self, items_file):
        result = runner.invoke(cli, ["scan", "plain text", "--items", str(items_file)])

        assert result.exit_code == 0
        assert "No active mention trigger" in result.stdout

    def test_scan_with_config(self, items_file, tmp_path):
        config = tmp_path / "mentions.json"
        config.write_text(json.dumps({"creatable": {"#": True}}))

        result = runner.invoke(
            cli, ["scan", "#urgent", "--items", str(items_file), "--config", str(config)]
        )

        assert result.exit_code == 0
        assert "creatable" in result.stdout

    def test_scan_reports_configuration_errors(self, items_file, tmp_path):
        config = tmp_path / "mentions.json"
        config.write_text(json.dumps({"combobox": True, "insert_on_blur": False}))

        result = runner.invoke(
            cli, ["scan", "@a", "--items", str(items_file), "--config", str(config)]
        )

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_scan_missing_items_file(self, tmp_path):
        result = runner.invoke(cli, ["scan", "@a", "--items", str(tmp_path / "none.json")])

        assert result.exit_code == 1

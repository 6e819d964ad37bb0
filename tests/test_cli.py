"""
Tests for the command-line interface.

Runs main() in-process against a temporary CSV file.
"""

import json

import pytest

from src.cli.main import create_parser, main

from conftest import zigzag_bars


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "range.csv"
    lines = ["time,open,high,low,close,volume"]
    for bar in zigzag_bars([100, 106, 100, 106, 100, 106, 100]):
        lines.append(f"{bar.time},{bar.open},{bar.high},{bar.low},{bar.close},{bar.volume}")
    path.write_text("\n".join(lines) + "\n")
    return str(path)


class TestParser:

    def test_analyze_defaults(self):
        args = create_parser().parse_args(["analyze", "data.csv"])

        assert args.command == "analyze"
        assert args.min_stroke_bars == 5
        assert args.min_zone_strokes == 3
        assert args.merge_rule == "extremum"
        assert args.merge_direction == "trend"
        assert args.strategy == "dynamic"
        assert not args.json

    def test_unknown_strategy_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["analyze", "data.csv", "--strategy", "rolling"])


class TestCommands:

    def test_no_command_returns_error(self, capsys):
        assert main([]) == 1

    def test_analyze_prints_summary(self, csv_path, capsys):
        assert main(["analyze", csv_path]) == 0

        out = capsys.readouterr().out
        assert "Strokes:         4" in out
        assert "Zones (dynamic): 1 (1 valid)" in out

    def test_analyze_json(self, csv_path, capsys):
        assert main(["analyze", csv_path, "--strategy", "static", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["stroke_count"] == 4
        assert data["zones"][0]["strategy"] == "static"

    def test_compare_json(self, csv_path, capsys):
        assert main(["compare", csv_path, "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data == {"static_zones": 1, "dynamic_zones": 1, "agree": True}

    def test_merge_direction_option(self, csv_path, capsys):
        assert main(["analyze", csv_path, "--merge-direction", "incoming", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["config"]["merge_direction"] == "incoming"

    def test_missing_file_returns_error(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "missing.csv")]) == 1

        assert "Error:" in capsys.readouterr().out

    def test_invalid_threshold_returns_error(self, csv_path, capsys):
        assert main(["analyze", csv_path, "--min-stroke-bars", "0"]) == 1

"""
Tests for the command-line entry point.
"""

import json
import os

import cli

DEFAULT_CONFIG = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs", "default.yaml"
)


def test_regions_command(tmp_path, capsys):
    output = tmp_path / "regions.json"
    code = cli.main(["regions", "--population", "41100000", "--year", "2024",
                     "--output", str(output)])
    assert code == 0
    assert "Regional split" in capsys.readouterr().out

    regions = json.loads(output.read_text(encoding="utf-8"))
    assert len(regions) == 26
    assert regions[0]["year"] == 2024


def test_forecast_from_config_offline(tmp_path):
    output = tmp_path / "out" / "forecast.json"
    code = cli.main(["forecast", "--config", DEFAULT_CONFIG, "--offline", "--seed", "7",
                     "--trace", "--output", str(output)])
    assert code == 0

    body = json.loads(output.read_text(encoding="utf-8"))
    assert body["data"][-1]["year"] == 2035
    assert len(body["trace"]) == 12
    assert body["swingInputs"]["internationalSupport"] == 0.6
    assert body["swingMetadata"]["policyImpacts"][0]["label"] == "Стабілізаційна місія"


def test_dial_flags_override_config_dials(tmp_path):
    output = tmp_path / "forecast.json"
    code = cli.main(["forecast", "--config", DEFAULT_CONFIG, "--offline", "--seed", "7",
                     "--support", "0.9", "--output", str(output)])
    assert code == 0
    body = json.loads(output.read_text(encoding="utf-8"))
    assert body["swingInputs"]["internationalSupport"] == 0.9
    assert len(body["swingInputs"]["shockEvents"]) == 1


def test_forecast_from_flags(capsys):
    code = cli.main(["forecast", "--offline", "--seed", "1", "--target-year", "2027",
                     "--conflict", "peace"])
    assert code == 0
    assert "Predicted population for 2027" in capsys.readouterr().out


def test_sensitivity_command(capsys):
    code = cli.main(["sensitivity", "--config", DEFAULT_CONFIG, "--offline", "--seed", "3"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Baseline:" in out
    assert "International support" in out


def test_errors_return_exit_code_2(tmp_path):
    assert cli.main(["forecast", "--config", str(tmp_path / "missing.yaml")]) == 2
    assert cli.main(["forecast", "--offline", "--base-year", "2030",
                     "--target-year", "2030"]) == 2


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "population-engine" in capsys.readouterr().out


def test_dial_flags_keep_conflict_geopolitics(tmp_path):
    output = tmp_path / "forecast.json"
    code = cli.main(["forecast", "--offline", "--seed", "2", "--conflict", "war",
                     "--support", "0.9", "--output", str(output)])
    assert code == 0
    swing = json.loads(output.read_text(encoding="utf-8"))["swingInputs"]
    assert swing["geopoliticalIndex"] == -0.9
    assert swing["internationalSupport"] == 0.9

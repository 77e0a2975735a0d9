"""Tests for the command-line entry point."""

import json
import os

import main


def test_normal_command_prints_rounded_points(capsys):
    assert main.main(["normal", "--mean", "0", "--std-dev", "1"]) == 0

    points = json.loads(capsys.readouterr().out)
    assert len(points) == 200
    assert points[0]["x"] == -4.0
    assert points[-1]["x"] == 4.0


def test_poisson_command(capsys):
    assert main.main(["poisson", "--lambda", "3"]) == 0
    points = json.loads(capsys.readouterr().out)
    assert [p["x"] for p in points] == list(range(10))


def test_ttest_command_saves_result(capsys, tmp_path):
    argv = ["ttest", "--sample", "85", "92", "78", "96", "83", "89", "94", "87", "91", "88"]
    argv += ["--mu", "85", "--save", "--outdir", str(tmp_path), "--description", "exam"]
    assert main.main(argv) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["sampleSize"] == 10
    assert payload["rejectNull"] is False

    saved = os.listdir(tmp_path / "hypothesis")
    assert len([f for f in saved if f.endswith(".json")]) == 1


def test_regression_command(capsys):
    assert main.main(["regression", "--x", "1", "2", "3", "4", "5", "--y", "2", "4", "6", "8", "10"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["equation"] == "y = 2.0000x + 0.0000"
    assert payload["rSquared"] == 1.0


def test_engine_errors_exit_with_code_two(capsys):
    assert main.main(["regression", "--x", "1", "1", "1", "--y", "1", "2", "3"]) == 2
    assert "identical" in capsys.readouterr().err

    assert main.main(["ttest", "--sample", "5", "--mu", "1"]) == 2
    assert "at least 2" in capsys.readouterr().err

    assert main.main(["ttest", "--sample", "1", "2", "3", "--mu", "1", "--test-kind", "z-test"]) == 2
    assert "not implemented" in capsys.readouterr().err

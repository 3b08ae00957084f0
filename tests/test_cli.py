# tests/test_cli.py

import json

import pytest
from typer.testing import CliRunner

from conftest import wf
from dupflow.cli import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _args(workflows_path, *extra):
    return ["validate", "--input", str(workflows_path), *extra]


def test_clean_run_writes_report_and_default_config(workspace):
    src = _write(workspace / "wfs.json", [wf("1", "(A-B-001) x"), wf("2", "(A-B-002) y")])

    result = runner.invoke(app, _args(src))

    assert result.exit_code == 0, result.output
    assert "Validation passed" in result.output
    assert (workspace / ".jana" / "config.json").exists()
    report = json.loads((workspace / ".jana" / "logs" / "validation.log").read_text(encoding="utf-8"))
    assert report["totalWorkflows"] == 2
    assert report["duplicatesFound"] == 0


def test_duplicates_exit_1_and_persist_report(workspace):
    src = _write(workspace / "wfs.json", [wf("wf-1", "(ERR-OUT-001) A"), wf("wf-2", "(ERR-OUT-001) B")])
    out = workspace / "reports" / "validation.json"
    csv = workspace / "reports" / "dups.csv"

    result = runner.invoke(app, _args(src, "--output", str(out), "--csv", str(csv)))

    assert result.exit_code == 1, result.output
    assert "(ERR-OUT-002)" in result.output
    report = json.loads(out.read_text(encoding="utf-8"))
    assert report["duplicates"][0]["n8nIDs"] == ["wf-1", "wf-2"]
    assert csv.exists()


def test_skip_validation_exits_0(workspace):
    src = _write(workspace / "wfs.json", [wf("1", "(A-B-001)"), wf("2", "(A-B-001)")])

    result = runner.invoke(app, _args(src, "--skip-validation", "--compact"))

    assert result.exit_code == 0, result.output
    assert "Found ID (A-B-001) in 2 workflows. Suggestion: (A-B-002)" in result.output


def test_non_strict_config_does_not_fail(workspace):
    cfg = _write(workspace / "cfg.json", {"validation": {"strict": False}})
    src = _write(workspace / "wfs.json", [wf("1", "(A-B-001)"), wf("2", "(A-B-001)")])

    result = runner.invoke(app, _args(src, "--config", str(cfg)))
    assert result.exit_code == 0, result.output


def test_tag_filter(workspace):
    src = _write(
        workspace / "wfs.json",
        [wf("1", "(A-B-001)", tags=["prod"]), wf("2", "(A-B-001)", tags=["dev"])],
    )
    result = runner.invoke(app, _args(src, "--tag", "prod"))
    assert result.exit_code == 0, result.output
    assert "1 workflow(s) tagged 'prod'" in result.output


def test_config_error_exit_3(workspace):
    cfg = _write(workspace / "cfg.json", {"validation": {"idPattern": "([A-Z"}})
    src = _write(workspace / "wfs.json", [])

    result = runner.invoke(app, _args(src, "--config", str(cfg)))

    assert result.exit_code == 3
    assert "Invalid ID pattern" in result.output


def test_unreadable_input_exit_2(workspace):
    src = workspace / "broken.json"
    src.write_text("{nope", encoding="utf-8")

    result = runner.invoke(app, _args(src))
    assert result.exit_code == 2


def test_report_command(workspace):
    src = _write(workspace / "wfs.json", [wf("1", "(A-B-001)"), wf("2", "(A-B-001)")])
    runner.invoke(app, _args(src))

    result = runner.invoke(app, ["report"])
    assert result.exit_code == 0, result.output
    assert "Duplicates found: 1" in result.output
    assert "(A-B-001)" in result.output


def test_report_command_missing(workspace):
    result = runner.invoke(app, ["report", "--path", str(workspace / "nothing.json")])
    assert result.exit_code == 1

# tests/test_service.py

import time
from datetime import datetime

import pytest

from conftest import wf
from dupflow.errors import EXIT_VALIDATION_ERROR, ValidationError
from dupflow.service import WorkflowValidationService


@pytest.fixture
def service(config, mock_logger):
    return WorkflowValidationService(config, logger=mock_logger)


def _context(call):
    return call.kwargs["extra"]["context"]


def test_scenario_duplicate_pair_raises(service, mock_logger):
    workflows = [wf("wf-1", "(ERR-OUT-001) Handler A"), wf("wf-2", "(ERR-OUT-001) Handler B")]

    with pytest.raises(ValidationError) as exc:
        service.validate_workflows(workflows)

    assert exc.value.duplicates == [
        {
            "internalID": "(ERR-OUT-001)",
            "n8nIDs": ["wf-1", "wf-2"],
            "count": 2,
            "suggestions": ["(ERR-OUT-002)"],
        }
    ]
    assert exc.value.exit_code == EXIT_VALIDATION_ERROR
    assert any("(ERR-OUT-001)" in m for m in exc.value.messages)

    mock_logger.error.assert_called_once()
    ctx = _context(mock_logger.error.call_args)
    assert ctx["duplicatesFound"] == 1
    assert ctx["affectedWorkflows"] == 2
    assert "duration_ms" in ctx


def test_gap_suggestion_through_service(service):
    workflows = [
        wf("wf-1", "(ERR-OUT-001) A"),
        wf("wf-2", "(ERR-OUT-001) B"),
        wf("wf-3", "(ERR-OUT-003) C"),
    ]
    with pytest.raises(ValidationError) as exc:
        service.validate_workflows(workflows)
    assert exc.value.duplicates[0]["suggestions"] == ["(ERR-OUT-002)"]


@pytest.mark.parametrize(
    "workflows",
    [
        [],
        [wf("1", "Random Workflow")],
        [wf("1", "(ERR-OUT-001) A"), wf("2", "(ERR-OUT-002) B"), wf("3", "No id")],
    ],
)
def test_no_duplicates_pass_through(service, mock_logger, workflows):
    result = service.validate_workflows(workflows)

    assert result["valid"] is True
    assert result["duplicates"] == []
    assert result["totalWorkflows"] == len(workflows)
    assert isinstance(result["validatedAt"], datetime)
    mock_logger.error.assert_not_called()
    ctx = _context(mock_logger.info.call_args)
    assert ctx["duplicatesFound"] == 0
    assert "duration_ms" in ctx


def test_hundred_unique_workflows_are_fast(service):
    workflows = [wf(f"wf-{i}", f"(ERR-OUT-{i:03d}) Flow {i}") for i in range(100)]
    start = time.perf_counter()
    result = service.validate_workflows(workflows)
    assert result["valid"] is True
    assert time.perf_counter() - start < 1.0


def test_group_of_six(service):
    workflows = [wf(f"wf-{i}", "(ERR-OUT-001) same") for i in range(6)]
    with pytest.raises(ValidationError) as exc:
        service.validate_workflows(workflows)
    dup = exc.value.duplicates[0]
    assert dup["count"] == 6
    assert len(dup["suggestions"]) == 3


def test_non_blocking_returns_report(service, mock_logger):
    workflows = [wf("wf-1", "(ERR-OUT-001) A"), wf("wf-2", "(ERR-OUT-001) B"), wf("wf-3", "x")]
    report = service.validate_workflows_non_blocking(workflows)

    assert report["valid"] is False
    assert report["totalWorkflows"] == 3
    assert report["duplicatesFound"] == 1
    assert report["duplicates"][0]["suggestions"] == ["(ERR-OUT-002)"]
    assert any("❌" in m for m in report["messages"])
    assert report["timestamp"].endswith("Z")
    mock_logger.warning.assert_called()
    mock_logger.error.assert_not_called()


def test_non_blocking_clean(service):
    report = service.validate_workflows_non_blocking([wf("1", "(A-B-001)")])
    assert report["valid"] is True
    assert report["duplicates"] == []
    assert report["messages"] == []


def test_generate_report_has_no_side_effects(service, mock_logger):
    dirty = service.generate_report([wf("1", "(A-B-001)"), wf("2", "(A-B-001)")])
    clean = service.generate_report([wf("1", "(A-B-001)")])

    assert "Duplicates found: 1" in dirty
    assert "(A-B-002)" in dirty
    assert "Duplicates found: 0" in clean
    assert "No duplicates detected" in clean
    assert mock_logger.method_calls == []


def test_max_duplicates_valve(config, mock_logger):
    config["maxDuplicates"] = 1
    service = WorkflowValidationService(config, logger=mock_logger)
    workflows = [
        wf("1", "(A-B-001)"), wf("2", "(A-B-001)"), wf("3", "(A-B-001)"),
        wf("4", "(C-D-001)"), wf("5", "(C-D-001)"),
    ]
    with pytest.raises(ValidationError) as exc:
        service.validate_workflows(workflows)

    dups = exc.value.duplicates
    assert len(dups) == 2
    assert dups[0]["suggestions"] == ["(A-B-002)", "(A-B-003)"]
    assert dups[1]["suggestions"] == []
    assert any("1 more duplicate group(s) omitted" in m for m in exc.value.messages)
    mock_logger.warning.assert_called_once()


def test_validate_dispatches_on_strict(config, mock_logger):
    workflows = [wf("1", "(A-B-001)"), wf("2", "(A-B-001)")]

    with pytest.raises(ValidationError):
        WorkflowValidationService(config, logger=mock_logger).validate(workflows)

    config["strict"] = False
    report = WorkflowValidationService(config, logger=mock_logger).validate(workflows)
    assert report["valid"] is False


def test_default_logger_is_project_child():
    service = WorkflowValidationService()
    assert service.logger.name == "dupflow.service"

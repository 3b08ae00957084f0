#!/usr/bin/env python3
# dupflow/cli.py

import logging
from pathlib import Path
from typing import List, Optional

import typer

from dupflow.config.reader import ConfigReader
from dupflow.config.schema import DEFAULT_CONFIG_PATH
from dupflow.errors import (
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    ConfigurationError,
    ValidationError,
)
from dupflow.reporting.formatter import ErrorMessageFormatter
from dupflow.reporting.report import ValidationReportGenerator
from dupflow.service import WorkflowValidationService
from dupflow.utils.logger import init_logger
from dupflow.workflows import filter_by_tag, load_workflows

app = typer.Typer(help="DupFlow CLI - Detect duplicate internal IDs across n8n workflows")


def _echo_lines(lines: List[str]) -> None:
    for line in lines:
        typer.echo(line)


@app.command()
def validate(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True, help="Workflow export: JSON file or directory of JSON files"),
    config: Path = typer.Option(Path(DEFAULT_CONFIG_PATH), "--config", "-c", help="Config file (created with defaults if missing)"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only validate workflows carrying this tag"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON report here instead of validation.logPath"),
    skip_validation: bool = typer.Option(False, "--skip-validation", help="Report duplicates but exit 0"),
    compact: bool = typer.Option(False, "--compact", help="One line per duplicate group"),
    csv: Optional[Path] = typer.Option(None, "--csv", help="Also export duplicate groups as CSV"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """
    Validate workflows for duplicate internal IDs.
    Exit code 0 = no duplicates (or --skip-validation), 1 = duplicates found,
    2 = unreadable input, 3 = configuration error.
    """
    if verbose:
        init_logger(level=logging.DEBUG)

    try:
        cfg = ConfigReader(config).read()
        service = WorkflowValidationService(cfg)
    except ConfigurationError as e:
        _echo_lines(e.format_user_message())
        raise typer.Exit(code=e.exit_code)

    try:
        workflows = load_workflows(input)
    except (OSError, ValueError) as e:
        typer.echo(f"❌ Could not load workflows from {input}: {e}", err=True)
        raise typer.Exit(code=EXIT_INPUT_ERROR)

    workflows = filter_by_tag(workflows, tag)
    if tag:
        typer.echo(f"[info] {len(workflows)} workflow(s) tagged '{tag}'")

    formatter = ErrorMessageFormatter()
    reports = ValidationReportGenerator(cfg["logPath"])
    report_path = output or Path(cfg["logPath"])

    if skip_validation or not cfg["strict"]:
        result = service.validate_workflows_non_blocking(workflows)
        duplicates = result["duplicates"]
        if duplicates:
            _echo_lines(formatter.format_compact(duplicates) if compact else result["messages"])
            typer.echo("[warn] continuing despite duplicates (non-blocking validation)")
        else:
            _echo_lines(formatter.format_success(result["totalWorkflows"]))
        saved = reports.save_report(result["totalWorkflows"], duplicates, report_path)
        typer.echo(f"[ok] wrote report to {saved}")
        if csv is not None:
            typer.echo(f"[ok] wrote {reports.export_csv(duplicates, csv)}")
        raise typer.Exit(code=EXIT_SUCCESS)

    try:
        result = service.validate_workflows(workflows)
    except ValidationError as e:
        _echo_lines(formatter.format_compact(e.duplicates) if compact else e.messages)
        saved = reports.save_report(len(workflows), e.duplicates, report_path)
        typer.echo(f"[ok] wrote report to {saved}")
        if csv is not None:
            typer.echo(f"[ok] wrote {reports.export_csv(e.duplicates, csv)}")
        raise typer.Exit(code=e.exit_code)

    _echo_lines(formatter.format_success(result["totalWorkflows"]))
    saved = reports.save_report(result["totalWorkflows"], [], report_path)
    typer.echo(f"[ok] wrote report to {saved}")
    if csv is not None:
        typer.echo(f"[ok] wrote {reports.export_csv([], csv)}")


@app.command()
def report(
    path: Optional[Path] = typer.Option(None, "--path", "-p", help="Saved report (default: .jana/logs/validation.log)"),
):
    """
    Print a summary of a previously saved validation report.
    """
    reports = ValidationReportGenerator()
    data = reports.read_report(path)
    if data is None:
        typer.echo(f"❌ No readable report at {path or reports.log_path}", err=True)
        raise typer.Exit(code=1)
    typer.echo(reports.format_report_summary(data))


if __name__ == "__main__":
    app()

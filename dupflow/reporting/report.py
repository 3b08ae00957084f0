# dupflow/reporting/report.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from dupflow.config.schema import DEFAULT_VALIDATION_CONFIG
from dupflow.reporting.formatter import iso_now
from dupflow.utils.io import PathLike, ensure_parent, read_json, to_path, write_json
from dupflow.utils.logger import get_logger

log = get_logger("report")

CSV_COLUMNS = ["internalID", "count", "n8nIDs", "suggestions"]


class ValidationReportGenerator:
    """
    Persists validation results as pretty JSON.
    Each save overwrites the previous report at the same path.
    """

    def __init__(self, log_path: PathLike = DEFAULT_VALIDATION_CONFIG["logPath"]):
        self.log_path = to_path(log_path)

    def create_report(self, total_workflows: int, duplicates: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "timestamp": iso_now(),
            "totalWorkflows": total_workflows,
            "duplicatesFound": len(duplicates),
            "duplicates": duplicates,
        }

    def save(self, report: Dict[str, Any], path: Optional[PathLike] = None) -> Path:
        p = write_json(path or self.log_path, report)
        log.debug("Saved validation report to %s", p)
        return p

    def save_report(
        self,
        total_workflows: int,
        duplicates: List[Dict[str, Any]],
        path: Optional[PathLike] = None,
    ) -> Path:
        return self.save(self.create_report(total_workflows, duplicates), path)

    def save_success(self, total_workflows: int) -> Path:
        return self.save_report(total_workflows, [])

    def save_failure(self, total_workflows: int, duplicates: List[Dict[str, Any]]) -> Path:
        return self.save_report(total_workflows, duplicates)

    def read_report(self, path: Optional[PathLike] = None) -> Optional[Dict[str, Any]]:
        """Load a saved report; None when it is missing or not valid JSON."""
        p = to_path(path or self.log_path)
        if not p.is_file():
            return None
        try:
            data = read_json(p)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log.warning("Could not read validation report %s: %s", p, e)
            return None
        return data if isinstance(data, dict) else None

    def format_report_summary(self, report: Dict[str, Any]) -> str:
        duplicates = report.get("duplicates") or []
        lines = [
            f"Validation report from {report.get('timestamp', 'unknown time')}",
            f"  Total workflows:  {report.get('totalWorkflows', 0)}",
            f"  Duplicates found: {report.get('duplicatesFound', len(duplicates))}",
        ]
        if duplicates:
            lines.append("  Duplicate IDs:")
            for dup in duplicates:
                suggestions = ", ".join(dup.get("suggestions") or []) or "none"
                lines.append(
                    f"    - {dup.get('internalID')} x{dup.get('count')} "
                    f"({', '.join(dup.get('n8nIDs') or [])}) suggestions: {suggestions}"
                )
        else:
            lines.append("  No duplicates.")
        return "\n".join(lines)

    def export_csv(self, duplicates: List[Dict[str, Any]], path: PathLike) -> Path:
        """One row per duplicate group; list columns are joined with ';'."""
        rows = [
            {
                "internalID": d["internalID"],
                "count": d["count"],
                "n8nIDs": ";".join(d["n8nIDs"]),
                "suggestions": ";".join(d.get("suggestions") or []),
            }
            for d in duplicates
        ]
        p = ensure_parent(path)
        pd.DataFrame(rows, columns=CSV_COLUMNS).to_csv(p, index=False)
        return p

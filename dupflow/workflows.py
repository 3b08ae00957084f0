# dupflow/workflows.py
"""
Workflow records for validation, read from n8n exports on disk.

Accepted inputs:
  1) a JSON list of workflows
  2) an n8n API page: {"data": [...], "nextCursor": ...}
  3) a single workflow object (has "id" and "name")
  4) a directory of *.json files, each one of the shapes above
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from dupflow.detection.extractor import tag_names
from dupflow.utils.io import PathLike, list_files, read_json, to_path
from dupflow.utils.logger import get_logger

log = get_logger("workflows")


def _as_workflow_list(data: Any, source: str) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict) and isinstance(data.get("data"), list):
        items = data["data"]
    elif isinstance(data, dict) and "id" in data and "name" in data:
        items = [data]
    else:
        raise ValueError(f"{source} does not look like an n8n workflow export")

    workflows = [w for w in items if isinstance(w, dict)]
    skipped = len(items) - len(workflows)
    if skipped:
        log.warning("Skipped %d non-object entries in %s", skipped, source)
    return workflows


def load_workflows(path: PathLike) -> List[Dict[str, Any]]:
    """Load workflows from a JSON file or a directory of JSON files (sorted by name)."""
    p = to_path(path)
    if p.is_dir():
        workflows: List[Dict[str, Any]] = []
        for fp in list_files(p, "*.json"):
            workflows.extend(_as_workflow_list(read_json(fp), str(fp)))
        return workflows
    return _as_workflow_list(read_json(p), str(p))


def filter_by_tag(workflows: List[Dict[str, Any]], tag: Optional[str]) -> List[Dict[str, Any]]:
    """Keep workflows carrying `tag` (case-insensitive). No tag -> unchanged."""
    if not tag:
        return list(workflows)
    wanted = tag.strip().lower()
    return [
        w for w in workflows
        if any(t.strip().lower() == wanted for t in tag_names(w.get("tags")))
    ]

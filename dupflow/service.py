# dupflow/service.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dupflow.config.schema import DEFAULT_VALIDATION_CONFIG
from dupflow.detection.detector import DuplicateIDDetector
from dupflow.detection.extractor import InternalIDExtractor
from dupflow.detection.suggestions import IDSuggestionEngine
from dupflow.errors import ValidationError
from dupflow.reporting.formatter import ErrorMessageFormatter, iso_now
from dupflow.utils.logger import get_logger


class WorkflowValidationService:
    """
    Orchestrates extraction -> detection -> suggestions -> messages.

    Two entry points share the same pipeline:
      - validate_workflows: raises ValidationError when duplicates exist
      - validate_workflows_non_blocking: always returns a report dict

    `logger` is anything with info/warning/error(msg, *args, extra=...);
    a child of the project logger by default.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, logger: Any = None):
        self.config = {**DEFAULT_VALIDATION_CONFIG, **(config or {})}
        self.extractor = InternalIDExtractor(self.config)
        self.detector = DuplicateIDDetector()
        self.suggestion_engine = IDSuggestionEngine()
        self.formatter = ErrorMessageFormatter()
        self.logger = logger or get_logger("service")

    # ---------- Public API ----------

    def validate(self, workflows: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Blocking when config["strict"] is set, non-blocking otherwise."""
        if self.config.get("strict", True):
            return self.validate_workflows(workflows)
        return self.validate_workflows_non_blocking(workflows)

    def validate_workflows(self, workflows: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Returns {"valid": True, "duplicates": [], "totalWorkflows", "validatedAt"}.
        Raises ValidationError(messages, duplicates) if any internal ID is shared.
        """
        workflows = list(workflows or [])
        start = time.perf_counter()
        self._log("info", "Starting workflow validation", totalWorkflows=len(workflows))

        outcome = self._run(workflows)
        self._log_extraction(outcome["id_map"])
        duration_ms = round((time.perf_counter() - start) * 1000)

        if not outcome["duplicates"]:
            self._log(
                "info",
                "Validation successful - no duplicates found",
                duration_ms=duration_ms,
                totalWorkflows=len(workflows),
                duplicatesFound=0,
            )
            return {
                "valid": True,
                "duplicates": [],
                "totalWorkflows": len(workflows),
                "validatedAt": datetime.now(timezone.utc),
            }

        self._log_truncation(outcome["duplicates"])
        self._log(
            "error",
            "Validation failed - duplicates detected",
            duration_ms=duration_ms,
            totalWorkflows=len(workflows),
            duplicatesFound=len(outcome["duplicates"]),
            affectedWorkflows=self.detector.count_affected_workflows(outcome["duplicates"]),
            duplicates=[{"id": d["internalID"], "count": d["count"]} for d in outcome["duplicates"]],
        )
        raise ValidationError(outcome["messages"], outcome["duplicates"])

    def validate_workflows_non_blocking(self, workflows: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Same pipeline, but duplicates are returned instead of raised."""
        workflows = list(workflows or [])
        start = time.perf_counter()

        outcome = self._run(workflows)
        self._log_extraction(outcome["id_map"])
        duration_ms = round((time.perf_counter() - start) * 1000)

        duplicates = outcome["duplicates"]
        if duplicates:
            self._log_truncation(duplicates)
            self._log(
                "warning",
                "Duplicates detected - continuing (non-blocking validation)",
                duration_ms=duration_ms,
                totalWorkflows=len(workflows),
                duplicatesFound=len(duplicates),
            )
        else:
            self._log(
                "info",
                "Validation successful - no duplicates found",
                duration_ms=duration_ms,
                totalWorkflows=len(workflows),
                duplicatesFound=0,
            )

        return {
            "valid": not duplicates,
            "timestamp": iso_now(),
            "totalWorkflows": len(workflows),
            "duplicatesFound": len(duplicates),
            "duplicates": duplicates,
            "messages": outcome["messages"],
        }

    def generate_report(self, workflows: List[Dict[str, Any]]) -> str:
        """Header plus success banner or duplicate details. No logging, no files."""
        workflows = list(workflows or [])
        outcome = self._run(workflows)
        duplicates = outcome["duplicates"]

        lines = [self.formatter.format_log_header(len(duplicates), len(workflows))]
        if duplicates:
            lines.extend(outcome["messages"])
        else:
            lines.extend(self.formatter.format_success(len(workflows)))
        return "\n".join(lines)

    # ---------- Internals ----------

    def _run(self, workflows: List[Dict[str, Any]]) -> Dict[str, Any]:
        id_map = self.extractor.extract_internal_ids(workflows)
        duplicates = self.detector.find_duplicates(id_map)
        if not duplicates:
            return {"id_map": id_map, "duplicates": [], "messages": []}

        limit = self._limit()
        enriched = self.suggestion_engine.enrich_with_suggestions(duplicates, id_map, limit=limit)
        messages = self.formatter.format(enriched, limit=limit)
        return {"id_map": id_map, "duplicates": enriched, "messages": messages}

    def _limit(self) -> Optional[int]:
        value = self.config.get("maxDuplicates")
        return value if isinstance(value, int) and value > 0 else None

    def _log_extraction(self, id_map: Dict[str, List[str]]) -> None:
        self._log(
            "info",
            "Internal IDs extracted",
            uniqueIDs=len(id_map),
            workflowsWithIDs=sum(len(owners) for owners in id_map.values()),
        )

    def _log_truncation(self, duplicates: List[Dict[str, Any]]) -> None:
        limit = self._limit()
        if limit is not None and len(duplicates) > limit:
            self._log(
                "warning",
                "maxDuplicates reached - remaining groups reported without suggestions",
                maxDuplicates=limit,
                duplicatesFound=len(duplicates),
            )

    def _log(self, level: str, message: str, **context: Any) -> None:
        getattr(self.logger, level)(message, extra={"context": context})

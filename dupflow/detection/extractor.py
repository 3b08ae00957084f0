# dupflow/detection/extractor.py
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from dupflow.config.schema import DEFAULT_ID_PATTERN
from dupflow.errors import InvalidIDPatternError


def tag_names(tags: Any) -> List[str]:
    """
    n8n exports tags either as plain strings or as {"id", "name"} objects.
    Anything else is ignored.
    """
    if not isinstance(tags, (list, tuple)):
        return []
    names: List[str] = []
    for t in tags:
        if isinstance(t, str):
            names.append(t)
        elif isinstance(t, dict) and isinstance(t.get("name"), str):
            names.append(t["name"])
    return names


class InternalIDExtractor:
    """Finds the human-assigned internal ID, e.g. "(ERR-OUT-001)", in a workflow's name or tags."""

    def __init__(self, config: Dict[str, Any]):
        source = (config or {}).get("idPattern") or DEFAULT_ID_PATTERN
        try:
            self._pattern = re.compile(source, re.IGNORECASE)
        except (re.error, TypeError) as e:
            raise InvalidIDPatternError(str(source), str(e)) from e

    @property
    def pattern(self) -> re.Pattern:
        return self._pattern

    def extract_internal_ids(self, workflows: Iterable[Dict[str, Any]]) -> Dict[str, List[str]]:
        """
        Map internal ID -> n8n workflow ids, in input order.
        Workflows without an internal ID are left out.
        """
        id_map: Dict[str, List[str]] = {}
        for wf in workflows or []:
            internal_id = self.extract_single_id(wf)
            if internal_id is None:
                continue
            id_map.setdefault(internal_id, []).append(str(wf.get("id")))
        return id_map

    def extract_single_id(self, workflow: Dict[str, Any]) -> Optional[str]:
        if not isinstance(workflow, dict):
            return None

        # 1) name has priority
        found = self._search(workflow.get("name"))
        if found is None:
            # 2) fallback: all tags as one string
            tags = tag_names(workflow.get("tags"))
            if tags:
                found = self._search(" ".join(tags))

        return self._normalize(found) if found is not None else None

    def _search(self, text: Any) -> Optional[str]:
        if not isinstance(text, str) or not text:
            return None
        m = self._pattern.search(text)
        return m.group(0) if m else None

    @staticmethod
    def _normalize(raw: str) -> str:
        return raw.strip().upper()

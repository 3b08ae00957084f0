# dupflow/detection/suggestions.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Set

# (ERR-OUT-001) -> prefix "ERR-OUT", number "001"
CANONICAL_ID = re.compile(r"\(([A-Z]+-[A-Z]+)-(\d{3})\)")

MAX_NUMBER = 999
MAX_SUGGESTIONS_PER_GROUP = 3


def _format_id(prefix: str, number: int) -> str:
    return f"({prefix}-{number:03d})"


class IDSuggestionEngine:
    """
    Proposes replacement IDs for duplicated internal IDs.

    Candidates are scanned upward from the duplicated number and the first
    one not already in use wins, so a free number between two used ones is
    preferred over extending past the maximum. Numbers stop at 999.
    """

    def suggest_next_id(self, internal_id: str, used_ids: Set[str]) -> Optional[str]:
        m = CANONICAL_ID.search(internal_id or "")
        if not m:
            # custom ID format: nothing to suggest
            return None

        prefix, number = m.group(1), int(m.group(2))
        for candidate_number in range(number + 1, MAX_NUMBER + 1):
            candidate = _format_id(prefix, candidate_number)
            if candidate not in used_ids:
                return candidate
        return None

    def enrich_with_suggestions(
        self,
        duplicates: List[Dict[str, Any]],
        id_map: Dict[str, List[str]],
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Attach up to min(count - 1, 3) suggestions to each duplicate group.

        One working set per call, seeded from every ID in use: a suggestion
        handed out to one group is never handed out again. Groups past
        `limit` are returned with an empty suggestion list.
        """
        used: Set[str] = set(id_map.keys())
        enriched: List[Dict[str, Any]] = []

        for idx, dup in enumerate(duplicates):
            suggestions: List[str] = []
            if limit is None or idx < limit:
                needed = min(dup["count"] - 1, MAX_SUGGESTIONS_PER_GROUP)
                for _ in range(needed):
                    suggestion = self.suggest_next_id(dup["internalID"], used)
                    if suggestion is None:
                        break
                    suggestions.append(suggestion)
                    used.add(suggestion)

            enriched.append({**dup, "n8nIDs": list(dup["n8nIDs"]), "suggestions": suggestions})

        return enriched

    def is_valid_suggestion(self, suggestion: str, used_ids: Set[str]) -> bool:
        return suggestion not in used_ids

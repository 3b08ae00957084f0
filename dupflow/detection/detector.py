# dupflow/detection/detector.py
from typing import Any, Dict, List


class DuplicateIDDetector:
    """Single pass over the ID map; no nested scans."""

    def find_duplicates(self, id_map: Dict[str, List[str]]) -> List[Dict[str, Any]]:
        """
        Every internal ID owned by more than one workflow, most duplicated first.
        Ties keep map order (sorted() is stable).
        """
        duplicates = [
            {"internalID": internal_id, "n8nIDs": list(owners), "count": len(owners)}
            for internal_id, owners in id_map.items()
            if len(owners) > 1
        ]
        return sorted(duplicates, key=lambda d: d["count"], reverse=True)

    def is_duplicate(self, internal_id: str, id_map: Dict[str, List[str]]) -> bool:
        owners = id_map.get(internal_id)
        return owners is not None and len(owners) > 1

    def count_unique_duplicates(self, duplicates: List[Dict[str, Any]]) -> int:
        return len(duplicates)

    def count_affected_workflows(self, duplicates: List[Dict[str, Any]]) -> int:
        return sum(d["count"] for d in duplicates)

# dupflow/reporting/formatter.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

RULE = "═" * 60
NO_SUGGESTION = "N/A"


def iso_now() -> str:
    """UTC timestamp in the 2025-10-17T14:30:00.000Z form."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ErrorMessageFormatter:
    """Turns enriched duplicate groups into clear, actionable console text."""

    def format(self, duplicates: List[Dict[str, Any]], limit: Optional[int] = None) -> List[str]:
        """
        Full report as a list of lines/blocks; the caller decides how to print them.
        With `limit`, only the first `limit` groups are detailed and the rest
        are summarized in one line.
        """
        shown = duplicates if limit is None else duplicates[:limit]
        omitted = len(duplicates) - len(shown)

        messages: List[str] = ["", f"❌ Detected {len(duplicates)} duplicate internal ID(s):", ""]
        for dup in shown:
            messages.append(self.format_single(dup))
        if omitted > 0:
            messages.append(f"… {omitted} more duplicate group(s) omitted")
            messages.append("")

        messages.append("💡 Fix the duplicate IDs in n8n and run the validation again.")
        messages.append("")
        return messages

    def format_single(self, duplicate: Dict[str, Any]) -> str:
        internal_id = duplicate["internalID"]
        owners = duplicate["n8nIDs"]
        suggestions = duplicate.get("suggestions") or []

        lines = [
            f"📍 Internal ID: {internal_id}",
            f"   Found in {len(owners)} workflows:",
        ]
        for idx, owner in enumerate(owners):
            lines.append(f"   {idx + 1}. n8n workflow ID: {owner}")
            # the first occurrence keeps its ID
            if idx == 0:
                continue
            if idx - 1 < len(suggestions) and suggestions[idx - 1]:
                lines.append(f"      → Suggestion: change to {suggestions[idx - 1]}")
            else:
                lines.append("      → No suggestion available")

        return "\n".join(lines) + "\n"

    def format_compact(self, duplicates: List[Dict[str, Any]]) -> List[str]:
        out = []
        for dup in duplicates:
            suggestions = dup.get("suggestions") or []
            first = suggestions[0] if suggestions else NO_SUGGESTION
            out.append(f"Found ID {dup['internalID']} in {dup['count']} workflows. Suggestion: {first}")
        return out

    def format_success(self, total_workflows: int) -> List[str]:
        return [
            "",
            "✅ Validation passed",
            f"📊 Total workflows: {total_workflows}",
            "✔️  No duplicates detected",
            "",
        ]

    def format_log_header(self, duplicate_count: int, total_count: int) -> str:
        return "\n".join([
            RULE,
            f"Workflow validation - {iso_now()}",
            RULE,
            f"Total workflows: {total_count}",
            f"Duplicates found: {duplicate_count}",
            RULE,
            "",
        ])

# dupflow/errors.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

# CLI exit codes
EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_INPUT_ERROR = 2
EXIT_CONFIG_ERROR = 3

# Error codes carried by DupflowError.code
DUPLICATE_IDS = "DUPLICATE_IDS"
INVALID_CONFIG = "INVALID_CONFIG"
INVALID_ID_PATTERN = "INVALID_ID_PATTERN"


class DupflowError(Exception):
    """Base class: every error knows its code and the process exit code it maps to."""

    def __init__(self, message: str, code: str, exit_code: int):
        super().__init__(message)
        self.message = message
        self.code = code
        self.exit_code = exit_code

    def format_user_message(self) -> List[str]:
        return ["", f"❌ {self.message}", ""]


class ConfigurationError(DupflowError):
    """Config file unreadable, schema violation, or a broken idPattern."""

    def __init__(self, field: str, message: Optional[str] = None, code: str = INVALID_CONFIG):
        super().__init__(
            message or f"Missing required config field: {field}",
            code,
            EXIT_CONFIG_ERROR,
        )
        self.field = field

    def format_user_message(self) -> List[str]:
        return [
            "",
            "❌ Configuration error",
            f"📋 Missing or invalid field: {self.field}",
            "📝 Check the config file (default: .jana/config.json)",
            "",
            f"Details: {self.message}",
            "",
        ]


class InvalidIDPatternError(ConfigurationError):
    def __init__(self, pattern: str, regex_error: str):
        super().__init__(
            "validation.idPattern",
            f"Invalid ID pattern regex: {regex_error}",
            code=INVALID_ID_PATTERN,
        )
        self.pattern = pattern
        self.regex_error = regex_error

    def format_user_message(self) -> List[str]:
        return [
            "",
            "❌ Invalid ID pattern",
            f"🔍 Pattern: {self.pattern}",
            f"⚠️  Error: {self.regex_error}",
            "",
            "💡 Check the regex syntax of validation.idPattern",
            '📖 Valid example: "\\\\([A-Z]+-[A-Z]+-\\\\d{3}\\\\)"',
            "",
        ]


class ValidationError(DupflowError):
    """
    Duplicate internal IDs were found on the blocking path.

    messages:   ready-to-print lines (ErrorMessageFormatter.format output)
    duplicates: enriched duplicate groups, suitable for a saved report
    """

    def __init__(self, messages: List[str], duplicates: List[Dict[str, Any]]):
        super().__init__(
            "Validation failed: duplicate IDs detected",
            DUPLICATE_IDS,
            EXIT_VALIDATION_ERROR,
        )
        self.messages = list(messages)
        self.duplicates = list(duplicates)

    def format_user_message(self) -> List[str]:
        return list(self.messages)

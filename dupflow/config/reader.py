# dupflow/config/reader.py
from __future__ import annotations

import json
import os
import re
from typing import Any, Dict, Optional

import jsonschema
import yaml

from dupflow.config.schema import (
    CONFIG_SCHEMA,
    DEFAULT_CONFIG_PATH,
    DEFAULT_VALIDATION_CONFIG,
)
from dupflow.errors import ConfigurationError, InvalidIDPatternError
from dupflow.utils.io import LocalFileSystem, PathLike, parse_text, render_text, to_path
from dupflow.utils.logger import get_logger

log = get_logger("config")


def _error_field(err: jsonschema.ValidationError) -> str:
    """Dotted path of the offending field, e.g. 'validation.maxDuplicates'."""
    parts = [str(p) for p in err.absolute_path]
    if err.validator == "required" and isinstance(err.instance, dict):
        missing = [k for k in err.validator_value if k not in err.instance]
        if missing:
            parts.append(missing[0])
    return ".".join(parts) or "<root>"


class ConfigReader:
    """
    Reads the validation section of the tool config (.jana/config.json).

    First run convenience: when the file does not exist, a default one is
    written before reading. `fs` is any object exposing exists/read_text/
    write_text; it defaults to the local disk.
    """

    def __init__(self, config_path: Optional[PathLike] = None, fs: Any = None):
        self.config_path = to_path(config_path or DEFAULT_CONFIG_PATH)
        self.fs = fs or LocalFileSystem()

    def read(self) -> Dict[str, Any]:
        if not self.fs.exists(self.config_path):
            self._create_default_config()

        text = self.fs.read_text(self.config_path)
        try:
            raw = parse_text(text, self.config_path)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError("json.syntax", f"Invalid JSON in config file: {e}") from e

        try:
            jsonschema.validate(instance=raw, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            field = _error_field(e)
            raise ConfigurationError(field, f"Invalid config at {field}: {e.message}") from e

        return self._extract_validation_config(raw)

    def validate_id_pattern(self, pattern: str) -> bool:
        """Return True when the pattern compiles; raise InvalidIDPatternError otherwise."""
        try:
            re.compile(pattern)
        except (re.error, TypeError) as e:
            raise InvalidIDPatternError(pattern, str(e)) from e
        return True

    @staticmethod
    def get_default() -> Dict[str, Any]:
        return dict(DEFAULT_VALIDATION_CONFIG)

    def _create_default_config(self) -> None:
        default_config = {
            "n8n": {
                "apiUrl": os.getenv("N8N_API_URL", "https://your-n8n-instance.com/api/v1"),
                "apiKey": os.getenv("N8N_API_KEY", "your_api_key_here"),
            },
            "validation": dict(DEFAULT_VALIDATION_CONFIG),
        }
        self.fs.write_text(self.config_path, render_text(default_config, self.config_path))
        log.info("Created default config at %s", self.config_path)

    def _extract_validation_config(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        section = raw.get("validation") or {}
        config = {
            key: section[key] if section.get(key) is not None else default
            for key, default in DEFAULT_VALIDATION_CONFIG.items()
        }
        # Empty string means "use the default pattern"
        if not config["idPattern"]:
            config["idPattern"] = DEFAULT_VALIDATION_CONFIG["idPattern"]

        self.validate_id_pattern(config["idPattern"])
        return config

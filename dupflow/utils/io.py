# dupflow/utils/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

import yaml

# -------- Path helpers --------
PathLike = Union[str, Path]


def to_path(p: PathLike) -> Path:
    """Convert string-like to pathlib.Path."""
    return p if isinstance(p, Path) else Path(p)


def ensure_parent(path: PathLike) -> Path:
    """Ensure parent directory exists for a file path."""
    p = to_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def list_files(folder: PathLike, pattern: str = "*") -> list[Path]:
    """List files matching a glob pattern (non-recursive)."""
    return sorted(to_path(folder).glob(pattern))


# -------- Text / JSON / YAML --------
def read_text(path: PathLike, encoding: str = "utf-8") -> str:
    """Read a whole text file."""
    return to_path(path).read_text(encoding=encoding)


def write_text(path: PathLike, text: str, encoding: str = "utf-8") -> Path:
    """Write text atomically (via temp file then replace)."""
    p = ensure_parent(path)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_text(text, encoding=encoding)
    tmp.replace(p)
    return p


def read_json(path: PathLike) -> Any:
    """Load JSON file with UTF-8."""
    with to_path(path).open("r", encoding="utf-8") as f:
        return json.load(f)


def dump_json(data: Any, indent: int = 2) -> str:
    """Pretty JSON text, keeping non-ASCII (emoji, accents) readable."""
    return json.dumps(data, ensure_ascii=False, indent=indent)


def write_json(path: PathLike, data: Any, indent: int = 2) -> Path:
    """Write JSON atomically, pretty-formatted."""
    return write_text(path, dump_json(data, indent=indent))


def is_yaml_path(path: PathLike) -> bool:
    return to_path(path).suffix.lower() in (".yaml", ".yml")


def parse_text(text: str, path: PathLike) -> Any:
    """
    Parse config-like text by the extension of the path it came from:
      - .yaml/.yml -> YAML
      - anything else -> JSON
    """
    if is_yaml_path(path):
        return yaml.safe_load(text)
    return json.loads(text)


def render_text(data: Any, path: PathLike) -> str:
    """Inverse of parse_text."""
    if is_yaml_path(path):
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return dump_json(data)


# -------- Filesystem seam --------
class LocalFileSystem:
    """
    Minimal filesystem used by the config reader.
    Anything with the same three methods can be passed instead (tests use an
    in-memory dict).
    """

    def exists(self, path: PathLike) -> bool:
        return to_path(path).is_file()

    def read_text(self, path: PathLike) -> str:
        return read_text(path)

    def write_text(self, path: PathLike, text: str) -> Path:
        return write_text(path, text)

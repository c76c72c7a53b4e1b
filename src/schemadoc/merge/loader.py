"""Load OpenAPI / Swagger documents from disk.

A path may point at a single file or at a directory; directories are
scanned (non-recursively) for specification files.
"""

import json
from pathlib import Path
from typing import Any

import yaml

SPEC_EXTENSIONS = (".yaml", ".yml", ".json")


def detect_format(file_path: Path) -> str:
    """Return 'json' or 'yaml' based on the file extension."""
    if file_path.suffix.lower() == ".json":
        return "json"
    return "yaml"


def load_spec_file(file_path: Path, fmt: str | None = None) -> Any:
    """Parse one JSON or YAML file.

    Raises FileNotFoundError, json.JSONDecodeError or yaml.YAMLError.
    """
    text = Path(file_path).read_text(encoding="utf-8")
    if (fmt or detect_format(Path(file_path))) == "json":
        return json.loads(text)
    return yaml.safe_load(text)


def load_specs(docs_path: str | Path) -> list[Any]:
    """Load every specification document under ``docs_path``.

    Returns one parsed document per file, in sorted file-name order.
    """
    path = Path(docs_path).resolve()
    if path.is_file():
        return [load_spec_file(path)]
    if not path.is_dir():
        raise FileNotFoundError(f"Spec path not found: {path}")

    return [
        load_spec_file(f)
        for f in sorted(path.iterdir())
        if f.is_file() and f.suffix.lower() in SPEC_EXTENSIONS
    ]

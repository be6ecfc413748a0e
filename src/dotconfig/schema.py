"""
Declare configuration records in YAML instead of Python.

Example document::

    name: AppConfig
    fields:
      - name: max_bytes
        env: MAX_BYTES
        type: int
        default: 2048
      - name: stripe_secret
        env: STRIPE_SECRET, required
        type: str
"""

from __future__ import annotations

import dataclasses
import keyword
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .errors import DotConfigError
from .fields import DEFAULT_METADATA_KEY, ENV_METADATA_KEY, Float32, UInt


class SchemaError(DotConfigError):
    """Raised when a YAML record schema is invalid."""


SCHEMA_TYPES: Dict[str, type] = {
    "bool": bool,
    "int": int,
    "uint": UInt,
    "float": float,
    "float64": float,
    "float32": Float32,
    "str": str,
    "string": str,
}


def _require(dictionary: Dict[str, Any], key: str) -> Any:
    if key not in dictionary:
        raise SchemaError(f"Missing required schema key: {key}")
    return dictionary[key]


def _load_field(entry: Dict[str, Any]) -> Tuple[str, Any, dataclasses.Field]:
    if not isinstance(entry, dict):
        raise SchemaError(f"Invalid field entry: {entry!r}")
    name = str(_require(entry, "name"))
    if not name.isidentifier() or keyword.iskeyword(name):
        raise SchemaError(f"Invalid field name: {name!r}")

    type_label = str(entry.get("type", "str")).strip().lower()
    if type_label not in SCHEMA_TYPES:
        raise SchemaError(f"Unknown type {type_label!r} for field {name}")

    metadata: Dict[str, Any] = {}
    if entry.get("env"):
        metadata[ENV_METADATA_KEY] = str(entry["env"])
    if entry.get("default") is not None:
        metadata[DEFAULT_METADATA_KEY] = str(entry["default"])
    return name, SCHEMA_TYPES[type_label], dataclasses.field(metadata=metadata)


def schema_from_mapping(raw: Dict[str, Any]) -> type:
    """Build a configuration dataclass from an already parsed schema mapping."""

    if not isinstance(raw, dict):
        raise SchemaError("Schema document must be a mapping")
    class_name = str(raw.get("name", "Config"))
    if not class_name.isidentifier():
        raise SchemaError(f"Invalid record name: {class_name!r}")
    raw_fields = _require(raw, "fields")
    if not isinstance(raw_fields, list):
        raise SchemaError("Schema 'fields' must be a list")

    fields: List[Tuple[str, Any, dataclasses.Field]] = [_load_field(entry) for entry in raw_fields]
    names = [name for name, _, _ in fields]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise SchemaError(f"Duplicate field names: {', '.join(duplicates)}")

    return dataclasses.make_dataclass(class_name, fields)


def load_schema(path: str | Path) -> type:
    """Load a configuration dataclass from a YAML schema file."""

    schema_path = Path(path)
    if not schema_path.exists():
        raise SchemaError(f"Schema file not found: {path}")

    try:
        with schema_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaError(f"Cannot read schema file: {path}") from exc
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid YAML in schema file: {path}") from exc

    return schema_from_mapping(raw)


__all__ = ["SCHEMA_TYPES", "SchemaError", "load_schema", "schema_from_mapping"]

import dataclasses

import pytest

from dotconfig.decoder import DecodeOptions, decode
from dotconfig.errors import MissingStructTag
from dotconfig.fields import FieldKind, field_specs
from dotconfig.schema import SchemaError, load_schema, schema_from_mapping
from dotconfig.store import MemoryStore

SCHEMA_YAML = """
name: AppConfig
fields:
  - name: max_bytes
    env: MAX_BYTES
    type: int
    default: 2048
  - name: retries
    env: RETRIES, optional
    type: uint
  - name: ratio
    env: RATIO
    type: float32
  - name: stripe_secret
    env: STRIPE_SECRET, required
  - name: notes
"""


def test_load_schema_builds_dataclass(tmp_path):
    schema_path = tmp_path / "schema.yaml"
    schema_path.write_text(SCHEMA_YAML, encoding="utf-8")

    config_type = load_schema(schema_path)

    assert dataclasses.is_dataclass(config_type)
    assert config_type.__name__ == "AppConfig"
    specs = {spec.name: spec for spec in field_specs(config_type)}
    assert specs["max_bytes"].default_literal == "2048"
    assert specs["retries"].kind is FieldKind.UINT
    assert specs["retries"].optional
    assert specs["ratio"].kind is FieldKind.FLOAT32
    assert specs["stripe_secret"].required
    assert specs["stripe_secret"].kind is FieldKind.STRING
    assert not specs["notes"].declared


def test_schema_records_decode(tmp_path):
    schema_path = tmp_path / "schema.yaml"
    schema_path.write_text(SCHEMA_YAML, encoding="utf-8")
    config_type = load_schema(schema_path)

    config, errors = decode(
        config_type,
        MemoryStore({"RATIO": "0.5", "STRIPE_SECRET": "sk_test"}),
        DecodeOptions(enforce_declared_keys=True),
    )

    assert config.max_bytes == 2048
    assert config.retries == 0
    assert config.ratio == 0.5
    assert config.stripe_secret == "sk_test"
    assert len(errors) == 1
    assert isinstance(errors.errors[0], MissingStructTag)


def test_missing_schema_file(tmp_path):
    with pytest.raises(SchemaError, match="not found"):
        load_schema(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    schema_path = tmp_path / "schema.yaml"
    schema_path.write_text("fields: [unclosed", encoding="utf-8")

    with pytest.raises(SchemaError):
        load_schema(schema_path)


@pytest.mark.parametrize(
    "raw, message",
    [
        ({}, "Missing required schema key: fields"),
        ({"fields": "nope"}, "must be a list"),
        ({"fields": [{"env": "KEY"}]}, "Missing required schema key: name"),
        ({"fields": [{"name": "class"}]}, "Invalid field name"),
        ({"fields": [{"name": "x", "type": "complex"}]}, "Unknown type"),
        ({"fields": [{"name": "x"}, {"name": "x"}]}, "Duplicate field names: x"),
        ({"name": "not valid", "fields": []}, "Invalid record name"),
        (["not", "a", "mapping"], "must be a mapping"),
    ],
)
def test_schema_validation_errors(raw, message):
    with pytest.raises(SchemaError, match=message):
        schema_from_mapping(raw)


def test_schema_path_is_a_directory(tmp_path):
    with pytest.raises(SchemaError, match="Cannot read schema file"):
        load_schema(tmp_path)


def test_schema_file_not_utf8(tmp_path):
    schema_path = tmp_path / "schema.yaml"
    schema_path.write_bytes(b"name: \xff\xfe")

    with pytest.raises(SchemaError, match="Cannot read schema file"):
        load_schema(schema_path)

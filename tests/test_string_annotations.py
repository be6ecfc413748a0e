from __future__ import annotations

import weakref
from dataclasses import dataclass

from dotconfig.decoder import decode
from dotconfig.errors import UnsupportedFieldType
from dotconfig.fields import FieldKind, Float32, env_field, field_specs
from dotconfig.store import MemoryStore


def test_locally_imported_types_resolve_by_name():
    from dotconfig.fields import UInt

    @dataclass
    class Mixed:
        name: str = env_field("NAME")
        retries: UInt = env_field("RETRIES")

    config, errors = decode(Mixed, MemoryStore({"NAME": "svc", "RETRIES": "3"}))

    assert not errors
    assert config == Mixed(name="svc", retries=3)


def test_module_level_names_resolve():
    @dataclass
    class Ratios:
        ratio: Float32 = env_field("RATIO")
        scale: float = env_field("SCALE")
        enabled: bool = env_field("ENABLED")

    kinds = [spec.kind for spec in field_specs(Ratios)]

    assert kinds == [FieldKind.FLOAT32, FieldKind.FLOAT64, FieldKind.BOOL]


def test_unresolvable_annotation_only_affects_its_own_field():
    @dataclass
    class PartlyKnown:
        count: int = env_field("COUNT")
        mystery: NotDefinedAnywhere = env_field("MYSTERY")  # noqa: F821
        label: str = env_field("LABEL")

    config, errors = decode(PartlyKnown, MemoryStore({"COUNT": "7", "MYSTERY": "x", "LABEL": "ok"}))

    assert len(errors) == 1
    assert isinstance(errors.errors[0], UnsupportedFieldType)
    assert str(errors.errors[0]) == "unsupported field type: NotDefinedAnywhere"
    assert config.count == 7
    assert config.label == "ok"
    assert config.mystery is None


def test_descriptor_cache_holds_classes_weakly():
    from dotconfig import fields

    @dataclass
    class Cached:
        name: str = env_field("NAME")

    specs = field_specs(Cached)

    assert isinstance(fields._SPEC_CACHE, weakref.WeakKeyDictionary)
    assert fields._SPEC_CACHE[Cached] is specs
    assert field_specs(Cached) is specs

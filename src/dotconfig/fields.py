"""
Field descriptors for configuration records.

A configuration record is a dataclass whose fields carry an ``env`` entry in their
metadata::

    @dataclass
    class AppConfig:
        max_bytes: int = env_field("MAX_BYTES", default="2048")
        is_dev: bool = env_field("DEVELOPMENT,optional")
        stripe_secret: str = field(metadata={"env": "STRIPE_SECRET, required"})

The tag holds the lookup key followed by comma separated modifiers; ``default`` is a
literal used when the key is missing from the store.
"""

from __future__ import annotations

import dataclasses
import enum
import sys
import weakref
from dataclasses import dataclass
from typing import Any, Dict, NewType, Tuple

from .errors import ConfigMustBeStruct

ENV_METADATA_KEY = "env"
DEFAULT_METADATA_KEY = "default"

OPTIONAL = "optional"
REQUIRED = "required"

UInt = NewType("UInt", int)
Float32 = NewType("Float32", float)


class FieldKind(enum.Enum):
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    UNSUPPORTED = "unsupported"


_KINDS_BY_TYPE: Dict[Any, FieldKind] = {
    bool: FieldKind.BOOL,
    int: FieldKind.INT,
    UInt: FieldKind.UINT,
    Float32: FieldKind.FLOAT32,
    float: FieldKind.FLOAT64,
    str: FieldKind.STRING,
}

_TYPES_BY_NAME: Dict[str, Any] = {
    "bool": bool,
    "int": int,
    "UInt": UInt,
    "Float32": Float32,
    "float": float,
    "str": str,
}

_ZERO_VALUES: Dict[FieldKind, Any] = {
    FieldKind.BOOL: False,
    FieldKind.INT: 0,
    FieldKind.UINT: 0,
    FieldKind.FLOAT32: 0.0,
    FieldKind.FLOAT64: 0.0,
    FieldKind.STRING: "",
}


class TagOptions(str):
    """The comma separated modifiers that follow the key in an ``env`` tag."""

    def contains(self, option_name: str) -> bool:
        if not self or not option_name:
            return False
        return any(part.strip() == option_name for part in self.split(","))


def parse_tag(tag: str) -> Tuple[str, TagOptions]:
    """Split ``"KEY,required"`` into ``("KEY", TagOptions("required"))``."""

    key, _, options = tag.partition(",")
    return key, TagOptions(options)


def kind_for(annotation: Any) -> FieldKind:
    try:
        return _KINDS_BY_TYPE.get(annotation, FieldKind.UNSUPPORTED)
    except TypeError:
        # unhashable annotation objects
        return FieldKind.UNSUPPORTED


def zero_value(kind: FieldKind) -> Any:
    return _ZERO_VALUES.get(kind)


def type_name(annotation: Any) -> str:
    if isinstance(annotation, str):
        return annotation
    return getattr(annotation, "__name__", None) or str(annotation)


def env_field(tag: str, default: str | None = None, **field_kwargs: Any) -> Any:
    """
    Declare a dataclass field read from ``tag``.

    ``default`` is the literal used when the key is absent; any other keyword is
    passed on to :func:`dataclasses.field`.
    """

    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[ENV_METADATA_KEY] = tag
    if default is not None:
        metadata[DEFAULT_METADATA_KEY] = default
    return dataclasses.field(metadata=metadata, **field_kwargs)


@dataclass(frozen=True)
class FieldSpec:
    name: str
    declared_key: str
    key: str
    options: TagOptions
    kind: FieldKind
    type_name: str
    default_literal: str | None = None
    init: bool = True
    settable: bool = True
    has_python_default: bool = False

    @property
    def declared(self) -> bool:
        return self.declared_key != ""

    @property
    def optional(self) -> bool:
        return self.options.contains(OPTIONAL)

    @property
    def required(self) -> bool:
        return self.options.contains(REQUIRED)


def _resolve_annotation(cls: type, annotation: Any) -> Any:
    """Evaluate a string annotation in the namespace of the module that defined ``cls``."""

    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(cls.__module__)
    namespace = dict(vars(module)) if module is not None else {}
    try:
        return eval(annotation, namespace, {cls.__name__: cls})
    except (NameError, TypeError, AttributeError, SyntaxError):
        # Names imported inside a function are out of reach; match them by name.
        return _TYPES_BY_NAME.get(annotation.strip(), annotation)


def _build_spec(dc_field: dataclasses.Field, annotation: Any) -> FieldSpec:
    declared_key = dc_field.metadata.get(ENV_METADATA_KEY, "") or ""
    key, options = parse_tag(declared_key)
    default_literal = dc_field.metadata.get(DEFAULT_METADATA_KEY)
    if default_literal is not None:
        default_literal = str(default_literal)
    return FieldSpec(
        name=dc_field.name,
        declared_key=declared_key,
        key=key,
        options=options,
        kind=kind_for(annotation),
        type_name=type_name(annotation),
        default_literal=default_literal,
        init=dc_field.init,
        settable=dc_field.init and not dc_field.name.startswith("_"),
        has_python_default=(
            dc_field.default is not dataclasses.MISSING
            or dc_field.default_factory is not dataclasses.MISSING
        ),
    )


_SPEC_CACHE: weakref.WeakKeyDictionary[type, Tuple[FieldSpec, ...]] = weakref.WeakKeyDictionary()


def field_specs(cls: Any) -> Tuple[FieldSpec, ...]:
    """Return the descriptor table for ``cls`` in declaration order (built once per class)."""

    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        raise ConfigMustBeStruct(cls)
    specs = _SPEC_CACHE.get(cls)
    if specs is None:
        specs = tuple(
            _build_spec(dc_field, _resolve_annotation(cls, dc_field.type))
            for dc_field in dataclasses.fields(cls)
        )
        _SPEC_CACHE[cls] = specs
    return specs


__all__ = [
    "DEFAULT_METADATA_KEY",
    "ENV_METADATA_KEY",
    "FieldKind",
    "FieldSpec",
    "Float32",
    "OPTIONAL",
    "REQUIRED",
    "TagOptions",
    "UInt",
    "env_field",
    "field_specs",
    "kind_for",
    "parse_tag",
    "type_name",
    "zero_value",
]

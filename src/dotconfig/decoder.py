"""
Populate configuration dataclasses from a key/value store.

Every field is attempted in declaration order and every failure is collected, so a
single pass reports everything that is wrong with the environment.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Type, TypeVar

from .convert import can_convert, convert, parse_bool
from .errors import (
    DecodeError,
    ErrorCollection,
    MissingEnvVar,
    MissingRequiredField,
    MissingStructTag,
    UnsupportedFieldType,
)
from .fields import FieldSpec, field_specs, zero_value
from .store import KeyValueStore, default_store

logger = logging.getLogger(__name__)

T = TypeVar("T")

OPTION_ENV_PREFIX = "DOTCONFIG_"


@dataclass
class DecodeOptions:
    """Toggles that change how records are decoded."""

    enforce_declared_keys: bool = False
    preserve_whitespace: bool = False
    propagate_file_errors: bool = False

    @classmethod
    def from_env(cls, store: KeyValueStore | None = None) -> "DecodeOptions":
        """Read ``DOTCONFIG_<OPTION>`` toggles; unset or unparsable values stay off."""

        if store is None:
            store = default_store()
        values: Dict[str, bool] = {}
        for name in ("enforce_declared_keys", "preserve_whitespace", "propagate_file_errors"):
            raw = store.get(OPTION_ENV_PREFIX + name.upper())
            if raw is None:
                continue
            try:
                values[name] = parse_bool(raw.strip())
            except ValueError:
                logger.warning("Ignoring invalid value for %s%s", OPTION_ENV_PREFIX, name.upper())
        return cls(**values)


class FieldState(enum.Enum):
    SKIPPED = "skipped"
    DEFAULTED = "defaulted"
    RESOLVED = "resolved"
    ERRORED = "errored"


@dataclass
class FieldOutcome:
    """What happened to one field during a decode pass."""

    spec: FieldSpec
    state: FieldState
    value: Any = None
    error: DecodeError | None = None

    @property
    def assigned(self) -> bool:
        return self.state in (FieldState.RESOLVED, FieldState.DEFAULTED)


def _decode_field(spec: FieldSpec, store: KeyValueStore, options: DecodeOptions) -> FieldOutcome:
    if not spec.settable:
        return FieldOutcome(spec, FieldState.SKIPPED)

    if not spec.declared:
        if options.enforce_declared_keys:
            return FieldOutcome(spec, FieldState.ERRORED, error=MissingStructTag(spec.name))
        return FieldOutcome(spec, FieldState.SKIPPED)

    state = FieldState.RESOLVED
    raw = store.get(spec.key)
    if raw is None:
        if spec.default_literal is not None:
            raw = spec.default_literal
            state = FieldState.DEFAULTED
        elif spec.optional:
            return FieldOutcome(spec, FieldState.SKIPPED)
        else:
            return FieldOutcome(spec, FieldState.ERRORED, error=MissingEnvVar(spec.name, spec.key))

    value = raw if options.preserve_whitespace else raw.strip()
    if value == "":
        if spec.required:
            return FieldOutcome(
                spec, FieldState.ERRORED, error=MissingRequiredField(spec.name, spec.key)
            )
        return FieldOutcome(spec, FieldState.SKIPPED)

    if not can_convert(spec.kind):
        return FieldOutcome(
            spec,
            FieldState.ERRORED,
            error=UnsupportedFieldType(spec.name, spec.key, spec.type_name),
        )

    return FieldOutcome(spec, state, value=convert(value, spec.kind, spec.key))


def decode_fields(
    config_type: Type[Any],
    store: KeyValueStore | None = None,
    options: DecodeOptions | None = None,
) -> List[FieldOutcome]:
    """Decode each field of ``config_type`` without building an instance."""

    specs = field_specs(config_type)
    if store is None:
        store = default_store()
    options = options or DecodeOptions()
    return [_decode_field(spec, store, options) for spec in specs]


def build_instance(config_type: Type[T], outcomes: List[FieldOutcome]) -> T:
    """Instantiate ``config_type``; unassigned fields keep their dataclass default or zero value."""

    kwargs: Dict[str, Any] = {}
    for outcome in outcomes:
        spec = outcome.spec
        if not spec.init:
            continue
        if outcome.assigned:
            kwargs[spec.name] = outcome.value
        elif not spec.has_python_default:
            kwargs[spec.name] = zero_value(spec.kind)
    return config_type(**kwargs)


def decode(
    config_type: Type[T],
    store: KeyValueStore | None = None,
    options: DecodeOptions | None = None,
) -> Tuple[T, ErrorCollection]:
    """
    Decode ``config_type`` from ``store`` (the process environment by default).

    Returns the best-effort instance together with every error found. Raises
    ``ConfigMustBeStruct`` when ``config_type`` is not a dataclass.
    """

    outcomes = decode_fields(config_type, store, options)
    errors = ErrorCollection(outcome.error for outcome in outcomes)
    config = build_instance(config_type, outcomes)
    logger.debug(
        "Decoded %s: %d fields, %d errors", config_type.__name__, len(outcomes), len(errors)
    )
    return config, errors


__all__ = [
    "DecodeOptions",
    "FieldOutcome",
    "FieldState",
    "build_instance",
    "decode",
    "decode_fields",
]

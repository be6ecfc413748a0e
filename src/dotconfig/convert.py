"""
String to field value conversions.

Conversions are lenient: a value that does not parse leaves the field at its zero
value instead of producing a decode error.
"""

from __future__ import annotations

import logging
import math
import re
import struct
from typing import Any, Callable, Dict

from .fields import FieldKind, zero_value

logger = logging.getLogger(__name__)

TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_INF_RE = re.compile(r"[+-]?inf(inity)?", re.IGNORECASE)


def parse_bool(value: str) -> bool:
    if value in TRUE_TOKENS:
        return True
    if value in FALSE_TOKENS:
        return False
    raise ValueError(f"invalid bool syntax: {value!r}")


def parse_int(value: str) -> int:
    if not _INT_RE.fullmatch(value):
        raise ValueError(f"invalid int syntax: {value!r}")
    return int(value, 10)


def parse_uint(value: str) -> int:
    if not _UINT_RE.fullmatch(value):
        raise ValueError(f"invalid uint syntax: {value!r}")
    return int(value, 10)


def parse_float(value: str, bits: int = 64) -> float:
    """Parse ``value`` at the given precision; out of range values are rejected."""

    if "_" in value or value != value.strip():
        raise ValueError(f"invalid float syntax: {value!r}")
    result = float(value)
    explicit_inf = bool(_INF_RE.fullmatch(value))
    if math.isinf(result) and not explicit_inf:
        raise ValueError(f"float out of range: {value!r}")
    if bits == 32:
        try:
            result = struct.unpack("f", struct.pack("f", result))[0]
        except OverflowError as exc:
            raise ValueError(f"float32 out of range: {value!r}") from exc
    return result


_CONVERTERS: Dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.BOOL: parse_bool,
    FieldKind.INT: parse_int,
    FieldKind.UINT: parse_uint,
    FieldKind.FLOAT32: lambda value: parse_float(value, 32),
    FieldKind.FLOAT64: lambda value: parse_float(value, 64),
    FieldKind.STRING: str,
}


def can_convert(kind: FieldKind) -> bool:
    return kind in _CONVERTERS


def convert(value: str, kind: FieldKind, key: str = "") -> Any:
    """
    Convert ``value`` to ``kind``.

    Parse failures return the kind's zero value. Unsupported kinds raise ``KeyError``;
    callers check :func:`can_convert` first.
    """

    converter = _CONVERTERS[kind]
    try:
        return converter(value)
    except ValueError:
        logger.debug("Could not parse %s as %s; using zero value", key or "value", kind.value)
        return zero_value(kind)


__all__ = [
    "FALSE_TOKENS",
    "TRUE_TOKENS",
    "can_convert",
    "convert",
    "parse_bool",
    "parse_float",
    "parse_int",
    "parse_uint",
]

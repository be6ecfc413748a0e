"""
Errors raised or collected while decoding configuration records.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Type, TypeVar

E = TypeVar("E", bound=BaseException)


class DotConfigError(Exception):
    """Base error for this package."""


class ConfigMustBeStruct(DotConfigError, TypeError):
    """Raised when the decode target is not a dataclass type."""

    def __init__(self, target: object):
        self.target = target
        name = getattr(target, "__name__", type(target).__name__)
        super().__init__(f"only dataclasses are supported, got: {name}")


class DecodeError(DotConfigError):
    """A failure attached to a single field of the target record."""

    def __init__(self, message: str, field_name: str, key: str = ""):
        super().__init__(message)
        self.field_name = field_name
        self.key = key


class MissingStructTag(DecodeError):
    """Field has no env declaration while declarations are enforced."""

    def __init__(self, field_name: str):
        super().__init__(f"missing env tag on field: {field_name}", field_name)


class MissingEnvVar(DecodeError):
    """Declared key is absent from the store and nothing excuses it."""

    def __init__(self, field_name: str, key: str):
        super().__init__(f"key not present in ENV: {key}", field_name, key)


class MissingRequiredField(DecodeError):
    """Key is present but resolves to an empty value on a required field."""

    def __init__(self, field_name: str, key: str):
        super().__init__(f"field must have non-zero value: {key}", field_name, key)


class UnsupportedFieldType(DecodeError):
    """Field is annotated with a type that has no conversion rule."""

    def __init__(self, field_name: str, key: str, type_name: str):
        super().__init__(f"unsupported field type: {type_name}", field_name, key)
        self.type_name = type_name


def format_errors(errors: Iterable[BaseException]) -> str:
    """Render errors the way ``str(ErrorCollection)`` does."""

    messages = [str(err) for err in errors]
    if not messages:
        return ""
    if len(messages) == 1:
        return messages[0]
    return "multiple errors:\n- " + "\n- ".join(messages)


class ErrorCollection(DotConfigError):
    """Ordered errors from one decode pass. Empty means full success."""

    def __init__(self, errors: Iterable[BaseException] | None = None):
        super().__init__()
        self.errors: List[BaseException] = [err for err in errors or () if err is not None]

    def add(self, err: BaseException | None) -> None:
        if err is not None:
            self.errors.append(err)

    def of_kind(self, kind: Type[E]) -> List[E]:
        return [err for err in self.errors if isinstance(err, kind)]

    def raise_if_errors(self) -> None:
        if self.errors:
            raise self

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __str__(self) -> str:
        return format_errors(self.errors)

    def __repr__(self) -> str:
        return f"ErrorCollection({self.errors!r})"


def errors_of(err: BaseException | None) -> List[BaseException]:
    """
    Expand ``err`` into its individual errors.

    An ``ErrorCollection`` yields its entries, any other exception is returned as a
    single-item list and ``None`` gives an empty list.
    """

    if err is None:
        return []
    if isinstance(err, ErrorCollection):
        return list(err.errors)
    return [err]


__all__ = [
    "ConfigMustBeStruct",
    "DecodeError",
    "DotConfigError",
    "ErrorCollection",
    "MissingEnvVar",
    "MissingRequiredField",
    "MissingStructTag",
    "UnsupportedFieldType",
    "errors_of",
    "format_errors",
]

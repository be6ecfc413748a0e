"""
Decode ``.env`` files and environment variables into typed configuration dataclasses.
"""

from .decoder import DecodeOptions, decode
from .errors import (
    ConfigMustBeStruct,
    DecodeError,
    DotConfigError,
    ErrorCollection,
    MissingEnvVar,
    MissingRequiredField,
    MissingStructTag,
    UnsupportedFieldType,
    errors_of,
)
from .fields import Float32, UInt, env_field
from .loader import from_env, from_file, from_stream
from .store import EnvironStore, KeyValueStore, MemoryStore

__all__ = [
    "ConfigMustBeStruct",
    "DecodeError",
    "DecodeOptions",
    "DotConfigError",
    "EnvironStore",
    "ErrorCollection",
    "Float32",
    "KeyValueStore",
    "MemoryStore",
    "MissingEnvVar",
    "MissingRequiredField",
    "MissingStructTag",
    "UInt",
    "UnsupportedFieldType",
    "decode",
    "env_field",
    "errors_of",
    "from_env",
    "from_file",
    "from_stream",
]

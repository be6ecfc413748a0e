"""
Public entry points: parse a dotfile or stream, then decode a configuration record.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Tuple, Type, TypeVar

from .decoder import DecodeOptions, decode
from .env import load_env_file, load_env_stream
from .errors import ErrorCollection
from .fields import field_specs
from .store import KeyValueStore, default_store

logger = logging.getLogger(__name__)

T = TypeVar("T")


def from_env(
    config_type: Type[T],
    options: DecodeOptions | None = None,
    store: KeyValueStore | None = None,
) -> Tuple[T, ErrorCollection]:
    """Decode ``config_type`` using only what is already in the store."""

    return decode(config_type, store, options)


def from_stream(
    config_type: Type[T],
    stream: IO,
    options: DecodeOptions | None = None,
    store: KeyValueStore | None = None,
) -> Tuple[T, ErrorCollection]:
    """
    Publish every pair in ``stream`` into the store, then decode ``config_type``.

    Expected format::

        KEY='value enclosed in quotes'
        # Comments are fine as are blank lines
        MULTI_LINE='line1\\nline2'
    """

    # Reject non-dataclass targets before the store is touched.
    field_specs(config_type)
    if store is None:
        store = default_store()
    load_env_stream(stream, store)
    return decode(config_type, store, options)


def from_file(
    config_type: Type[T],
    path: str | Path = ".env",
    options: DecodeOptions | None = None,
    store: KeyValueStore | None = None,
) -> Tuple[T, ErrorCollection]:
    """
    Load ``path`` into the store and decode ``config_type``.

    In deployed environments the file usually does not exist and values come from
    injected environment variables, so open failures are ignored unless
    ``options.propagate_file_errors`` is set.
    """

    field_specs(config_type)
    options = options or DecodeOptions()
    if store is None:
        store = default_store()
    applied = load_env_file(path, store, propagate_file_errors=options.propagate_file_errors)
    logger.debug("Loaded %d pairs from %s", applied, path)
    return decode(config_type, store, options)


__all__ = ["from_env", "from_file", "from_stream"]

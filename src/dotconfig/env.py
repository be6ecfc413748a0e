"""
Lenient ``.env`` parser that publishes key/value pairs into a shared store.

Supported line shapes::

    KEY=value
    KEY='single quoted'
    KEY="double quoted"
    KEY='line1\\nline2'
    # full line comment
    KEY=value # trailing comment

Malformed lines are dropped without an error: a dotfile is a local development
convenience, production values come from the real environment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Iterable, Iterator, Tuple, Union

from .store import KeyValueStore, default_store

logger = logging.getLogger(__name__)

INLINE_COMMENT = " #"
QUOTES = ("'", '"')


def parse_line(raw_line: str) -> Tuple[str, str] | None:
    """Turn one line into a ``(key, value)`` pair, or ``None`` when it holds no assignment."""

    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None
    if "=" not in line:
        return None

    # Keys are not trimmed; "KEY =x" stores "KEY " which will never match.
    key, value = line.split("=", 1)

    comment_at = value.find(INLINE_COMMENT)
    if comment_at != -1:
        value = value[:comment_at].rstrip()

    for quote in QUOTES:
        if value.startswith(quote):
            value = value[1:]
            if value.endswith(quote):
                value = value[:-1]
            break

    value = value.replace("\\n", "\n")
    return key, value


def _decode(raw_line: Union[str, bytes]) -> str:
    if isinstance(raw_line, bytes):
        return raw_line.decode("utf-8", errors="replace")
    return raw_line


def iter_pairs(lines: Iterable[Union[str, bytes]]) -> Iterator[Tuple[str, str]]:
    """Yield pairs from a text stream, binary stream or any iterable of lines."""

    for raw_line in lines:
        pair = parse_line(_decode(raw_line))
        if pair is not None:
            yield pair


def load_env_stream(stream: IO, store: KeyValueStore | None = None) -> int:
    """
    Upsert every pair found in ``stream`` into ``store`` (the process environment by default).

    Later assignments of the same key overwrite earlier ones. Returns the number of
    pairs applied.
    """

    if store is None:
        store = default_store()
    applied = 0
    for key, value in iter_pairs(stream):
        if not key:
            logger.warning("Skipping assignment with an empty key")
            continue
        try:
            store.set(key, value)
        except ValueError:
            # os.environ refuses NUL characters and similar.
            logger.warning("Store rejected value for %s; skipping", key)
            continue
        applied += 1
    logger.debug("Applied %d pairs to %s", applied, type(store).__name__)
    return applied


def load_env_file(
    dotenv_path: str | Path = ".env",
    store: KeyValueStore | None = None,
    propagate_file_errors: bool = False,
) -> int:
    """
    Parse ``dotenv_path`` into ``store``.

    A file that cannot be opened usually means we are running somewhere the values
    are injected for real, so the error is only raised when ``propagate_file_errors``
    is set. Returns the number of pairs applied.
    """

    path = Path(dotenv_path)
    try:
        handle = path.open("rb")
    except OSError as exc:
        if propagate_file_errors:
            raise
        logger.debug("No env file loaded from %s: %s", path, exc)
        return 0

    with handle:
        return load_env_stream(handle, store)


__all__ = ["iter_pairs", "load_env_file", "load_env_stream", "parse_line"]

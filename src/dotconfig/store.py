"""
Key/value stores that parsed ``.env`` pairs are published into and decoded from.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Dict, Mapping, MutableMapping


class KeyValueStore(ABC):
    """Shared store consulted by the decoder. Last writer for a key wins."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored for ``key`` or ``None`` when it is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Insert or overwrite ``key``."""

    def has(self, key: str) -> bool:
        return self.get(key) is not None


class EnvironStore(KeyValueStore):
    """Reads and writes the process environment (or an injected mapping)."""

    def __init__(self, environ: MutableMapping[str, str] | None = None):
        self._environ = os.environ if environ is None else environ

    def get(self, key: str) -> str | None:
        return self._environ.get(key)

    def set(self, key: str, value: str) -> None:
        self._environ[key] = value

    def has(self, key: str) -> bool:
        return key in self._environ


class MemoryStore(KeyValueStore):
    """Isolated in-memory store, handy for tests and side-by-side decodes."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def has(self, key: str) -> bool:
        return key in self._values

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __len__(self) -> int:
        return len(self._values)


def default_store() -> KeyValueStore:
    """Production wiring: the real process environment."""

    return EnvironStore()


__all__ = ["EnvironStore", "KeyValueStore", "MemoryStore", "default_store"]

"""
Case-insensitive mapping used for localization keys and locale codes.

Lua table lookups are case-sensitive, but addon authors treat ``L["Close"]``
and ``L["close"]`` as the same glue string. Keys are compared by their
casefolded form while the first spelling seen is kept for output.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping, MutableSet
from typing import TypeVar

from typing_extensions import override

V = TypeVar("V")


class KeyMap(MutableMapping[str, V]):
    """Mapping with case-insensitive string keys that remembers original spelling."""

    def __init__(
        self, data: Mapping[str, V] | Iterable[tuple[str, V]] | None = None
    ) -> None:
        self._store: dict[str, tuple[str, V]] = {}
        if data is not None:
            self.update(data)

    @override
    def __getitem__(self, key: str) -> V:
        return self._store[key.casefold()][1]

    @override
    def __setitem__(self, key: str, value: V) -> None:
        folded = key.casefold()
        existing = self._store.get(folded)
        original_key = existing[0] if existing is not None else key
        self._store[folded] = (original_key, value)

    @override
    def __delitem__(self, key: str) -> None:
        del self._store[key.casefold()]

    @override
    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    @override
    def __len__(self) -> int:
        return len(self._store)

    @override
    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._store

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"

    def original_key(self, key: str) -> str | None:
        """Return the stored spelling of ``key``, or None if absent."""
        entry = self._store.get(key.casefold())
        return entry[0] if entry is not None else None

    def copy(self) -> KeyMap[V]:
        return KeyMap(self.items())


class KeySet(MutableSet[str]):
    """Set of keys compared case-insensitively."""

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys: KeyMap[None] = KeyMap()
        for key in keys:
            self.add(key)

    @override
    def __contains__(self, key: object) -> bool:
        return key in self._keys

    @override
    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    @override
    def __len__(self) -> int:
        return len(self._keys)

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({sort_keys(self._keys)!r})"

    @override
    def add(self, value: str) -> None:
        if value not in self._keys:
            self._keys[value] = None

    @override
    def discard(self, value: str) -> None:
        _ = self._keys.pop(value, None)

    def update(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.add(key)

    def copy(self) -> KeySet:
        return KeySet(self._keys)


def sort_keys(keys: Iterable[str]) -> list[str]:
    """Sort keys case-insensitively, using the exact spelling as tie-breaker."""
    return sorted(keys, key=lambda key: (key.casefold(), key))

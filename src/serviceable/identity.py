"""Identity-keyed tables that do not keep their keys alive.

``weakref.WeakKeyDictionary`` compares keys with ``__eq__``/``__hash__``,
which a class can override through its metaclass. Registrations must be keyed
by reference identity instead: two structurally identical functions are two
different tokens. ``IdentityTable`` keys entries by ``id()`` and holds a weak
reference to each key, so an entry disappears once its key is garbage
collected.

Keys that do not support weak references are held strongly until removed
explicitly.

A value that itself references its key (an instance referencing its own
class, for example) keeps the key reachable, and the entry is only removed
explicitly.
"""

import weakref
from typing import Any, Callable, Iterator

__all__ = ["IdentityTable"]

_MISSING = object()


class _StrongReference:
    """Stands in for ``weakref.ref`` when the key is not weakly referenceable."""

    __slots__ = ("_key",)

    def __init__(self, key: Any):
        self._key = key

    def __call__(self) -> Any:
        return self._key


class IdentityTable:
    """Mapping from objects, compared by identity, to arbitrary values.

    Example:
        >>> table = IdentityTable()
        >>> table[make_cache] = {}
        >>> make_cache in table
        True
        >>> del make_cache      # entry is reclaimed once collected
    """

    def __init__(self):
        self._entries: dict[int, tuple[Callable[[], Any], Any]] = {}

    def __contains__(self, key: Any) -> bool:
        return self._lookup(key) is not _MISSING

    def __getitem__(self, key: Any) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: Any, value: Any):
        self._entries[id(key)] = (self._reference(key), value)

    def __delitem__(self, key: Any):
        if self._lookup(key) is _MISSING:
            raise KeyError(key)
        del self._entries[id(key)]

    def __len__(self) -> int:
        return sum(1 for _ in self.keys())

    def __iter__(self) -> Iterator[Any]:
        return self.keys()

    def keys(self) -> Iterator[Any]:
        """Iterate over the live keys."""
        for reference, _ in list(self._entries.values()):
            key = reference()
            if key is not None:
                yield key

    def get(self, key: Any, default: Any = None) -> Any:
        value = self._lookup(key)
        return default if value is _MISSING else value

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            if default is _MISSING:
                raise KeyError(key)
            return default
        del self._entries[id(key)]
        return value

    def setdefault(self, key: Any, default: Any) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            self[key] = default
            return default
        return value

    def clear(self):
        self._entries.clear()

    def _lookup(self, key: Any) -> Any:
        entry = self._entries.get(id(key))
        # A dead reference means the id has been reused by a new object.
        if entry is None or entry[0]() is not key:
            return _MISSING
        return entry[1]

    def _reference(self, key: Any) -> Callable[[], Any]:
        key_id = id(key)
        table_ref = weakref.ref(self)

        def discard(reference):
            table = table_ref()
            if table is None:
                return
            entry = table._entries.get(key_id)
            if entry is not None and entry[0] is reference:
                del table._entries[key_id]

        try:
            return weakref.ref(key, discard)
        except TypeError:
            return _StrongReference(key)

"""Memoization of pure functions keyed by their call arguments.

Caches are owned by the memoized function's identity: wrapping the same
function twice yields two wrappers sharing one cache, while two distinct
functions never share entries even when called with identical arguments.

The wrapped function must be pure, and its arguments must be faithfully
represented by the key function. Neither condition is checked; violating them
produces stale or colliding cache entries.
"""

import dataclasses
import functools
import inspect
import json
import logging
from typing import Any, Callable, Hashable, Optional, TypeVar

from serviceable.identity import IdentityTable
from serviceable.producers import describe

__all__ = ["KeyFunction", "Memoizer", "canonical_key"]

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

KeyFunction = Callable[..., Hashable]


def canonical_key(*args: Any, **kwargs: Any) -> str:
    """Encode call arguments into a canonical, value-based string.

    Positional order is significant and keyword arguments are sorted by name.
    Objects are encoded by their type's qualified name and their fields, so
    two distinct objects holding equal values produce the same key.

    Example:
        >>> canonical_key(1, [2, 3], flag=True)
        '[[1,[2,3]],{"flag":true}]'
    """
    return _dump(_encode([args, kwargs], set()))


def _encode(value: Any, active: set[int]) -> Any:
    if value is None or isinstance(value, (str, int, float)):
        return value
    if inspect.isclass(value) or inspect.isroutine(value):
        return {"__callable__": _qualified_name(value)}
    if id(value) in active:
        return {"__cycle__": type(value).__qualname__}

    active.add(id(value))
    try:
        return _encode_container(value, active)
    finally:
        active.discard(id(value))


def _encode_container(value: Any, active: set[int]) -> Any:
    if isinstance(value, (list, tuple)):
        return [_encode(item, active) for item in value]
    if isinstance(value, dict):
        # JSON object keys are strings; other keys are tagged with their type.
        return {
            key if isinstance(key, str) else _tagged_key(key, active): _encode(item, active)
            for key, item in value.items()
        }
    if isinstance(value, (set, frozenset)):
        items = [_encode(item, active) for item in value]
        return {"__set__": sorted(items, key=_dump)}
    if dataclasses.is_dataclass(value):
        state = {
            field.name: getattr(value, field.name)
            for field in dataclasses.fields(value)
        }
        return _encode_object(value, state, active)
    if hasattr(value, "__dict__"):
        return _encode_object(value, vars(value), active)
    state = _slot_state(value)
    if state:
        return _encode_object(value, state, active)
    return repr(value)


def _encode_object(value: Any, state: dict[str, Any], active: set[int]) -> Any:
    return {
        "__type__": _qualified_name(type(value)),
        "state": _encode_container(state, active),
    }


def _slot_state(value: Any) -> dict[str, Any]:
    state = {}
    for cls in type(value).__mro__:
        slots = getattr(cls, "__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if name not in ("__weakref__", "__dict__") and hasattr(value, name):
                state[name] = getattr(value, name)
    return state


def _qualified_name(target: Any) -> str:
    module = getattr(target, "__module__", None)
    name = getattr(target, "__qualname__", None) or repr(target)
    return f"{module}.{name}" if module else name


def _tagged_key(key: Any, active: set[int]) -> str:
    return f"{type(key).__qualname__}:{_dump(_encode(key, active))}"


def _dump(encoded: Any) -> str:
    return json.dumps(encoded, sort_keys=True, separators=(",", ":"))


class Memoizer:
    """Identity-keyed table of per-function result caches.

    Args:
        key: Default key function for wrappers that do not supply their own.
    """

    def __init__(self, key: KeyFunction = canonical_key):
        self._key = key
        self._caches = IdentityTable()

    def memo(self, fn: F, key: Optional[KeyFunction] = None) -> F:
        """Wrap ``fn`` so that each distinct argument list is computed once.

        Args:
            fn: A pure function.
            key: Optional key function, called with the same arguments as
                ``fn``; defaults to the memoizer's key function.

        Returns:
            A wrapper with the same call signature as ``fn``.

        Example:
            >>> @memoizer.memo
            ... def fib(n):
            ...     return n if n < 2 else fib(n - 1) + fib(n - 2)
        """
        cache: dict[Hashable, Any] = self._caches.setdefault(fn, {})
        make_key = key or self._key

        @functools.wraps(fn)
        def memoized(*args, **kwargs):
            cache_key = make_key(*args, **kwargs)
            try:
                return cache[cache_key]
            except KeyError:
                pass
            result = fn(*args, **kwargs)
            cache[cache_key] = result
            return result

        return memoized

    def refresh(self, fn: Callable[..., Any]):
        """Discard every cached result for ``fn``.

        Accepts either the original function or a wrapper returned by
        :meth:`memo`. Existing wrappers keep working and recompute on their
        next call.
        """
        cache = self._cache_for(fn)
        if cache is not None:
            logger.debug("Refreshing %d cached results of %s", len(cache), describe(fn))
            cache.clear()

    def cache_info(self, fn: Callable[..., Any]) -> int:
        """Return the number of results cached for ``fn``."""
        return len(self._cache_for(fn) or ())

    def clear(self):
        """Refresh every function known to this memoizer."""
        for fn in list(self._caches.keys()):
            self.refresh(fn)

    def __len__(self) -> int:
        return len(self._caches)

    def _cache_for(self, fn: Callable[..., Any]) -> Optional[dict[Hashable, Any]]:
        # Wrappers are found through the __wrapped__ chain set by functools.wraps.
        while fn is not None:
            cache = self._caches.get(fn)
            if cache is not None:
                return cache
            fn = getattr(fn, "__wrapped__", None)
        return None

"""Registration and resolution of injectable services.

A :class:`ServiceRegistry` binds tokens (classes or nullary factories) to
providers and caches the instances they build. The token is its own lookup
key, compared by identity, and is never kept alive by the registry.

Example:
    >>> registry = ServiceRegistry()
    >>> registry.register(Database, make_test_database)
    >>> registry.resolve(Database) is registry.resolve(Database)
    True
    >>> registry.resolve(Database, fresh=True) is registry.resolve(Database)
    False
"""

import logging
from typing import Any, Callable, Optional, TypeVar

from serviceable.domain import Injectable, Producer, Provider
from serviceable.identity import IdentityTable
from serviceable.memo import F, KeyFunction, Memoizer
from serviceable.producers import classify, describe, serve

__all__ = ["ServiceRegistry"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Marks a token bound to itself, so the provider table never holds its key.
_SELF = object()
_MISSING = object()


class ServiceRegistry:
    """Registry of services with singleton and transient resolution.

    The registry owns two identity-keyed tables: the provider bound to each
    token, and the singleton instance cached for it. A cached instance never
    exists without a provider binding.

    Args:
        memoizer: Optional :class:`Memoizer` backing :meth:`memo` and
            :meth:`refresh`. A new one is created if omitted.
    """

    def __init__(self, memoizer: Optional[Memoizer] = None):
        self._providers = IdentityTable()
        self._instances = IdentityTable()
        self._memoizer = memoizer if memoizer is not None else Memoizer()

    def register(self, token: Injectable[T], provider: Optional[Producer] = None):
        """Bind a provider to a token and eagerly build its instance.

        Any previous binding for the token is silently replaced. If the
        provider raises, the exception propagates and no binding is changed.

        Args:
            token: The class or factory used as the registration key.
            provider: Optional alternate producer; defaults to the token.

        Raises:
            ProducerError: If the provider is neither a class nor callable.
        """
        producer = token if provider is None else provider
        instance = serve(producer)

        self._providers[token] = _SELF if producer is token else producer
        self._instances[token] = instance
        logger.debug("Registered %s", describe(token))

    def resolve(self, token: Injectable[T], fresh: bool = False) -> T:
        """Return the instance for a token, registering it on first use.

        Args:
            token: The class or factory to resolve.
            fresh: When true, build and return a new value from the bound
                provider without reading or writing the singleton cache.

        Returns:
            The cached singleton, or a freshly built value if ``fresh``.
        """
        if token not in self._providers:
            logger.debug("Registering %s on first use", describe(token))
            self.register(token)

        if fresh:
            return serve(self._producer_for(token))

        instance = self._instances.get(token, _MISSING)
        if instance is _MISSING:
            instance = serve(self._producer_for(token))
            self._instances[token] = instance

        return instance

    def unregister(self, token: Injectable[Any], drop_provider: bool = False):
        """Forget the cached instance for a token.

        Args:
            token: The registration key.
            drop_provider: Also remove the provider binding. The next
                resolution then registers the token against itself.
                Otherwise the next resolution rebuilds from the existing
                provider.
        """
        self._instances.pop(token, None)
        if drop_provider:
            self._providers.pop(token, None)
        logger.debug(
            "Unregistered %s%s",
            describe(token),
            " and its provider" if drop_provider else "",
        )

    def app(self, token: Injectable[T], fresh: bool = False) -> T:
        """Alias for :meth:`resolve`."""
        return self.resolve(token, fresh)

    def provides(self, provider: Optional[Producer] = None) -> Callable:
        """Decorator to register a class or factory under its own name.

        Args:
            provider: Optional alternate producer for the decorated token.

        Returns:
            A decorator that registers its target and returns it unchanged.

        Example:
            @registry.provides()
            class Clock:
                ...
        """

        def decorator(target):
            self.register(target, provider)
            return target

        return decorator

    def memo(self, fn: F, key: Optional[KeyFunction] = None) -> F:
        """Memoize a pure function; see :meth:`Memoizer.memo`."""
        return self._memoizer.memo(fn, key)

    def refresh(self, fn: Callable[..., Any]):
        """Discard a memoized function's cache; see :meth:`Memoizer.refresh`."""
        self._memoizer.refresh(fn)

    def is_registered(self, token: Injectable[Any]) -> bool:
        return token in self._providers

    def has_instance(self, token: Injectable[Any]) -> bool:
        return token in self._instances

    def provider_for(self, token: Injectable[T]) -> Optional[Provider]:
        """Describe the provider bound to a token, or ``None`` if unbound."""
        if token not in self._providers:
            return None
        producer = self._producer_for(token)
        return Provider(token, producer, classify(producer))

    def clear(self):
        """Drop every binding, instance and memoized result."""
        self._instances.clear()
        self._providers.clear()
        self._memoizer.clear()

    def __contains__(self, token: Injectable[Any]) -> bool:
        return self.is_registered(token)

    def __len__(self) -> int:
        return len(self._providers)

    def _producer_for(self, token: Injectable[T]) -> Producer:
        producer = self._providers[token]
        return token if producer is _SELF else producer

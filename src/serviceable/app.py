"""Convenience entry point for resolving services.

Applications normally build a :class:`ServiceRegistry` at their composition
root and pass it where it is needed. ``app`` exists for call sites that only
want a service, and falls back to a lazily created default registry.
"""

from typing import Optional, TypeVar

from serviceable.domain import Injectable
from serviceable.registry import ServiceRegistry

__all__ = ["app", "get_default_registry", "reset_default_registry"]

T = TypeVar("T")

_default_registry: Optional[ServiceRegistry] = None


def get_default_registry() -> ServiceRegistry:
    """Return the default registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ServiceRegistry()
    return _default_registry


def reset_default_registry():
    """Discard the default registry (useful for testing)."""
    global _default_registry
    _default_registry = None


def app(
    token: Injectable[T],
    fresh: bool = False,
    registry: Optional[ServiceRegistry] = None,
) -> T:
    """Get an instance of a service, registering it if necessary.

    Args:
        token: The class or factory to resolve.
        fresh: Build a new value instead of returning the singleton.
        registry: The registry to resolve from; defaults to
            :func:`get_default_registry`.

    Returns:
        The resolved service.

    Example:
        >>> app(Counter).up()
        >>> app(Counter).count
        1
    """
    if registry is None:
        registry = get_default_registry()
    return registry.resolve(token, fresh)

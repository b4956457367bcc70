"""Serviceable: a small identity-keyed service registry.

Serviceable resolves injectables (classes with nullary constructors, or
nullary factory functions) into cached instances. The class or function is
its own registration key; no string names or type introspection are
involved. A companion memoizer caches pure functions by their arguments.

Key Features:
    - Singleton resolution with auto-registration on first use
    - Transient (``fresh``) resolution that bypasses the singleton cache
    - Alternate providers bound to a token, replaced by re-registration
    - Weak, identity-keyed tables that never keep a token alive
    - Argument-keyed memoization with explicit refresh

Basic Usage:
    >>> from serviceable import ServiceRegistry
    >>>
    >>> registry = ServiceRegistry()
    >>>
    >>> class Counter:
    ...     def __init__(self):
    ...         self.count = 0
    >>>
    >>> registry.resolve(Counter) is registry.resolve(Counter)
    True

The package consists of:
    - registry: The ServiceRegistry and its register/resolve/unregister operations
    - producers: Classification and invocation of producers
    - memo: Argument-keyed memoization
    - identity: Weak identity-keyed tables
    - app: Convenience entry point and default registry
    - domain: Provider records and explicit producer tags
    - errors: Package exceptions
"""

from serviceable.app import app, get_default_registry, reset_default_registry
from serviceable.domain import Class, Factory, Injectable, Provider, ProducerKind
from serviceable.errors import ProducerError, RegistryError
from serviceable.memo import Memoizer, canonical_key
from serviceable.producers import classify
from serviceable.registry import ServiceRegistry

__all__ = [
    "ServiceRegistry",
    "Memoizer",
    "canonical_key",
    "classify",
    "app",
    "get_default_registry",
    "reset_default_registry",
    "Class",
    "Factory",
    "Injectable",
    "Provider",
    "ProducerKind",
    "ProducerError",
    "RegistryError",
]

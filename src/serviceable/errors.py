"""Exceptions raised by the registry itself.

Errors raised by producers or memoized functions are never wrapped; they
reach the caller unchanged.
"""

__all__ = ["RegistryError", "ProducerError"]


class RegistryError(Exception):
    """Base class for errors raised by serviceable."""

    pass


class ProducerError(RegistryError, TypeError):
    """Raised when a producer cannot be classified as a class or a factory."""

    pass

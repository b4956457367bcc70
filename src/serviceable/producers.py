"""Classification and invocation of producers.

A producer is either a class, constructed with no arguments, or a factory,
called with no arguments. ``serve`` is the only place where the registry
actually builds a value, so eager registration and lazy resolution share the
same construction semantics.
"""

import inspect
import logging
from typing import Any, Callable

from serviceable.domain import Class, Factory, Producer, ProducerKind
from serviceable.errors import ProducerError

__all__ = ["classify", "serve", "unwrap", "describe"]

logger = logging.getLogger(__name__)


def classify(producer: Producer) -> ProducerKind:
    """Decide how a producer is invoked.

    Explicit ``Class``/``Factory`` tags win. Otherwise classes are
    constructed and any other callable is called directly. The result is not
    cached; classification is re-derived on every call.

    Args:
        producer: A class, a nullary callable, or a tagged producer.

    Returns:
        The producer's :class:`ProducerKind`.

    Raises:
        ProducerError: If the producer is neither a class nor callable.

    Example:
        >>> classify(dict)                    # ProducerKind.CLASS
        >>> classify(lambda: {})              # ProducerKind.FACTORY
        >>> classify(Factory(dict))           # ProducerKind.FACTORY
    """
    if isinstance(producer, Class):
        return ProducerKind.CLASS
    if isinstance(producer, Factory):
        return ProducerKind.FACTORY
    if inspect.isclass(producer):
        return ProducerKind.CLASS
    if callable(producer):
        return ProducerKind.FACTORY
    raise ProducerError(f"{producer!r} is not a class or factory")


def unwrap(producer: Producer) -> Callable[[], Any]:
    """Strip an explicit kind tag, returning the underlying callable."""
    if isinstance(producer, (Class, Factory)):
        return producer.target
    return producer


def serve(producer: Producer) -> Any:
    """Invoke a producer with no arguments and return what it builds.

    Exceptions raised by the producer propagate unchanged.

    Raises:
        ProducerError: If the producer cannot be classified.
    """
    kind = classify(producer)
    target = unwrap(producer)
    logger.debug("Building %s from %s", kind.value, describe(target))
    return target()


def describe(target: Any) -> str:
    """Return a readable name for a token or producer, for log messages."""
    return getattr(target, "__qualname__", None) or repr(target)

"""Domain models used throughout the registry."""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TypeVar, Union

from serviceable.errors import ProducerError

__all__ = ["Injectable", "ProducerKind", "Class", "Factory", "Provider"]

T = TypeVar("T")

Injectable = Callable[[], T]


class ProducerKind(Enum):
    """How a producer is invoked when the registry needs a value from it."""

    CLASS = "class"
    FACTORY = "factory"


@dataclass(frozen=True)
class Class:
    """Explicitly tags a producer as a class to be constructed.

    Attributes:
        target: The class. Its constructor is called with no arguments.

    Example:
        >>> registry.register(Repository, Class(InMemoryRepository))
    """

    target: type

    def __post_init__(self):
        if not inspect.isclass(self.target):
            raise ProducerError(f"{self.target!r} is not a class")


@dataclass(frozen=True)
class Factory:
    """Explicitly tags a producer as a plain nullary factory.

    Attributes:
        target: Any callable, invoked with no arguments.

    Example:
        >>> registry.register(Settings, Factory(load_settings))
    """

    target: Callable[[], Any]

    def __post_init__(self):
        if not callable(self.target):
            raise ProducerError(f"{self.target!r} is not callable")


Producer = Union[Class, Factory, Callable[[], Any]]


@dataclass(frozen=True)
class Provider:
    """The producer currently bound to a token.

    Attributes:
        token: The registration key.
        producer: The producer invoked to build values for ``token``. This is
            the token itself unless an alternate producer was registered.
        kind: How ``producer`` is invoked.
    """

    token: Any
    producer: Producer
    kind: ProducerKind

"""Example provider abstract base class.

An ExamplesProvider produces one example instance of the type it is
declared for. Providers are registered against a type in an
ExampleRegistry and looked up whenever an operation declares that type as
its request body or as a response.

Example:
    >>> class PersonExample(ExamplesProvider[Person]):
    ...     def get_examples(self) -> Person:
    ...         return Person(id=1, first_name="Jane")
    >>>
    >>> registry.register_provider(PersonExample)
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar, get_args, get_origin

T = TypeVar("T")


class ExamplesProvider(ABC, Generic[T]):
    """Abstract base class for all example providers.

    Subclass with a concrete type parameter (``ExamplesProvider[Person]``)
    so registries can infer which type the provider serves.

    Thread Safety:
        A provider instance registered directly is shared by every
        operation that resolves it; get_examples() must not depend on
        mutable shared state. Register a factory instead to get a fresh
        instance per resolution.
    """

    @abstractmethod
    def get_examples(self) -> Optional[T]:
        """Produce one example value.

        Returns:
            Example instance, or None to leave the document untouched
        """
        pass


class StaticExamplesProvider(ExamplesProvider[Any]):
    """Provider returning a fixed, pre-built example value."""

    def __init__(self, example: Any):
        self.example = example

    def get_examples(self) -> Any:
        return self.example

    def __repr__(self) -> str:
        return f"StaticExamplesProvider({self.example!r})"


def is_examples_provider(obj: Any) -> bool:
    """Check whether an object can act as a provider instance (duck-typed)."""
    return not isinstance(obj, type) and callable(getattr(obj, "get_examples", None))


def example_type_of(provider_cls: type) -> Optional[Any]:
    """Infer T from a class deriving from ``ExamplesProvider[T]``.

    Args:
        provider_cls: Provider class

    Returns:
        The declared example type, or None if it cannot be inferred

    Example:
        >>> example_type_of(PersonExample)
        <class 'Person'>
    """
    for klass in getattr(provider_cls, "__mro__", (provider_cls,)):
        for base in getattr(klass, "__orig_bases__", ()):
            origin = get_origin(base)
            if not isinstance(origin, type) or not issubclass(origin, ExamplesProvider):
                continue
            args = get_args(base)
            if args and not isinstance(args[0], TypeVar):
                return args[0]
    return None

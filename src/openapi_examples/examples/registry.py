"""Type-keyed registry of example providers.

The registry stands in for the host's dependency-injection container: it
maps a *declared* type (as written in a type annotation) to the provider
that produces examples for it. Lookups use the exact parameterized type, so
``list[str]`` and ``list[int]`` are different keys, while spellings of the
same type (``typing.List[str]`` / ``list[str]``, ``Optional[X]`` /
``X | None``) share one key.

Example:
    # Register a provider class (example type inferred from its base)
    registry.register_provider(PersonExample)

    # Register an instance or a factory against an explicit type
    registry.register(list[str], StaticExamplesProvider(["Hello", "there"]))
    registry.register(Person, lambda: PersonExample(seed=42))

    # Resolve
    provider = registry.resolve(Person)
    if provider is not None:
        example = provider.get_examples()

Any object with a ``resolve(type_)`` method satisfies ExampleResolver
and can be used in place of ExampleRegistry (e.g., an adapter over a real
DI container).
"""

import threading
import types
from typing import (
    Annotated,
    Any,
    Callable,
    Hashable,
    Optional,
    Protocol,
    Union,
    get_args,
    get_origin,
    runtime_checkable,
)

from ..core.errors import RegistrationError
from ..core.logging import get_logger
from .providers import ExamplesProvider, example_type_of, is_examples_provider

logger = get_logger(__name__)

ProviderFactory = Callable[[], ExamplesProvider]

_UNION_TYPES: tuple[Any, ...] = (Union, types.UnionType)


@runtime_checkable
class ExampleResolver(Protocol):
    """Capability lookup: declared type -> example provider."""

    def resolve(self, type_: Any) -> Optional[ExamplesProvider]:
        """Return the provider registered for a type, or None."""
        ...


def type_key(tp: Any) -> Hashable:
    """Compute the canonical registry key for a type annotation.

    Args:
        tp: Type or typing construct (e.g., Person, list[str], Optional[Title])

    Returns:
        Hashable key; equal for equivalent spellings of the same type

    Example:
        >>> type_key(typing.List[str]) == type_key(list[str])
        True
        >>> type_key(Optional[int]) == type_key(int | None)
        True
    """
    origin = get_origin(tp)
    if origin is None:
        return tp

    args = get_args(tp)
    if origin is Annotated:
        return type_key(args[0])
    if origin in _UNION_TYPES:
        return (Union, frozenset(type_key(arg) for arg in args))
    return (origin, tuple(type_key(arg) for arg in args))


def unwrap_optional(tp: Any) -> Optional[Any]:
    """Get the underlying type of ``Optional[X]``, or None if tp is not optional."""
    if get_origin(tp) is Annotated:
        return unwrap_optional(get_args(tp)[0])
    if get_origin(tp) not in _UNION_TYPES:
        return None

    args = get_args(tp)
    non_none = tuple(arg for arg in args if arg is not type(None))
    if len(non_none) == len(args) or not non_none:
        return None
    if len(non_none) == 1:
        return non_none[0]
    return Union[non_none]


def describe_type(tp: Any) -> str:
    """Readable name of a type annotation, for logs and error messages."""
    if isinstance(tp, type) and not get_args(tp):
        return tp.__name__
    return repr(tp).replace("typing.", "")


class ExampleRegistry:
    """Registry of example providers keyed by declared type.

    Thread Safety:
        Registration is serialized with a lock and replaces the lookup
        table copy-on-write, so resolve() reads a consistent table without
        locking. Populate the registry at startup; resolution is safe from
        any number of threads.
    """

    def __init__(self) -> None:
        self._providers: dict[Hashable, tuple[Any, object]] = {}
        self._lock = threading.Lock()

    def register(self, type_: Any, provider: Any) -> None:
        """Register a provider instance or factory for a type.

        Args:
            type_: Declared type the provider serves
            provider: ExamplesProvider instance (shared), or a provider
                class / zero-argument callable (called on every resolve)

        Raises:
            RegistrationError: If provider is neither a provider nor a factory
        """
        if is_examples_provider(provider):
            entry: object = provider
            kind = "instance"
        elif isinstance(provider, type):
            if not callable(getattr(provider, "get_examples", None)):
                raise RegistrationError(
                    f"Class {provider.__name__} does not implement get_examples()"
                )
            entry = provider
            kind = "factory"
        elif callable(provider):
            entry = provider
            kind = "factory"
        else:
            raise RegistrationError(
                f"Object of type {type(provider).__name__} is not an "
                "ExamplesProvider or a provider factory"
            )

        key = self._key(type_)
        with self._lock:
            if key in self._providers:
                logger.warning(
                    f"Example provider for {describe_type(type_)} already registered. Overwriting"
                )
            providers = dict(self._providers)
            providers[key] = (type_, (kind, entry))
            self._providers = providers

        logger.debug(f"Registered example {kind} for {describe_type(type_)}")

    def register_provider(
        self, provider_cls: type, type_: Optional[Any] = None
    ) -> type:
        """Register a provider class, inferring the example type from its base.

        Args:
            provider_cls: Class deriving from ``ExamplesProvider[T]``
            type_: Explicit example type (default: inferred T)

        Returns:
            provider_cls, so this can be used as a class decorator

        Raises:
            RegistrationError: If the example type cannot be inferred
        """
        if type_ is None:
            type_ = example_type_of(provider_cls)
        if type_ is None:
            raise RegistrationError(
                f"Cannot infer example type for {provider_cls.__name__}: "
                "subclass ExamplesProvider[T] or pass the type explicitly"
            )
        self.register(type_, provider_cls)
        return provider_cls

    def resolve(self, type_: Any) -> Optional[ExamplesProvider]:
        """Resolve the provider for a declared type.

        The exact type is tried first; for ``Optional[X]`` the lookup falls
        back to ``X``. A miss is not an error.

        Args:
            type_: Declared type

        Returns:
            Provider instance, or None if nothing is registered

        Raises:
            RegistrationError: If a registered factory returns something
                that is not a provider
        """
        providers = self._providers
        entry = self._lookup(providers, type_)
        if entry is None:
            inner = unwrap_optional(type_)
            if inner is not None:
                entry = self._lookup(providers, inner)

        if entry is None:
            logger.debug(f"No example provider registered for {describe_type(type_)}")
            return None

        kind, target = entry[1]
        if kind == "instance":
            return target

        provider = target()
        if not is_examples_provider(provider):
            raise RegistrationError(
                f"Factory registered for {describe_type(entry[0])} returned "
                f"{type(provider).__name__}, not an ExamplesProvider"
            )
        return provider

    def unregister(self, type_: Any) -> bool:
        """Remove the provider for a type.

        Returns:
            True if a provider was removed
        """
        key = self._key(type_)
        with self._lock:
            if key not in self._providers:
                return False
            providers = dict(self._providers)
            del providers[key]
            self._providers = providers
        return True

    def is_registered(self, type_: Any) -> bool:
        """Check if a provider is registered for exactly this type."""
        return self._lookup(self._providers, type_) is not None

    def list_types(self) -> list[str]:
        """List the registered types, by readable name.

        Returns:
            Sorted list of type names
        """
        return sorted(describe_type(type_) for type_, _ in self._providers.values())

    def clear(self) -> None:
        """Remove every registration."""
        with self._lock:
            self._providers = {}

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, type_: Any) -> bool:
        return self.is_registered(type_)

    @staticmethod
    def _key(type_: Any) -> Hashable:
        key = type_key(type_)
        try:
            hash(key)
        except TypeError as e:
            raise RegistrationError(f"Type {type_!r} cannot be used as a registry key") from e
        return key

    @staticmethod
    def _lookup(providers: dict, type_: Any) -> Optional[tuple[Any, object]]:
        try:
            return providers.get(type_key(type_))
        except TypeError:
            # Unhashable descriptor: nothing can be registered under it
            return None


# Process-wide registry used when no registry is passed explicitly
default_registry = ExampleRegistry()


def get_default_registry() -> ExampleRegistry:
    """Get the process-wide example registry."""
    return default_registry


def register_examples_provider(
    provider_cls: Optional[type] = None,
    *,
    type_: Optional[Any] = None,
    registry: Optional[ExampleRegistry] = None,
):
    """Class decorator registering a provider class.

    Usable bare or with arguments:

        @register_examples_provider
        class PersonExample(ExamplesProvider[Person]): ...

        @register_examples_provider(type_=list[str], registry=my_registry)
        class GreetingExample(ExamplesProvider[list[str]]): ...

    Args:
        provider_cls: Provider class (when used bare)
        type_: Explicit example type (default: inferred)
        registry: Target registry (default: default_registry)

    Returns:
        The class itself, or a decorator when called with arguments
    """
    target = registry if registry is not None else default_registry

    def decorator(cls: type) -> type:
        return target.register_provider(cls, type_=type_)

    if provider_cls is not None:
        return decorator(provider_cls)
    return decorator

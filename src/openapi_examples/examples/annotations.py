"""Explicit example annotations for endpoints.

Decorators attach an example provider to one response status code or to
the request body of an endpoint, or of a class or router grouping several
endpoints. An annotated slot is *overridden*: the registry-driven filter
leaves it to the annotation filter.

Example:
    @app.get("/people/{person_id}", response_model=Person)
    @response_example(200, PersonExample, naming=NamingPolicy.CAMEL_CASE)
    @response_example(404, NotFoundExample)
    def get_person(person_id: int) -> Person:
        ...

The decorators record metadata and return the target unchanged, so they
compose with any framework decorator.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, TypeVar, Union

from ..core.serialization import Converter, NamingPolicy
from .context import REQUEST_SLOT, ExampleLocation, OverrideKey

# Attribute holding the annotations on a decorated object
ANNOTATIONS_ATTR = "__openapi_examples__"

F = TypeVar("F")


@dataclass(frozen=True)
class ExampleAnnotation:
    """One explicit example, bound to a response status code or the request.

    Attributes:
        location: REQUEST or RESPONSE
        provider: ExamplesProvider instance, provider class or factory
        status_code: Target status code (responses only)
        type: Declared payload type (informational for requests)
        naming: Naming policy override for this example
        converters: Extra converters for this example
    """

    location: ExampleLocation
    provider: Any
    status_code: Optional[int] = None
    type: Any = None
    naming: Optional[NamingPolicy] = None
    converters: Optional[Mapping[type, Converter]] = None

    @property
    def slot(self) -> Union[int, str]:
        if self.location == ExampleLocation.RESPONSE:
            return int(self.status_code)
        return REQUEST_SLOT

    @property
    def override_key(self) -> OverrideKey:
        return OverrideKey(self.location, self.slot)


def _attach(target: F, annotation: ExampleAnnotation) -> F:
    existing = tuple(getattr(target, ANNOTATIONS_ATTR, ()))
    setattr(target, ANNOTATIONS_ATTR, existing + (annotation,))
    return target


def response_example(
    status_code: int,
    provider: Any,
    naming: Optional[NamingPolicy] = None,
    converters: Optional[Mapping[type, Converter]] = None,
):
    """Attach an explicit response example for a status code.

    Args:
        status_code: Response status code the example documents
        provider: ExamplesProvider instance, provider class or factory
        naming: Naming policy override for this example
        converters: Extra converters for this example

    Returns:
        Decorator returning its target unchanged
    """
    annotation = ExampleAnnotation(
        location=ExampleLocation.RESPONSE,
        provider=provider,
        status_code=int(status_code),
        naming=naming,
        converters=converters,
    )

    def decorator(target: F) -> F:
        return _attach(target, annotation)

    return decorator


def request_example(
    type_: Any,
    provider: Any,
    naming: Optional[NamingPolicy] = None,
    converters: Optional[Mapping[type, Converter]] = None,
):
    """Attach an explicit request body example.

    Args:
        type_: Declared request body type
        provider: ExamplesProvider instance, provider class or factory
        naming: Naming policy override for this example
        converters: Extra converters for this example

    Returns:
        Decorator returning its target unchanged
    """
    annotation = ExampleAnnotation(
        location=ExampleLocation.REQUEST,
        provider=provider,
        type=type_,
        naming=naming,
        converters=converters,
    )

    def decorator(target: F) -> F:
        return _attach(target, annotation)

    return decorator


def get_annotations(target: Any) -> tuple[ExampleAnnotation, ...]:
    """Get the annotations recorded on one object (function, class, router)."""
    if target is None:
        return ()
    # Bound methods expose their function's attributes
    return tuple(getattr(target, ANNOTATIONS_ATTR, ()))


def collect_annotations(endpoint: Any, *containers: Any) -> tuple[ExampleAnnotation, ...]:
    """Merge the annotations of an endpoint and the objects grouping it.

    Per slot, the endpoint wins over its containers, earlier containers
    win over later ones, and on a single object the outermost (last
    applied) decorator wins.

    Args:
        endpoint: Endpoint function
        *containers: Class and/or router objects, innermost first

    Returns:
        One annotation per claimed slot
    """
    merged: dict[OverrideKey, ExampleAnnotation] = {}
    for target in (endpoint,) + containers:
        for annotation in reversed(get_annotations(target)):
            merged.setdefault(annotation.override_key, annotation)
    return tuple(merged.values())


def compute_overrides(annotations: Any) -> frozenset[OverrideKey]:
    """Precompute the set of slots claimed by explicit annotations."""
    return frozenset(annotation.override_key for annotation in annotations)

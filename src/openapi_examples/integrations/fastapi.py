"""FastAPI integration.

Hooks example generation into FastAPI's OpenAPI document generation:
``install_examples`` wraps ``app.openapi`` so the first request for the
document runs every operation through the example filters, and caches the
result like FastAPI does.

Example:
    from fastapi import FastAPI
    from openapi_examples import ExampleRegistry, install_examples

    registry = ExampleRegistry()
    registry.register_provider(PersonExample)

    app = FastAPI()

    @app.get("/people/{person_id}", response_model=Person)
    def get_person(person_id: int) -> Person:
        ...

    install_examples(app, registry)

Router-level annotations are lost when FastAPI copies routes into the app;
use ``include_router`` from this module to keep them.
"""

import threading
from typing import Any, Iterable, Iterator, Optional, Sequence

from fastapi import FastAPI, params
from fastapi.routing import APIRoute, APIRouter

from ..core.config import ExamplesSettings, load_settings
from ..core.formatting import ExampleFormatter
from ..core.logging import get_logger
from ..core.serialization import SerializerSettings
from ..examples.annotations import collect_annotations
from ..examples.context import (
    ApiParameter,
    ApiResponseType,
    OperationFilter,
    OperationFilterContext,
    ParameterSource,
)
from ..examples.filters import (
    AnnotatedExamplesOperationFilter,
    ProviderExamplesOperationFilter,
)
from ..examples.registry import ExampleResolver, get_default_registry
from ..examples.request import RequestExample
from ..examples.response import ResponseExample
from ..openapi.models import Operation

logger = get_logger(__name__)

# Attribute on APIRoute holding the routers it was included from
ROUTE_CONTAINERS_ATTR = "__openapi_examples_containers__"

# Attribute marking an app whose openapi() already applies examples
INSTALLED_ATTR = "__openapi_examples_installed__"

# Attribute holding the last document published with examples
SCHEMA_ATTR = "__openapi_examples_schema__"

# FastAPI's default status code when a route does not declare one
DEFAULT_STATUS_CODE = 200


def include_router(target: Any, router: APIRouter, **kwargs: Any) -> None:
    """Include a router, keeping its example annotations for its routes.

    Drop-in replacement for ``target.include_router(router, **kwargs)``
    where target is a FastAPI app or an APIRouter.

    Args:
        target: FastAPI app or APIRouter receiving the routes
        router: Router (possibly decorated with @response_example)
        **kwargs: Passed through to include_router (prefix, tags, ...)
    """
    sources = [route for route in router.routes if isinstance(route, APIRoute)]
    routes = target.router.routes if isinstance(target, FastAPI) else target.routes
    before = len(routes)
    target.include_router(router, **kwargs)

    # FastAPI copies each APIRoute, in order, into a new route object
    added = [route for route in routes[before:] if isinstance(route, APIRoute)]
    for source, route in zip(sources, added):
        containers = getattr(source, ROUTE_CONTAINERS_ATTR, ())
        setattr(route, ROUTE_CONTAINERS_ATTR, containers + (router,))


def _containers(route: APIRoute) -> tuple[Any, ...]:
    containers: tuple[Any, ...] = ()

    # Class-based endpoints: annotations on the owning class apply too
    owner = getattr(route.endpoint, "__self__", None)
    if owner is not None:
        containers += (owner if isinstance(owner, type) else type(owner),)

    # Routes copied from an included router carry the originals' containers
    return containers + tuple(getattr(route, ROUTE_CONTAINERS_ATTR, ()))


def _walk_dependant(dependant: Any) -> Iterator[Any]:
    """Yield a dependant and all of its sub-dependencies, depth first."""
    yield dependant
    for sub_dependant in dependant.dependencies:
        yield from _walk_dependant(sub_dependant)


def _parameter_source(field: Any, default: ParameterSource) -> ParameterSource:
    if isinstance(field.field_info, params.Form):
        return ParameterSource.FORM
    return default


def build_context(
    route: APIRoute, operation_id: Optional[str] = None
) -> OperationFilterContext:
    """Build the filter context for a FastAPI route.

    Args:
        route: Route to describe
        operation_id: Operation identifier from the generated document

    Returns:
        OperationFilterContext with declared parameters, responses and
        explicit annotations
    """
    dependants = list(_walk_dependant(route.dependant))
    parameters = []

    # A single non-embedded body parameter is the whole request body
    body_params = [field for dependant in dependants for field in dependant.body_params]
    if len(body_params) == 1 and not getattr(body_params[0].field_info, "embed", False):
        field = body_params[0]
        parameters.append(
            ApiParameter(
                name=field.name,
                type=field.field_info.annotation,
                source=_parameter_source(field, ParameterSource.BODY),
            )
        )

    seen: set[tuple[ParameterSource, str]] = set()
    for source, attr in (
        (ParameterSource.PATH, "path_params"),
        (ParameterSource.QUERY, "query_params"),
        (ParameterSource.HEADER, "header_params"),
        (ParameterSource.COOKIE, "cookie_params"),
    ):
        for dependant in dependants:
            for field in getattr(dependant, attr):
                # Shared sub-dependencies declare the same parameter once
                if (source, field.name) in seen:
                    continue
                seen.add((source, field.name))
                parameters.append(
                    ApiParameter(name=field.name, type=field.field_info.annotation, source=source)
                )

    responses = []
    if route.response_model is not None:
        responses.append(
            ApiResponseType(
                status_code=int(route.status_code or DEFAULT_STATUS_CODE),
                type=route.response_model,
            )
        )

    for code, info in (route.responses or {}).items():
        if not str(code).isdigit() or not isinstance(info, dict):
            continue
        model = info.get("model")
        if model is not None:
            responses.append(ApiResponseType(status_code=int(code), type=model))

    return OperationFilterContext(
        operation_id=operation_id or route.unique_id,
        parameters=tuple(parameters),
        responses=tuple(responses),
        annotations=collect_annotations(route.endpoint, *_containers(route)),
    )


def apply_examples(
    schema: dict[str, Any],
    routes: Iterable[Any],
    filters: Sequence[OperationFilter],
) -> dict[str, Any]:
    """Run every operation of a generated document through the filters.

    Args:
        schema: OpenAPI document produced by FastAPI (mutated in place)
        routes: The app's routes
        filters: Operation filters, applied in order

    Returns:
        The same schema, for chaining

    Raises:
        SerializationError: If an example cannot be rendered
        ProviderError: If a provider cannot be resolved or fails
    """
    paths = schema.get("paths") or {}
    operations = 0

    for route in routes:
        if not isinstance(route, APIRoute) or not route.include_in_schema:
            continue

        path_item = paths.get(route.path_format)
        if not path_item:
            continue

        for method in sorted(route.methods):
            raw = path_item.get(method.lower())
            if raw is None:
                continue

            operation = Operation.from_dict(raw)
            context = build_context(route, operation_id=operation.operation_id)
            for operation_filter in filters:
                operation_filter.apply(operation, context)

            path_item[method.lower()] = operation.to_dict()
            operations += 1

    logger.info(f"Applied example filters to {operations} operation(s)")
    return schema


def create_filters(
    resolver: Optional[ExampleResolver] = None,
    settings: Optional[ExamplesSettings] = None,
) -> list[OperationFilter]:
    """Create the operation filters enabled by the settings.

    Args:
        resolver: Provider resolver (default: the process-wide registry)
        settings: Library settings (default: ExamplesSettings())

    Returns:
        Filters in application order
    """
    resolver = resolver if resolver is not None else get_default_registry()
    settings = settings or ExamplesSettings()

    formatter = ExampleFormatter()
    serializer_settings = SerializerSettings.from_settings(settings)
    request_example = RequestExample(formatter, serializer_settings)
    response_example = ResponseExample(formatter, serializer_settings)

    filters: list[OperationFilter] = []
    if settings.include_annotations:
        filters.append(
            AnnotatedExamplesOperationFilter(request_example, response_example, resolver)
        )
    if settings.include_providers:
        filters.append(
            ProviderExamplesOperationFilter(resolver, request_example, response_example)
        )
    return filters


def install_examples(
    app: FastAPI,
    registry: Optional[ExampleResolver] = None,
    settings: Optional[ExamplesSettings] = None,
) -> FastAPI:
    """Wrap ``app.openapi`` so generated documents include examples.

    Args:
        app: FastAPI application
        registry: Provider resolver (default: the process-wide registry)
        settings: Library settings (default: load_settings() from the
            OPENAPI_EXAMPLES_* environment)

    Returns:
        The same app, for chaining
    """
    if getattr(app, INSTALLED_ATTR, False):
        logger.warning("Examples already installed on this app; skipping")
        return app

    settings = settings or load_settings()
    if not settings.enabled:
        logger.info("Example generation disabled; OpenAPI document left untouched")
        return app

    filters = create_filters(registry, settings)
    generate_openapi = app.openapi
    lock = threading.Lock()

    # A document generated before install has no examples
    app.openapi_schema = None

    def published() -> Optional[dict[str, Any]]:
        # Clearing app.openapi_schema regenerates, as with plain FastAPI
        schema = getattr(app, SCHEMA_ATTR, None)
        if schema is not None and app.openapi_schema is schema:
            return schema
        return None

    def openapi() -> dict[str, Any]:
        schema = published()
        if schema is not None:
            return schema

        with lock:
            schema = published()
            if schema is not None:
                return schema

            app.openapi_schema = None
            schema = generate_openapi()
            try:
                apply_examples(schema, app.routes, filters)
            except Exception:
                # Do not cache a half-processed document
                app.openapi_schema = None
                raise

            setattr(app, SCHEMA_ATTR, schema)
            app.openapi_schema = schema
            return schema

    app.openapi = openapi  # type: ignore[method-assign]
    setattr(app, INSTALLED_ATTR, True)
    return app

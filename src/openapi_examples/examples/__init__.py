"""Example providers, registry, setters and operation filters.

Public API:
    - ExamplesProvider: Abstract base class for example providers
    - ExampleRegistry: Type-keyed provider registry
    - register_examples_provider: Class decorator for the default registry
    - response_example / request_example: Explicit endpoint annotations
    - RequestExample / ResponseExample: Setters writing into the document
    - ProviderExamplesOperationFilter / AnnotatedExamplesOperationFilter
"""

from .annotations import (
    ExampleAnnotation,
    collect_annotations,
    compute_overrides,
    request_example,
    response_example,
)
from .context import (
    ApiParameter,
    ApiResponseType,
    ExampleLocation,
    OperationFilter,
    OperationFilterContext,
    OverrideKey,
    ParameterSource,
)
from .filters import AnnotatedExamplesOperationFilter, ProviderExamplesOperationFilter
from .providers import ExamplesProvider, StaticExamplesProvider
from .registry import (
    ExampleRegistry,
    ExampleResolver,
    default_registry,
    describe_type,
    get_default_registry,
    register_examples_provider,
    type_key,
)
from .request import RequestExample
from .response import ResponseExample

__all__ = [
    # Providers
    "ExamplesProvider",
    "StaticExamplesProvider",
    # Registry
    "ExampleRegistry",
    "ExampleResolver",
    "default_registry",
    "get_default_registry",
    "register_examples_provider",
    "type_key",
    "describe_type",
    # Annotations
    "ExampleAnnotation",
    "response_example",
    "request_example",
    "collect_annotations",
    "compute_overrides",
    # Context
    "ApiParameter",
    "ApiResponseType",
    "ExampleLocation",
    "OperationFilter",
    "OperationFilterContext",
    "OverrideKey",
    "ParameterSource",
    # Setters
    "RequestExample",
    "ResponseExample",
    # Filters
    "ProviderExamplesOperationFilter",
    "AnnotatedExamplesOperationFilter",
]

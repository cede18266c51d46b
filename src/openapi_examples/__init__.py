"""openapi-examples - example payloads for generated OpenAPI documents.

openapi-examples inspects every operation of a FastAPI application's
OpenAPI document and attaches example request and response payloads,
rendered as JSON or XML to match each media type. Examples come from
providers registered against the declared payload types, or from explicit
annotations on endpoints.

Basic Usage:
    >>> from openapi_examples import ExamplesProvider, ExampleRegistry, install_examples
    >>>
    >>> class PersonExample(ExamplesProvider[Person]):
    ...     def get_examples(self) -> Person:
    ...         return Person(id=1, first_name="Jane")
    >>>
    >>> registry = ExampleRegistry()
    >>> registry.register_provider(PersonExample)
    >>> install_examples(app, registry)

Public API:
    Providers:
        - ExamplesProvider: Base class for example providers
        - ExampleRegistry: Type-keyed provider registry
        - register_examples_provider: Register with the default registry

    Annotations:
        - response_example: Explicit example for a response status code
        - request_example: Explicit example for the request body

    Integration:
        - install_examples: Hook into a FastAPI app's OpenAPI generation

    Configuration:
        - ExamplesSettings, load_settings, NamingPolicy

    Errors:
        - ExamplesError, ConfigError, RegistrationError, SerializationError,
          ProviderError
"""

from .core.config import ExamplesSettings, load_settings
from .core.errors import (
    AttributedError,
    ConfigError,
    ExamplesError,
    ProviderError,
    RegistrationError,
    SerializationError,
)
from .core.logging import configure_logging
from .core.serialization import NamingPolicy, SerializerSettings
from .examples import (
    AnnotatedExamplesOperationFilter,
    ApiParameter,
    ApiResponseType,
    ExampleRegistry,
    ExamplesProvider,
    OperationFilterContext,
    ParameterSource,
    ProviderExamplesOperationFilter,
    RequestExample,
    ResponseExample,
    StaticExamplesProvider,
    default_registry,
    register_examples_provider,
    request_example,
    response_example,
)
from .integrations.fastapi import install_examples
from .openapi import MediaType, Operation, RawExample, RequestBody, Response
from .version import PROVIDER_API_VERSION, __version__

__all__ = [
    # Version
    "__version__",
    "PROVIDER_API_VERSION",
    # Providers
    "ExamplesProvider",
    "StaticExamplesProvider",
    "ExampleRegistry",
    "default_registry",
    "register_examples_provider",
    # Annotations
    "response_example",
    "request_example",
    # Filters and setters
    "ProviderExamplesOperationFilter",
    "AnnotatedExamplesOperationFilter",
    "OperationFilterContext",
    "ApiParameter",
    "ApiResponseType",
    "ParameterSource",
    "RequestExample",
    "ResponseExample",
    # Document model
    "Operation",
    "Response",
    "RequestBody",
    "MediaType",
    "RawExample",
    # Integration
    "install_examples",
    # Configuration
    "ExamplesSettings",
    "load_settings",
    "NamingPolicy",
    "SerializerSettings",
    "configure_logging",
    # Errors
    "ExamplesError",
    "ConfigError",
    "RegistrationError",
    "SerializationError",
    "ProviderError",
    "AttributedError",
]

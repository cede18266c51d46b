"""Operation filters attaching examples to OpenAPI operations.

Two filters run for every operation the host discovers:

- ProviderExamplesOperationFilter resolves providers from the registry by
  the declared request and response types.
- AnnotatedExamplesOperationFilter applies explicit @response_example /
  @request_example annotations.

A slot claimed by an annotation is skipped by the registry-driven filter,
so running both in either order gives the same document.

Failure semantics:
    Misses (no provider, None example, undocumented status code, no
    request body, unsupported media type) are silently skipped. A
    SerializationError, or a ProviderError for a provider that cannot be
    resolved or fails, propagates attributed to the operation and type that
    produced it.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ..core.errors import AttributedError, ExamplesError, ProviderError, RegistrationError
from ..core.logging import get_logger
from ..openapi.models import Operation
from .annotations import ExampleAnnotation
from .context import ExampleLocation, OperationFilterContext
from .providers import ExamplesProvider, is_examples_provider
from .registry import ExampleResolver, describe_type
from .request import RequestExample
from .response import ResponseExample

logger = get_logger(__name__)


@contextmanager
def _attributed(operation: Operation, type_: Any) -> Iterator[None]:
    """Attribute example generation failures to an operation and type."""
    type_name = describe_type(type_) if type_ is not None else None
    try:
        yield
    except AttributedError as e:
        raise e.attributed(operation_id=operation.operation_id, type_name=type_name) from e
    except RegistrationError as e:
        raise ProviderError(
            f"Cannot resolve provider: {e}",
            operation_id=operation.operation_id,
            type_name=type_name,
        ) from e


def _examples_of(provider: ExamplesProvider) -> Any:
    try:
        return provider.get_examples()
    except ExamplesError:
        raise
    except Exception as e:
        raise ProviderError(f"Provider {type(provider).__name__} failed: {e}") from e


class ProviderExamplesOperationFilter:
    """Sets examples from providers registered for the declared types.

    Stateless apart from its collaborators; safe to apply concurrently to
    different operations.
    """

    def __init__(
        self,
        resolver: ExampleResolver,
        request_example: Optional[RequestExample] = None,
        response_example: Optional[ResponseExample] = None,
    ):
        """Initialize the filter.

        Args:
            resolver: Registry (or DI adapter) resolving providers by type
            request_example: Request example setter
            response_example: Response example setter
        """
        self.resolver = resolver
        self.request_example = request_example or RequestExample()
        self.response_example = response_example or ResponseExample()

    def apply(self, operation: Operation, context: OperationFilterContext) -> None:
        """Set examples for every declared response and request body type.

        Args:
            operation: Operation to mutate
            context: Declared types and annotations of the operation

        Raises:
            SerializationError: If an example cannot be rendered
            ProviderError: If a provider cannot be resolved or fails
        """
        for response_type in context.responses:
            if context.has_response_override(response_type.status_code):
                logger.debug(
                    f"{operation}: status {response_type.status_code} has an explicit example"
                )
                continue
            if response_type.type is None:
                continue

            with _attributed(operation, response_type.type):
                example = self._example_for(response_type.type)
                if example is None:
                    continue

                self.response_example.set_response_example_for_status_code(
                    operation, response_type.status_code, example
                )

        for parameter in context.body_parameters():
            if context.has_request_override():
                logger.debug(f"{operation}: request body has an explicit example")
                break

            with _attributed(operation, parameter.type):
                example = self._example_for(parameter.type)
                if example is None:
                    continue

                self.request_example.set_request_example(operation.request_body, example)

    def _example_for(self, type_: Any) -> Any:
        provider = self.resolver.resolve(type_)
        if provider is None:
            return None
        return _examples_of(provider)


class AnnotatedExamplesOperationFilter:
    """Sets examples from explicit endpoint annotations."""

    def __init__(
        self,
        request_example: Optional[RequestExample] = None,
        response_example: Optional[ResponseExample] = None,
        resolver: Optional[ExampleResolver] = None,
    ):
        """Initialize the filter.

        Args:
            request_example: Request example setter
            response_example: Response example setter
            resolver: Optional resolver consulted for annotation provider
                classes before instantiating them directly
        """
        self.request_example = request_example or RequestExample()
        self.response_example = response_example or ResponseExample()
        self.resolver = resolver

    def apply(self, operation: Operation, context: OperationFilterContext) -> None:
        """Apply every annotation collected for the operation.

        Args:
            operation: Operation to mutate
            context: Declared types and annotations of the operation

        Raises:
            SerializationError: If an example cannot be rendered
            ProviderError: If a provider cannot be resolved or fails
        """
        for annotation in context.annotations:
            with _attributed(operation, annotation.type):
                provider = self._provider_for(annotation)
                example = _examples_of(provider)
            if example is None:
                logger.debug(f"{operation}: provider {provider!r} returned no example")
                continue

            with _attributed(operation, annotation.type or type(example)):
                if annotation.location == ExampleLocation.RESPONSE:
                    self.response_example.set_response_example_for_status_code(
                        operation,
                        annotation.status_code,
                        example,
                        naming=annotation.naming,
                        converters=annotation.converters,
                    )
                else:
                    self.request_example.set_request_example(
                        operation.request_body,
                        example,
                        naming=annotation.naming,
                        converters=annotation.converters,
                    )

    def _provider_for(self, annotation: ExampleAnnotation) -> ExamplesProvider:
        provider = annotation.provider
        if is_examples_provider(provider):
            return provider

        if self.resolver is not None and isinstance(provider, type):
            resolved = self.resolver.resolve(provider)
            if resolved is not None:
                return resolved

        try:
            return provider()
        except Exception as e:
            raise ProviderError(f"Cannot create provider {provider!r}: {e}") from e

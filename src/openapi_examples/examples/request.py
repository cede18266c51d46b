"""Request example setter."""

from typing import Any, Mapping, Optional

from ..core.logging import get_logger
from ..core.serialization import Converter, NamingPolicy
from ..openapi.models import Operation, RequestBody
from .base import ExampleSetter

logger = get_logger(__name__)


class RequestExample(ExampleSetter):
    """Sets the example of an operation's request body."""

    def set_request_example(
        self,
        request_body: Optional[RequestBody],
        example: Any,
        naming: Optional[NamingPolicy] = None,
        converters: Optional[Mapping[type, Converter]] = None,
    ) -> bool:
        """Set the example of every media type of a request body.

        Args:
            request_body: Request body to update (None is a no-op)
            example: Example value (None is a no-op)
            naming: Naming policy override for this example
            converters: Extra converters for this example

        Returns:
            True if at least one media type received the example

        Raises:
            SerializationError: If the example cannot be rendered
        """
        if example is None or request_body is None:
            return False

        settings = self.serializer_settings(naming=naming, converters=converters)
        written = self.write_examples(request_body.content, example, settings)
        if written:
            logger.debug(f"Set {written} request example(s)")
        return written > 0

    def set_request_example_for_operation(
        self,
        operation: Operation,
        example: Any,
        naming: Optional[NamingPolicy] = None,
        converters: Optional[Mapping[type, Converter]] = None,
    ) -> bool:
        """Set the request example of an operation, if it has a request body."""
        if operation.request_body is None:
            logger.debug(f"{operation}: no request body to set an example on")
            return False
        return self.set_request_example(
            operation.request_body, example, naming=naming, converters=converters
        )

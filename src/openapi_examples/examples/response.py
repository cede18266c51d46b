"""Response example setter."""

from typing import Any, Mapping, Optional

from ..core.logging import get_logger
from ..core.serialization import Converter, NamingPolicy
from ..openapi.models import Operation
from .base import ExampleSetter

logger = get_logger(__name__)


class ResponseExample(ExampleSetter):
    """Sets the example of the response documented for one status code."""

    def set_response_example_for_status_code(
        self,
        operation: Operation,
        status_code: int,
        example: Any,
        naming: Optional[NamingPolicy] = None,
        converters: Optional[Mapping[type, Converter]] = None,
    ) -> bool:
        """Set the example of every media type of a response.

        A None example, or a status code the operation does not document,
        is a silent no-op: documentation generation must not fail because
        an example targets a response that does not exist.

        Args:
            operation: Operation whose responses are updated
            status_code: Status code of the target response
            example: Example value
            naming: Naming policy override for this example
            converters: Extra converters for this example

        Returns:
            True if at least one media type received the example

        Raises:
            SerializationError: If the example cannot be rendered
        """
        if example is None:
            return False

        response = operation.responses.get(str(status_code))
        if response is None:
            logger.debug(f"{operation}: no response documented for status {status_code}")
            return False

        settings = self.serializer_settings(naming=naming, converters=converters)
        written = self.write_examples(response.content, example, settings)
        if written:
            logger.debug(f"{operation}: set {written} example(s) for status {status_code}")
        return written > 0

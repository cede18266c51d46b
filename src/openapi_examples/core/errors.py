"""Exception hierarchy for openapi-examples.

Almost nothing in example generation is an error: a type without a
registered provider, a status code the operation does not document, or a
provider that returns None are all silent no-ops. The exceptions below cover
what is left - bad configuration, bad registrations and values that cannot
be rendered.

All custom exceptions inherit from ExamplesError, making it easy to catch
all library errors in a single except clause.
"""

from typing import Optional


class ExamplesError(Exception):
    """Base exception for all openapi-examples errors.

    Example:
        try:
            app.openapi()
        except ExamplesError as e:
            print(f"Example generation failed: {e}")
    """

    pass


class ConfigError(ExamplesError):
    """Configuration-related errors.

    Raised when:
    - Config files are missing or cannot be read
    - YAML syntax is invalid
    - Field values are invalid (unknown naming policy, negative indent)
    - Both a config file and a config dict are supplied

    Examples:
        - "Configuration file not found: openapi-examples.yaml"
        - "Invalid settings: naming: Input should be 'preserve', 'camel_case', ..."
    """

    pass


class RegistrationError(ExamplesError):
    """Invalid example provider registrations.

    Raised when:
    - The example type cannot be inferred from a provider class
    - The registered object is neither a provider nor a provider factory

    Examples:
        - "Cannot infer example type for PersonExample: subclass ExamplesProvider[T]"
        - "Object of type int is not an ExamplesProvider or a provider factory"
    """

    pass


class AttributedError(ExamplesError):
    """An example generation failure tied to an operation, type and media type.

    The optional attributes attribute the failure as the error travels
    outwards; each layer fills in what it knows.
    """

    def __init__(
        self,
        message: str,
        *,
        operation_id: Optional[str] = None,
        type_name: Optional[str] = None,
        media_type: Optional[str] = None,
    ):
        self.message = message
        self.operation_id = operation_id
        self.type_name = type_name
        self.media_type = media_type
        super().__init__(self._render())

    def _render(self) -> str:
        context = []
        if self.operation_id:
            context.append(f"operation '{self.operation_id}'")
        if self.type_name:
            context.append(f"type {self.type_name}")
        if self.media_type:
            context.append(f"media type {self.media_type}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"

    def attributed(
        self,
        *,
        operation_id: Optional[str] = None,
        type_name: Optional[str] = None,
        media_type: Optional[str] = None,
    ) -> "AttributedError":
        """Return a copy of this error with missing attribution filled in."""
        return type(self)(
            self.message,
            operation_id=self.operation_id or operation_id,
            type_name=self.type_name or type_name,
            media_type=self.media_type or media_type,
        )


class SerializationError(AttributedError):
    """An example value could not be rendered as JSON or XML.

    Propagates out of document generation: it points at a data-shape or
    converter bug the caller needs to fix.

    Examples:
        - "Cannot serialize value of type Connection; register a converter"
        - "Dictionary key 'first name' is not a valid XML element name"
    """

    pass


class ProviderError(AttributedError):
    """A provider could not be resolved or failed to produce its example.

    Examples:
        - "Cannot resolve provider: Factory for Person returned str, not an ExamplesProvider"
        - "Provider PersonExample failed: database unavailable"
    """

    pass

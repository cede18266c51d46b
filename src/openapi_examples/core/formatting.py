"""Media-type aware example formatting.

Decides how an example is rendered for a given media type and produces the
value stored in a MediaType's example field:

- JSON media types get a RawExample holding the JSON text, so the example
  renders as structured JSON. A top-level string or enum is stored as the
  plain string instead (an enum as its member name).
- XML media types get the XML text as a plain string.
- Any other media type is unsupported and left untouched.
"""

from enum import Enum
from typing import Any, Optional

from ..openapi.models import RawExample
from .errors import SerializationError
from .serialization import SerializerSettings, to_json, to_serializable, to_xml


class MediaTypeFormat(str, Enum):
    """Serialization format of a media type."""

    JSON = "json"
    XML = "xml"
    UNSUPPORTED = "unsupported"


def media_type_format(media_type: str) -> MediaTypeFormat:
    """Classify a media type string.

    Args:
        media_type: Content type, optionally with parameters
            (e.g., "application/json; charset=utf-8")

    Returns:
        MediaTypeFormat for the media type

    Example:
        >>> media_type_format("application/problem+json")
        <MediaTypeFormat.JSON: 'json'>
        >>> media_type_format("text/xml")
        <MediaTypeFormat.XML: 'xml'>
    """
    essence = media_type.split(";", 1)[0].strip().lower()
    if "/" not in essence:
        return MediaTypeFormat.UNSUPPORTED

    kind, subtype = essence.split("/", 1)
    if subtype == "json" or subtype.endswith("+json"):
        return MediaTypeFormat.JSON
    if kind == "application" and subtype.startswith("json"):
        # application/json-patch+json, application/jsonl, ...
        return MediaTypeFormat.JSON
    if subtype == "xml" or subtype.endswith("+xml"):
        return MediaTypeFormat.XML
    return MediaTypeFormat.UNSUPPORTED


class ExampleFormatter:
    """Formats example values for media-type entries.

    Stateless; one instance can be shared by all setters and threads.
    """

    def format(
        self,
        example: Any,
        media_type: str,
        settings: Optional[SerializerSettings] = None,
    ) -> Any:
        """Render an example for a media type.

        Args:
            example: Example value (must not be None)
            media_type: Target media type string
            settings: Serializer settings

        Returns:
            Value to store in the MediaType example field, or None if the
            media type is not supported

        Raises:
            SerializationError: If the example cannot be rendered; the error
                carries the media type
        """
        fmt = media_type_format(media_type)
        try:
            if fmt == MediaTypeFormat.JSON:
                return self.format_json(example, settings)
            if fmt == MediaTypeFormat.XML:
                return to_xml(example, settings)
        except SerializationError as e:
            raise e.attributed(media_type=media_type) from e
        return None

    def format_json(
        self, example: Any, settings: Optional[SerializerSettings] = None
    ) -> Any:
        """Render an example as JSON.

        Args:
            example: Example value
            settings: Serializer settings

        Returns:
            The plain string for top-level strings and enums, otherwise a
            RawExample with the JSON text
        """
        if isinstance(example, (str, Enum)):
            value = to_serializable(example, settings)
            if isinstance(value, str):
                return value
        return RawExample(to_json(example, settings))

"""Shared machinery for writing examples into media-type entries."""

from typing import Any, Mapping, Optional

from ..core.formatting import ExampleFormatter
from ..core.logging import get_logger
from ..core.serialization import (
    DEFAULT_SETTINGS,
    Converter,
    NamingPolicy,
    SerializerSettings,
)
from ..openapi.models import MediaType

logger = get_logger(__name__)


class ExampleSetter:
    """Base class for the request and response example setters.

    Holds the formatter and the base serializer settings; both are
    immutable, so one setter can serve concurrent operations.
    """

    def __init__(
        self,
        formatter: Optional[ExampleFormatter] = None,
        settings: Optional[SerializerSettings] = None,
    ):
        self.formatter = formatter or ExampleFormatter()
        self.settings = settings or DEFAULT_SETTINGS

    def serializer_settings(
        self,
        naming: Optional[NamingPolicy] = None,
        converters: Optional[Mapping[type, Converter]] = None,
    ) -> SerializerSettings:
        """Base settings with per-call overrides applied."""
        return self.settings.with_overrides(naming=naming, converters=converters)

    def write_examples(
        self,
        content: dict[str, MediaType],
        example: Any,
        settings: SerializerSettings,
    ) -> int:
        """Serialize an example for every supported media type and store it.

        Every entry is rendered before any is assigned, so a serialization
        failure leaves all entries untouched.

        Args:
            content: Media type string -> MediaType entries
            example: Example value (not None)
            settings: Serializer settings for this call

        Returns:
            Number of entries written

        Raises:
            SerializationError: If the example cannot be rendered
        """
        rendered = {}
        for media_type in content:
            value = self.formatter.format(example, media_type, settings)
            if value is None:
                logger.debug(f"Skipping unsupported media type {media_type}")
                continue
            rendered[media_type] = value

        for media_type, value in rendered.items():
            content[media_type].example = value

        return len(rendered)

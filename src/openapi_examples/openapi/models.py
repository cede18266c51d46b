"""Data models for the parts of an OpenAPI operation that carry examples.

These are thin views over the raw OpenAPI dictionaries produced by the host
framework. Only the fields example generation touches are modelled; every
other key is kept in ``extra`` and written back unchanged by ``to_dict()``.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class RawExample:
    """Pre-serialized JSON text to be embedded verbatim in the document.

    JSON examples are stored as RawExample so they render as structured
    JSON, while XML examples are stored as plain strings and render as a
    quoted JSON string.
    """

    value: str
    """Serialized JSON text"""

    def parsed(self) -> Any:
        """Parse the JSON text back into Python data."""
        return json.loads(self.value)

    def __str__(self) -> str:
        return self.value


def render_example(example: Any) -> str:
    """Render an example value the way it appears in the JSON document.

    Args:
        example: Value of a MediaType's example field

    Returns:
        JSON text: a RawExample's own text, otherwise ``json.dumps(example)``

    Example:
        >>> render_example(RawExample('{"id": 1}'))
        '{"id": 1}'
        >>> render_example("<int>1</int>")
        '"<int>1</int>"'
    """
    if isinstance(example, RawExample):
        return example.value
    return json.dumps(example, ensure_ascii=False)


def _document_value(example: Any) -> Any:
    if isinstance(example, RawExample):
        return example.parsed()
    return example


@dataclass
class MediaType:
    """One representation of a request or response body.

    Corresponds to a Media Type Object, e.g. the value under
    ``content["application/json"]``.
    """

    schema: Optional[dict[str, Any]] = None
    """Schema (or $ref) describing the payload"""

    example: Any = None
    """Example payload; None means no example is set"""

    extra: dict[str, Any] = field(default_factory=dict)
    """Every other key of the Media Type Object (examples, encoding, ...)"""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MediaType":
        extra = {k: v for k, v in data.items() if k not in ("schema", "example")}
        return cls(schema=data.get("schema"), example=data.get("example"), extra=extra)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.schema is not None:
            data["schema"] = self.schema
        if self.example is not None:
            data["example"] = _document_value(self.example)
        data.update(self.extra)
        return data


def _content_from_dict(data: dict[str, Any]) -> dict[str, MediaType]:
    return {
        media_type: MediaType.from_dict(entry or {})
        for media_type, entry in (data.get("content") or {}).items()
    }


@dataclass
class Response:
    """A documented response for one status code."""

    description: str = ""
    """Response description (required by OpenAPI)"""

    content: dict[str, MediaType] = field(default_factory=dict)
    """Media type string -> MediaType"""

    extra: dict[str, Any] = field(default_factory=dict)
    """Every other key of the Response Object (headers, links, ...)"""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Response":
        extra = {k: v for k, v in data.items() if k not in ("description", "content")}
        return cls(
            description=data.get("description", ""),
            content=_content_from_dict(data),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"description": self.description}
        if self.content:
            data["content"] = {
                media_type: entry.to_dict() for media_type, entry in self.content.items()
            }
        data.update(self.extra)
        return data


@dataclass
class RequestBody:
    """The request body of an operation."""

    content: dict[str, MediaType] = field(default_factory=dict)
    """Media type string -> MediaType"""

    required: bool = False
    """Whether the body is required"""

    extra: dict[str, Any] = field(default_factory=dict)
    """Every other key of the Request Body Object (description, ...)"""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RequestBody":
        extra = {k: v for k, v in data.items() if k not in ("content", "required")}
        return cls(
            content=_content_from_dict(data),
            required=bool(data.get("required", False)),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "content": {
                media_type: entry.to_dict() for media_type, entry in self.content.items()
            }
        }
        if self.required:
            data["required"] = True
        data.update(self.extra)
        return data


@dataclass
class Operation:
    """Documentation fragment of a single API endpoint (method + path).

    Owned by the host document generator; example generation mutates the
    example fields of its media types in place.
    """

    operation_id: Optional[str] = None
    """Unique operation identifier"""

    responses: dict[str, Response] = field(default_factory=dict)
    """Status code string (e.g., "200") -> Response"""

    request_body: Optional[RequestBody] = None
    """Request body, if the operation accepts one"""

    extra: dict[str, Any] = field(default_factory=dict)
    """Every other key of the Operation Object (summary, parameters, ...)"""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Operation":
        """Build an Operation from a raw OpenAPI operation dictionary."""
        extra = {
            k: v
            for k, v in data.items()
            if k not in ("operationId", "responses", "requestBody")
        }
        request_body = data.get("requestBody")
        return cls(
            operation_id=data.get("operationId"),
            responses={
                str(code): Response.from_dict(response or {})
                for code, response in (data.get("responses") or {}).items()
            },
            request_body=RequestBody.from_dict(request_body) if request_body else None,
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to a raw OpenAPI operation dictionary."""
        data: dict[str, Any] = dict(self.extra)
        if self.operation_id is not None:
            data["operationId"] = self.operation_id
        if self.request_body is not None:
            data["requestBody"] = self.request_body.to_dict()
        data["responses"] = {
            code: response.to_dict() for code, response in self.responses.items()
        }
        return data

    def __str__(self) -> str:
        return self.operation_id or "<anonymous operation>"

"""OpenAPI document model.

Thin dataclass views over the operation fragments of an OpenAPI document,
with the example field as the single mutation target.
"""

from .models import MediaType, Operation, RawExample, RequestBody, Response, render_example

__all__ = [
    "Operation",
    "Response",
    "RequestBody",
    "MediaType",
    "RawExample",
    "render_example",
]

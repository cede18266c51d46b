"""Per-operation context handed to operation filters.

The host integration builds one OperationFilterContext per discovered
operation: the declared parameter and response types, plus the explicit
example annotations collected for the endpoint. Overrides (slots claimed by
an annotation) are precomputed here so filters never reflect over
endpoints themselves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, Union

if TYPE_CHECKING:
    from ..openapi.models import Operation
    from .annotations import ExampleAnnotation

# Slot name used for the request body in override keys
REQUEST_SLOT = "request"


class ParameterSource(str, Enum):
    """Where an operation parameter is bound from."""

    BODY = "body"
    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"
    FORM = "form"


class ExampleLocation(str, Enum):
    """Which part of an operation an example targets."""

    REQUEST = "request"
    RESPONSE = "response"


@dataclass(frozen=True)
class ApiParameter:
    """A declared operation parameter."""

    name: str
    type: Any
    source: ParameterSource = ParameterSource.BODY


@dataclass(frozen=True)
class ApiResponseType:
    """A declared response: status code and payload type."""

    status_code: int
    type: Any = None


@dataclass(frozen=True)
class OverrideKey:
    """A (location, slot) pair claimed by an explicit annotation.

    ``slot`` is the status code for responses and ``"request"`` for the
    request body.
    """

    location: ExampleLocation
    slot: Union[int, str]

    @classmethod
    def response(cls, status_code: int) -> "OverrideKey":
        return cls(ExampleLocation.RESPONSE, int(status_code))

    @classmethod
    def request(cls) -> "OverrideKey":
        return cls(ExampleLocation.REQUEST, REQUEST_SLOT)


@dataclass(frozen=True)
class OperationFilterContext:
    """Everything an operation filter needs to know about one operation.

    Attributes:
        operation_id: Identifier used when attributing errors
        parameters: Declared parameters (only BODY ones get examples)
        responses: Declared status code / type pairs
        annotations: Explicit example annotations for the operation
        overrides: Slots claimed by annotations; computed from
            ``annotations`` when not given
    """

    operation_id: Optional[str] = None
    parameters: tuple[ApiParameter, ...] = ()
    responses: tuple[ApiResponseType, ...] = ()
    annotations: tuple["ExampleAnnotation", ...] = ()
    overrides: Optional[frozenset[OverrideKey]] = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "responses", tuple(self.responses))
        object.__setattr__(self, "annotations", tuple(self.annotations))
        if self.overrides is None:
            from .annotations import compute_overrides

            object.__setattr__(self, "overrides", compute_overrides(self.annotations))
        else:
            object.__setattr__(self, "overrides", frozenset(self.overrides))

    def has_response_override(self, status_code: int) -> bool:
        """Check whether an annotation claims a response status code."""
        return OverrideKey.response(status_code) in self.overrides

    def has_request_override(self) -> bool:
        """Check whether an annotation claims the request body."""
        return OverrideKey.request() in self.overrides

    def body_parameters(self) -> list[ApiParameter]:
        """Get the parameters bound from the request body."""
        return [p for p in self.parameters if p.source == ParameterSource.BODY]


class OperationFilter(Protocol):
    """A unit invoked once per operation to mutate its documentation."""

    def apply(self, operation: "Operation", context: OperationFilterContext) -> None:
        ...

"""FastAPI integration example for openapi-examples.

This example shows a small people service whose OpenAPI document carries
example payloads for every documented request and response.

Features:
- Type-keyed providers registered once for the whole app
- An explicit example for a single error response
- JSON and XML media types rendered from the same example
- PascalCase property names via settings

Run with:
    uvicorn examples.fastapi_integration:app --reload

Then open http://localhost:8000/docs, or export the document:
    openapi-examples export examples.fastapi_integration:app
"""

from enum import Enum
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from openapi_examples import (
    ExampleRegistry,
    ExamplesProvider,
    ExamplesSettings,
    NamingPolicy,
    install_examples,
    response_example,
)


# Request/Response Models
class Title(Enum):
    MR = 1
    MRS = 2
    DR = 3


class PersonRequest(BaseModel):
    """Create person request."""

    title: Optional[Title] = None
    first_name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)


class PersonResponse(BaseModel):
    """Stored person."""

    id: int
    first_name: str
    last_name: Optional[str] = None
    title: Optional[Title] = None


class ErrorDetail(BaseModel):
    """Error response."""

    detail: str


# Example providers
class PersonRequestExample(ExamplesProvider[PersonRequest]):
    def get_examples(self) -> PersonRequest:
        return PersonRequest(title=Title.DR, first_name="John", age=24)


class PersonResponseExample(ExamplesProvider[PersonResponse]):
    def get_examples(self) -> PersonResponse:
        return PersonResponse(id=123, first_name="John", last_name="Doe", title=Title.DR)


class PeopleExample(ExamplesProvider[list[PersonResponse]]):
    def get_examples(self) -> list[PersonResponse]:
        return [
            PersonResponse(id=123, first_name="John", last_name="Doe", title=Title.DR),
            PersonResponse(id=456, first_name="Jane", title=Title.MRS),
        ]


class PersonNotFoundExample(ExamplesProvider[ErrorDetail]):
    def get_examples(self) -> ErrorDetail:
        return ErrorDetail(detail="Person 42 not found")


registry = ExampleRegistry()
registry.register_provider(PersonRequestExample)
registry.register_provider(PersonResponseExample)
registry.register_provider(PeopleExample)

# FastAPI app
app = FastAPI(
    title="People API",
    description="People service with documented example payloads",
    version="1.0.0",
)

PEOPLE: dict[int, PersonResponse] = {}

XML_CONTENT = {"application/xml": {}}


@app.get("/people", response_model=list[PersonResponse])
async def list_people():
    """List stored people."""
    return list(PEOPLE.values())


@app.get(
    "/people/{person_id}",
    response_model=PersonResponse,
    responses={
        200: {"content": XML_CONTENT},
        404: {"model": ErrorDetail},
    },
)
@response_example(404, PersonNotFoundExample)
async def get_person(person_id: int):
    """Fetch one person.

    The 404 example comes from the annotation; the 200 example comes from
    the registry and is rendered as both JSON and XML.
    """
    person = PEOPLE.get(person_id)
    if person is None:
        raise HTTPException(status_code=404, detail=f"Person {person_id} not found")
    return person


@app.post("/people", response_model=PersonResponse, status_code=201)
async def create_person(request: PersonRequest):
    """Store a person."""
    person = PersonResponse(id=len(PEOPLE) + 1, first_name=request.first_name, title=request.title)
    PEOPLE[person.id] = person
    return person


install_examples(app, registry, ExamplesSettings(naming=NamingPolicy.PASCAL_CASE, xml_indent=2))


# Example usage (if running directly)
if __name__ == "__main__":
    import uvicorn

    print("Starting People API server...")
    print("API docs available at: http://localhost:8000/docs")

    uvicorn.run(app, host="0.0.0.0", port=8000)

"""Tests for the OpenAPI operation models."""

from openapi_examples.openapi.models import (
    MediaType,
    Operation,
    RawExample,
    RequestBody,
    Response,
    render_example,
)


def sample_operation_dict():
    return {
        "summary": "Get person",
        "operationId": "get_person",
        "parameters": [{"name": "person_id", "in": "path", "required": True}],
        "requestBody": {
            "description": "Person to create",
            "required": True,
            "content": {
                "application/json": {"schema": {"$ref": "#/components/schemas/Person"}}
            },
        },
        "responses": {
            "200": {
                "description": "Successful Response",
                "headers": {"X-Rate-Limit": {"schema": {"type": "integer"}}},
                "content": {
                    "application/json": {
                        "schema": {"$ref": "#/components/schemas/Person"},
                        "examples": {"named": {"value": {"id": 1}}},
                    }
                },
            },
            "204": {"description": "No Content"},
        },
    }


class TestRawExample:
    """Test RawExample and render_example."""

    def test_parsed(self):
        """Test raw JSON parses back into data."""
        assert RawExample('{"id": 1}').parsed() == {"id": 1}

    def test_render_raw_is_verbatim(self):
        """Test raw JSON renders without quoting."""
        assert render_example(RawExample('{"id": 1}')) == '{"id": 1}'

    def test_render_string_is_quoted(self):
        """Test plain strings render as quoted JSON strings."""
        assert render_example("<int>1</int>") == '"<int>1</int>"'
        assert render_example("DR") == '"DR"'


class TestOperation:
    """Test Operation conversion from and to raw dictionaries."""

    def test_from_dict(self):
        """Test the example-relevant fields are modelled."""
        operation = Operation.from_dict(sample_operation_dict())

        assert operation.operation_id == "get_person"
        assert set(operation.responses) == {"200", "204"}
        assert operation.request_body.required is True
        assert "application/json" in operation.request_body.content
        assert operation.responses["204"].content == {}
        assert operation.extra["summary"] == "Get person"

    def test_round_trip_preserves_unmodelled_keys(self):
        """Test to_dict reproduces the original document."""
        raw = sample_operation_dict()
        assert Operation.from_dict(raw).to_dict() == raw

    def test_to_dict_writes_examples(self):
        """Test raw examples become structured JSON and strings stay strings."""
        operation = Operation.from_dict(sample_operation_dict())
        operation.responses["200"].content["application/json"].example = RawExample(
            '{"id": 1, "first_name": "Jane"}'
        )
        operation.request_body.content["application/json"].example = "<Person/>"

        data = operation.to_dict()

        response_entry = data["responses"]["200"]["content"]["application/json"]
        assert response_entry["example"] == {"id": 1, "first_name": "Jane"}
        assert response_entry["examples"] == {"named": {"value": {"id": 1}}}
        assert data["requestBody"]["content"]["application/json"]["example"] == "<Person/>"

    def test_responses_keyed_by_string(self):
        """Test integer status codes are normalized to strings."""
        operation = Operation.from_dict({"responses": {200: {"description": "OK"}}})
        assert "200" in operation.responses

    def test_str(self):
        """Test operations print as their identifier."""
        assert str(Operation(operation_id="foobar")) == "foobar"
        assert str(Operation()) == "<anonymous operation>"


class TestContentModels:
    """Test MediaType, Response and RequestBody."""

    def test_media_type_without_example(self):
        """Test an entry without example has no example key."""
        assert MediaType(schema={"type": "string"}).to_dict() == {"schema": {"type": "string"}}

    def test_response_defaults(self):
        """Test a bare response keeps its description."""
        assert Response.from_dict({}).to_dict() == {"description": ""}

    def test_request_body_not_required(self):
        """Test optional request bodies omit the required flag."""
        body = RequestBody(content={"application/json": MediaType()})
        assert body.to_dict() == {"content": {"application/json": {}}}

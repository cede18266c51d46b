"""Tests for JSON and XML example serialization."""

import json
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import pytest
from pydantic import BaseModel, Field

from fakes import PersonRequest, PersonResponse, Title
from openapi_examples.core.errors import SerializationError
from openapi_examples.core.serialization import (
    NamingPolicy,
    SerializerSettings,
    apply_naming,
    object_fields,
    to_json,
    to_serializable,
    to_xml,
    xml_type_name,
)


@dataclass
class Address:
    street_name: str
    house_number: int


@dataclass
class Customer:
    customer_id: int
    full_name: str
    address: Optional[Address] = None
    tags: list[str] = field(default_factory=list)


class Plain:
    def __init__(self):
        self.visible = "yes"
        self._hidden = "no"


class Opaque:
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value


class AliasedModel(BaseModel):
    user_name: str = Field(alias="userName")
    internal: str = Field(default="x", exclude=True)


class TestApplyNaming:
    """Test naming policies."""

    @pytest.mark.parametrize(
        "name,policy,expected",
        [
            ("first_name", NamingPolicy.PRESERVE, "first_name"),
            ("first_name", NamingPolicy.CAMEL_CASE, "firstName"),
            ("first_name", NamingPolicy.PASCAL_CASE, "FirstName"),
            ("FirstName", NamingPolicy.SNAKE_CASE, "first_name"),
            ("FirstName", NamingPolicy.CAMEL_CASE, "firstName"),
            ("HTTPServer", NamingPolicy.SNAKE_CASE, "http_server"),
            ("id", NamingPolicy.PASCAL_CASE, "Id"),
            ("address2", NamingPolicy.CAMEL_CASE, "address2"),
        ],
    )
    def test_policies(self, name, policy, expected):
        """Test each policy on typical identifiers."""
        assert apply_naming(name, policy) == expected

    def test_no_words(self):
        """Test names without word characters are left alone."""
        assert apply_naming("_", NamingPolicy.CAMEL_CASE) == "_"


class TestSerializerSettings:
    """Test SerializerSettings immutability and overrides."""

    def test_string_naming_is_coerced(self):
        """Test naming given as a string becomes a NamingPolicy."""
        settings = SerializerSettings(naming="camel_case")
        assert settings.naming is NamingPolicy.CAMEL_CASE

    def test_converters_are_read_only(self):
        """Test converters cannot be mutated after construction."""
        settings = SerializerSettings(converters={Decimal: float})
        with pytest.raises(TypeError):
            settings.converters[int] = str

    def test_with_overrides_returns_new_settings(self):
        """Test overrides never mutate the base settings."""
        base = SerializerSettings(converters={Decimal: float}, indent=2)
        overridden = base.with_overrides(
            naming=NamingPolicy.CAMEL_CASE, converters={Decimal: str}
        )

        assert base.naming is NamingPolicy.PRESERVE
        assert base.converters[Decimal] is float
        assert overridden.naming is NamingPolicy.CAMEL_CASE
        assert overridden.converters[Decimal] is str
        assert overridden.indent == 2

    def test_with_no_overrides_is_identity(self):
        """Test an empty override returns the same object."""
        base = SerializerSettings()
        assert base.with_overrides() is base


class TestToSerializable:
    """Test to_serializable conversion rules."""

    def test_primitives(self):
        """Test primitives pass through."""
        assert to_serializable(None) is None
        assert to_serializable("test") == "test"
        assert to_serializable(42) == 42
        assert to_serializable(3.14) == 3.14
        assert to_serializable(True) is True

    def test_enum_uses_member_name(self):
        """Test a top-level enum serializes to its declared name, not its value."""
        assert to_serializable(Title.DR) == "DR"

    def test_nested_enum_uses_value(self):
        """Test enum fields serialize to their value and parse back."""
        person = PersonResponse(id=123, first_name="John", title=Title.DR)

        result = to_serializable(person)

        assert result["title"] == 3
        assert PersonResponse(**result) == person

    def test_scalars(self):
        """Test dates, UUIDs, decimals and bytes."""
        assert to_serializable(datetime(2025, 1, 15, 10, 30)) == "2025-01-15T10:30:00"
        assert to_serializable(date(2025, 1, 15)) == "2025-01-15"
        uid = UUID("12345678-1234-5678-1234-567812345678")
        assert to_serializable(uid) == str(uid)
        assert to_serializable(Decimal("1.50")) == "1.50"
        assert to_serializable(b"hi") == "aGk="

    def test_dataclass_with_naming(self):
        """Test dataclass fields go through the naming policy, recursively."""
        customer = Customer(1, "Jane Doe", Address("Main St", 5), ["vip"])
        result = to_serializable(customer, SerializerSettings(naming="camel_case"))

        assert result == {
            "customerId": 1,
            "fullName": "Jane Doe",
            "address": {"streetName": "Main St", "houseNumber": 5},
            "tags": ["vip"],
        }

    def test_pydantic_model(self):
        """Test pydantic models serialize their fields."""
        person = PersonResponse(id=1, first_name="Jane")
        assert to_serializable(person) == {
            "id": 1,
            "first_name": "Jane",
            "last_name": None,
            "title": None,
        }

    def test_pydantic_alias_wins_over_naming(self):
        """Test explicit aliases are used verbatim and excluded fields dropped."""
        model = AliasedModel(userName="jdoe")
        result = to_serializable(model, SerializerSettings(naming="snake_case"))
        assert result == {"userName": "jdoe"}

    def test_exclude_none(self):
        """Test None object fields are dropped when requested."""
        person = PersonResponse(id=1, first_name="Jane")
        result = to_serializable(person, SerializerSettings(exclude_none=True))
        assert result == {"id": 1, "first_name": "Jane"}

    def test_plain_object_public_attributes(self):
        """Test plain objects expose only public attributes."""
        assert to_serializable(Plain()) == {"visible": "yes"}

    def test_dict_keys_are_not_renamed(self):
        """Test naming policy does not apply to dictionary keys."""
        data = {"PropertyInt": 1, "nested_value": {"Inner": Title.MR}}
        result = to_serializable(data, SerializerSettings(naming="camel_case"))
        assert result == {"PropertyInt": 1, "nested_value": {"Inner": 1}}

    def test_collections(self):
        """Test tuples and sets become lists."""
        assert to_serializable((1, 2)) == [1, 2]
        assert to_serializable({3, 1, 2}) == [1, 2, 3]

    def test_converter_takes_precedence(self):
        """Test converters run before built-in rules, including via MRO."""
        settings = SerializerSettings(converters={Decimal: float, Title: lambda t: t.value})
        assert to_serializable(Decimal("1.5"), settings) == 1.5
        assert to_serializable(Title.DR, settings) == 3

    def test_converter_for_unknown_type(self):
        """Test converters make otherwise unserializable types work."""
        settings = SerializerSettings(converters={Opaque: lambda o: {"value": o.value}})
        assert to_serializable([Opaque(1)], settings) == [{"value": 1}]

    def test_unserializable_type_raises(self):
        """Test values without a representation raise SerializationError."""
        with pytest.raises(SerializationError, match="Opaque"):
            to_serializable({"item": Opaque(1)})

    def test_failing_converter_raises(self):
        """Test converter exceptions surface as SerializationError."""

        def broken(value):
            raise ValueError("boom")

        with pytest.raises(SerializationError, match="boom"):
            to_serializable(Decimal("1"), SerializerSettings(converters={Decimal: broken}))

    def test_circular_reference_raises(self):
        """Test reference cycles are detected."""
        data: dict[str, Any] = {}
        data["self"] = data
        with pytest.raises(SerializationError, match="Circular"):
            to_serializable(data)

    def test_shared_reference_is_not_a_cycle(self):
        """Test the same object appearing twice is fine."""
        address = Address("Main St", 5)
        assert to_serializable([address, address]) == [
            {"street_name": "Main St", "house_number": 5},
            {"street_name": "Main St", "house_number": 5},
        ]


class TestToJson:
    """Test to_json function."""

    def test_compact_by_default(self):
        """Test JSON is compact without an indent."""
        assert to_json({"a": 1}) == '{"a": 1}'

    def test_indent(self):
        """Test indentation setting."""
        assert "\n" in to_json({"a": 1}, SerializerSettings(indent=2))

    def test_round_trip_field_values(self):
        """Test parsed JSON reproduces the example's public field values."""
        person = PersonRequest(title=Title.MR, first_name="Jane", age=27)
        parsed = json.loads(to_json(person))
        assert parsed == {"title": 1, "first_name": "Jane", "age": 27}

    def test_converter_returning_same_type(self):
        """Test a converter that normalizes a value to its own type."""
        settings = SerializerSettings(converters={datetime: lambda d: d.astimezone(timezone.utc)})
        at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        assert to_json({"at": at}, settings) == '{"at": "2024-01-01T10:00:00+00:00"}'
        assert to_xml({"at": at}, settings, root_name="Stamp") == (
            "<Stamp><at>2024-01-01T10:00:00+00:00</at></Stamp>"
        )

    def test_unicode_is_preserved(self):
        """Test non-ASCII text is not escaped."""
        assert to_json("Zoë") == '"Zoë"'


class TestToXml:
    """Test to_xml function."""

    def test_object(self):
        """Test objects become an element named after the type."""
        person = PersonResponse(id=123, first_name="John", title=Title.DR)
        xml = to_xml(person)

        root = ET.fromstring(xml)
        assert root.tag == "PersonResponse"
        assert root.find("id").text == "123"
        assert root.find("first_name").text == "John"
        assert root.find("title").text == "3"
        # None fields are omitted
        assert root.find("last_name") is None

    def test_list_of_strings(self):
        """Test lists follow the ArrayOf convention."""
        assert (
            to_xml(["Hello", "there"])
            == "<ArrayOfString><string>Hello</string><string>there</string></ArrayOfString>"
        )

    def test_list_of_objects(self):
        """Test list items are named after their type."""
        root = ET.fromstring(to_xml([Address("Main St", 5)]))
        assert root.tag == "ArrayOfAddress"
        assert root[0].tag == "Address"
        assert root[0].find("street_name").text == "Main St"

    def test_dictionary(self):
        """Test dictionaries use their keys as element names."""
        root = ET.fromstring(to_xml({"PropertyInt": 1, "PropertyString": "Some string"}))
        assert root.tag == "Dictionary"
        assert root.find("PropertyInt").text == "1"
        assert root.find("PropertyString").text == "Some string"

    def test_scalars(self):
        """Test scalar roots and boolean rendering."""
        assert to_xml(5) == "<int>5</int>"
        assert to_xml(True) == "<boolean>true</boolean>"
        assert to_xml(Title.MR) == "<Title>MR</Title>"

    def test_naming_applies_to_elements(self):
        """Test field element names follow the naming policy."""
        root = ET.fromstring(
            to_xml(Address("Main St", 5), SerializerSettings(naming="pascal_case"))
        )
        assert root.find("StreetName").text == "Main St"

    def test_root_name_override(self):
        """Test explicit and configured root names."""
        assert to_xml(1, root_name="count") == "<count>1</count>"
        assert to_xml(1, SerializerSettings(xml_root_name="total")) == "<total>1</total>"

    def test_indent(self):
        """Test indented output."""
        xml = to_xml(Address("Main St", 5), SerializerSettings(indent=2))
        assert "\n  <street_name>" in xml

    def test_invalid_key_raises(self):
        """Test keys that are not XML names raise SerializationError."""
        with pytest.raises(SerializationError, match="first name"):
            to_xml({"first name": "Jane"})

    def test_xml_prefixed_names_are_allowed(self):
        """Test names starting with xml are well-formed elements."""
        root = ET.fromstring(to_xml({"xml_payload": "data"}))
        assert root.find("xml_payload").text == "data"

    def test_unserializable_type_raises(self):
        """Test unknown types raise SerializationError."""
        with pytest.raises(SerializationError):
            to_xml({"item": Opaque(1)})


class TestHelpers:
    """Test object_fields and xml_type_name helpers."""

    def test_object_fields_of_non_object(self):
        """Test non-object values return None."""
        assert object_fields(5) is None
        assert object_fields(Opaque(1)) is None

    def test_xml_type_names(self):
        """Test XmlSerializer-style type names."""
        assert xml_type_name("x") == "string"
        assert xml_type_name(1.0) == "double"
        assert xml_type_name([1, 2]) == "ArrayOfInt"
        assert xml_type_name([]) == "ArrayOfAnyType"
        assert xml_type_name(Address("a", 1)) == "Address"


class TestThreadSafety:
    """Test concurrent serialization."""

    def test_concurrent_serialization(self):
        """Test shared settings are safe across threads."""
        settings = SerializerSettings(naming="camel_case")
        customers = [Customer(i, f"Customer {i}") for i in range(50)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda c: to_json(c, settings), customers))

        for i, result in enumerate(results):
            assert json.loads(result)["customerId"] == i

"""Thread-safe JSON and XML serialization of example values.

This module turns the objects returned by example providers (Pydantic models,
dataclasses, plain objects, dicts, lists, enums and primitives) into the
JSON or XML text that ends up in the OpenAPI document. Output is controlled by
an immutable ``SerializerSettings`` object: a naming policy for object fields,
custom converters for types the serializer does not know, and formatting
options.

Thread-Safety:
    All functions in this module are thread-safe. Settings are immutable and
    every call builds its own output without touching shared state.
"""

import base64
import json
import re
import types
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional
from uuid import UUID

from pydantic import BaseModel

from .errors import SerializationError

if TYPE_CHECKING:
    from .config import ExamplesSettings

Converter = Callable[[Any], Any]

# Sentinel for "this helper does not handle the value"
_MISSING = object()

# Splits identifiers into words: first_name, FirstName, HTTPServer, item2
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")

# Conservative subset of the XML Name production
_XML_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")

_XML_SCALAR_NAMES: tuple[tuple[type, str], ...] = (
    (bool, "boolean"),
    (int, "int"),
    (float, "double"),
    (str, "string"),
    (Decimal, "decimal"),
    (datetime, "dateTime"),
    (date, "date"),
    (time, "time"),
    (UUID, "guid"),
    (bytes, "base64Binary"),
    (bytearray, "base64Binary"),
)


class NamingPolicy(str, Enum):
    """How object field names are written into examples."""

    PRESERVE = "preserve"
    CAMEL_CASE = "camel_case"
    PASCAL_CASE = "pascal_case"
    SNAKE_CASE = "snake_case"


def apply_naming(name: str, policy: NamingPolicy) -> str:
    """Rewrite a field name according to a naming policy.

    Args:
        name: Field name as declared (e.g., "first_name" or "FirstName")
        policy: Naming policy to apply

    Returns:
        Renamed field

    Example:
        >>> apply_naming("first_name", NamingPolicy.CAMEL_CASE)
        'firstName'
        >>> apply_naming("FirstName", NamingPolicy.SNAKE_CASE)
        'first_name'
    """
    if policy == NamingPolicy.PRESERVE:
        return name

    words = _WORD_PATTERN.findall(name)
    if not words:
        return name

    if policy == NamingPolicy.SNAKE_CASE:
        return "_".join(word.lower() for word in words)
    if policy == NamingPolicy.PASCAL_CASE:
        return "".join(word.capitalize() for word in words)
    # camel case
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


@dataclass(frozen=True)
class SerializerSettings:
    """Immutable serialization options.

    Attributes:
        naming: Naming policy for object fields (dict keys are never renamed)
        converters: Mapping of type -> callable returning a serializable value.
            Looked up along the value's MRO, so a converter for a base class
            also applies to its subclasses.
        indent: JSON/XML text indentation; None renders compact output
        exclude_none: Drop object fields whose value is None
        xml_root_name: Override for the XML root element name
    """

    naming: NamingPolicy = NamingPolicy.PRESERVE
    converters: Mapping[type, Converter] = field(default_factory=dict)
    indent: Optional[int] = None
    exclude_none: bool = False
    xml_root_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "naming", NamingPolicy(self.naming))
        object.__setattr__(
            self, "converters", types.MappingProxyType(dict(self.converters))
        )

    @classmethod
    def from_settings(cls, settings: "ExamplesSettings") -> "SerializerSettings":
        """Derive serializer settings from library-wide settings."""
        return cls(
            naming=settings.naming,
            indent=settings.xml_indent,
            exclude_none=settings.exclude_none,
            xml_root_name=settings.xml_root_name,
        )

    def with_overrides(
        self,
        naming: Optional[NamingPolicy] = None,
        converters: Optional[Mapping[type, Converter]] = None,
    ) -> "SerializerSettings":
        """Return a copy with per-call overrides applied.

        Per-call converters are merged over the base converters. The
        original settings object is left untouched, so a shared base can be
        overridden concurrently by different operations.

        Args:
            naming: Naming policy replacing the base policy
            converters: Extra converters, taking precedence over the base ones

        Returns:
            New SerializerSettings (or self when there is nothing to override)
        """
        if naming is None and not converters:
            return self

        merged = dict(self.converters)
        if converters:
            merged.update(converters)

        return SerializerSettings(
            naming=naming if naming is not None else self.naming,
            converters=merged,
            indent=self.indent,
            exclude_none=self.exclude_none,
            xml_root_name=self.xml_root_name,
        )


DEFAULT_SETTINGS = SerializerSettings()


def to_serializable(obj: Any, settings: Optional[SerializerSettings] = None) -> Any:
    """Convert an example value to JSON-compatible data.

    Conversion rules, in order:
    - None -> None
    - Registered converters (looked up along the value's MRO)
    - A top-level Enum -> member name
    - A nested Enum -> its value (as pydantic's schema declares it),
      falling back to the member name for non-scalar values
    - str, int, float, bool -> as-is
    - datetime, date, time -> ISO format string
    - UUID, Decimal -> str
    - bytes -> base64 string
    - Dicts -> dict (keys kept, values converted)
    - Lists, tuples, sets -> list
    - Pydantic models, dataclasses, plain objects -> dict of fields, with
      field names passed through the naming policy

    Args:
        obj: Value to convert
        settings: Serializer settings (default: DEFAULT_SETTINGS)

    Returns:
        JSON-serializable representation

    Raises:
        SerializationError: If the value (or a nested value) has no
            serializable representation, or contains a reference cycle

    Example:
        >>> @dataclass
        ... class Person:
        ...     first_name: str
        >>> to_serializable(Person("Jane"), SerializerSettings(naming="camel_case"))
        {'firstName': 'Jane'}
    """
    settings = settings or DEFAULT_SETTINGS
    return _to_serializable(_root_value(obj, settings), settings, set())


def to_json(obj: Any, settings: Optional[SerializerSettings] = None) -> str:
    """Serialize an example value to JSON text.

    Args:
        obj: Value to serialize
        settings: Serializer settings (default: DEFAULT_SETTINGS)

    Returns:
        JSON string (compact unless settings.indent is set)

    Raises:
        SerializationError: If the value cannot be serialized
    """
    settings = settings or DEFAULT_SETTINGS
    data = _to_serializable(_root_value(obj, settings), settings, set())
    try:
        return json.dumps(data, indent=settings.indent, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot render JSON: {e}") from e


def to_xml(
    obj: Any,
    settings: Optional[SerializerSettings] = None,
    root_name: Optional[str] = None,
) -> str:
    """Serialize an example value to XML text.

    Follows the conventions of .NET's XmlSerializer, which most XML API
    consumers expect: the root element is named after the value's type,
    lists become ``ArrayOf<Item>`` with one element per item, None fields
    are omitted and booleans are written as ``true``/``false``.

    Args:
        obj: Value to serialize
        settings: Serializer settings (default: DEFAULT_SETTINGS)
        root_name: Root element name (default: settings.xml_root_name or
            the value's type name)

    Returns:
        XML string without an XML declaration

    Raises:
        SerializationError: If the value cannot be serialized or a key is
            not a valid XML element name

    Example:
        >>> to_xml(["Hello", "there"])
        '<ArrayOfString><string>Hello</string><string>there</string></ArrayOfString>'
    """
    settings = settings or DEFAULT_SETTINGS
    tag = root_name or settings.xml_root_name or xml_type_name(obj, settings)
    root = ET.Element(_xml_name(tag))
    _fill_xml(root, _root_value(obj, settings), settings, set())

    if settings.indent:
        ET.indent(root, space=" " * settings.indent)

    return ET.tostring(root, encoding="unicode")


def xml_type_name(obj: Any, settings: Optional[SerializerSettings] = None) -> str:
    """Get the XmlSerializer-style element name for a value's type."""
    settings = settings or DEFAULT_SETTINGS

    if obj is None:
        return "anyType"
    if isinstance(obj, Enum):
        return type(obj).__name__
    for scalar_type, name in _XML_SCALAR_NAMES:
        if isinstance(obj, scalar_type):
            return name
    if isinstance(obj, Mapping):
        return "Dictionary"
    if isinstance(obj, (list, tuple, set, frozenset)):
        item = next((i for i in obj if i is not None), None)
        item_name = xml_type_name(item, settings)
        return "ArrayOf" + item_name[0].upper() + item_name[1:]
    return type(obj).__name__


def object_fields(
    obj: Any, settings: Optional[SerializerSettings] = None
) -> Optional[list[tuple[str, Any]]]:
    """Get the named fields of an object-shaped value.

    Pydantic models contribute their declared fields (keyed by alias when
    one is set), dataclasses their fields, and plain objects their public
    instance attributes. Names without an explicit alias go through the
    naming policy.

    Args:
        obj: Value to inspect
        settings: Serializer settings (default: DEFAULT_SETTINGS)

    Returns:
        List of (name, value) pairs, or None if the value is not object-shaped
    """
    settings = settings or DEFAULT_SETTINGS

    if isinstance(obj, BaseModel):
        items = []
        for name, model_field in type(obj).model_fields.items():
            if model_field.exclude:
                continue
            alias = model_field.serialization_alias or model_field.alias
            key = alias or apply_naming(name, settings.naming)
            items.append((key, getattr(obj, name)))
    elif is_dataclass(obj) and not isinstance(obj, type):
        items = [
            (apply_naming(f.name, settings.naming), getattr(obj, f.name))
            for f in fields(obj)
        ]
    elif hasattr(obj, "__dict__") and not isinstance(
        obj,
        (type, types.ModuleType, types.FunctionType, types.MethodType),
    ):
        items = [
            (apply_naming(name, settings.naming), value)
            for name, value in vars(obj).items()
            if not name.startswith("_")
        ]
    else:
        return None

    if settings.exclude_none:
        items = [(name, value) for name, value in items if value is not None]

    return items


def _find_converter(obj: Any, settings: SerializerSettings) -> Optional[tuple[type, Converter]]:
    for klass in type(obj).__mro__:
        converter = settings.converters.get(klass)
        if converter is not None:
            return klass, converter
    return None


def _convert(obj: Any, settings: SerializerSettings) -> Any:
    """Apply a registered converter, returning _MISSING if none matches."""
    found = _find_converter(obj, settings)
    if found is None:
        return _MISSING

    klass, converter = found
    try:
        return converter(obj)
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(
            f"Converter for {klass.__name__} failed: {e}",
            type_name=type(obj).__name__,
        ) from e


def _root_value(obj: Any, settings: SerializerSettings) -> Any:
    """Top-level enums without a converter are written by member name."""
    if isinstance(obj, Enum) and _find_converter(obj, settings) is None:
        return obj.name
    return obj


def _enum_value(member: Enum) -> Any:
    value = member.value
    if isinstance(value, Enum) or _scalar(value) is _MISSING:
        return member.name
    return _scalar(value)


def _scalar(obj: Any) -> Any:
    """Convert scalar values, returning _MISSING for anything structured."""
    # Enum first: str/int-based enums are also str/int instances
    if isinstance(obj, Enum):
        return _enum_value(obj)
    if isinstance(obj, (str, int, float)):
        return obj
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, (UUID, Decimal)):
        return str(obj)
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    return _MISSING


def _items(obj: Any) -> list:
    if isinstance(obj, (set, frozenset)):
        try:
            return sorted(obj)
        except TypeError:
            return list(obj)
    return list(obj)


def _dict_key(key: Any) -> Any:
    if isinstance(key, Enum):
        return _enum_value(key)
    if key is None or isinstance(key, (str, int, float)):
        return key
    raise SerializationError(
        f"Dictionary key of type {type(key).__name__} cannot be serialized",
        type_name=type(key).__name__,
    )


def _to_serializable(
    obj: Any, settings: SerializerSettings, active: set[int], convert: bool = True
) -> Any:
    if obj is None:
        return None

    converted = _convert(obj, settings) if convert else _MISSING
    if converted is not _MISSING:
        # A converter returning its own type is not applied a second time
        return _to_serializable(
            converted, settings, active, convert=type(converted) is not type(obj)
        )

    scalar = _scalar(obj)
    if scalar is not _MISSING:
        return scalar

    marker = id(obj)
    if marker in active:
        raise SerializationError(
            "Circular reference detected", type_name=type(obj).__name__
        )
    active.add(marker)
    try:
        if isinstance(obj, Mapping):
            return {
                _dict_key(key): _to_serializable(value, settings, active)
                for key, value in obj.items()
            }

        if isinstance(obj, (list, tuple, set, frozenset)):
            return [_to_serializable(item, settings, active) for item in _items(obj)]

        named = object_fields(obj, settings)
        if named is not None:
            return {
                name: _to_serializable(value, settings, active)
                for name, value in named
            }
    finally:
        active.discard(marker)

    raise SerializationError(
        f"Cannot serialize value of type {type(obj).__name__}; register a converter",
        type_name=type(obj).__name__,
    )


def _xml_name(name: str) -> str:
    if not _XML_NAME_PATTERN.match(name):
        raise SerializationError(f"'{name}' is not a valid XML element name")
    return name


def _xml_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _fill_xml(
    element: ET.Element, obj: Any, settings: SerializerSettings, active: set[int]
) -> None:
    if obj is None:
        return

    converted = _convert(obj, settings)
    if converted is not _MISSING:
        obj = converted
        if obj is None:
            return

    scalar = _scalar(obj)
    if scalar is not _MISSING:
        element.text = _xml_text(scalar)
        return

    marker = id(obj)
    if marker in active:
        raise SerializationError(
            "Circular reference detected", type_name=type(obj).__name__
        )
    active.add(marker)
    try:
        if isinstance(obj, Mapping):
            for key, value in obj.items():
                if value is None:
                    continue
                child = ET.SubElement(element, _xml_name(str(_dict_key(key))))
                _fill_xml(child, value, settings, active)
            return

        if isinstance(obj, (list, tuple, set, frozenset)):
            for item in _items(obj):
                child = ET.SubElement(element, _xml_name(xml_type_name(item, settings)))
                _fill_xml(child, item, settings, active)
            return

        named = object_fields(obj, settings)
        if named is not None:
            for name, value in named:
                if value is None:
                    continue
                child = ET.SubElement(element, _xml_name(name))
                _fill_xml(child, value, settings, active)
            return
    finally:
        active.discard(marker)

    raise SerializationError(
        f"Cannot serialize value of type {type(obj).__name__}; register a converter",
        type_name=type(obj).__name__,
    )

# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License"). You
# may not use this file except in compliance with the License. A copy of
# the License is located at
#
#     http://aws.amazon.com/apache2.0/
#
# or in the "license" file accompanying this file. This file is
# distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF
# ANY KIND, either express or implied. See the License for the specific
# language governing permissions and limitations under the License.
"""Mapping between dataclass shapes and XML documents.

A shape is a dataclass whose ``_xml_name`` class attribute names its root element.
Each field is written as a child element named by the ``xml_name`` field metadata, or
the field name when there is none. List fields are written as repeated elements.
"""
import types
import xml.etree.ElementTree as ET
from dataclasses import MISSING, Field, field, fields, is_dataclass
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

from ..exceptions import DeserializationError, SerializationError

XML_DECLARATION = b'<?xml version="1.0" encoding="UTF-8"?>\n'

_T = TypeVar("_T")


def xml_field(name: str, *, default: Any = None, default_factory: Any = MISSING) -> Any:
    """Declare a dataclass field that maps to the child element ``name``."""
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata={"xml_name": name})
    return field(default=default, metadata={"xml_name": name})


def root_name(shape: Any) -> str:
    return getattr(shape, "_xml_name", None) or (
        shape.__name__ if isinstance(shape, type) else type(shape).__name__
    )


def serialize(value: Any) -> bytes:
    """Serialize a shape instance or an ``Element`` into an XML document.

    :raises SerializationError: If ``value`` isn't a shape or contains values that
        have no XML representation.
    """
    if isinstance(value, ET.Element):
        root = value
    elif is_dataclass(value) and not isinstance(value, type):
        root = _shape_to_element(value, root_name(value))
        if namespace := getattr(value, "_xml_namespace", None):
            root.set("xmlns", namespace)
    else:
        raise SerializationError(
            f"Unable to serialize value of type {type(value).__name__} to XML."
        )
    return XML_DECLARATION + ET.tostring(root, encoding="unicode").encode("utf-8")


def _shape_to_element(value: Any, tag: str) -> ET.Element:
    element = ET.Element(tag)
    for fld in fields(value):
        member = getattr(value, fld.name)
        if member is None:
            continue
        name = _element_name(fld)
        if isinstance(member, list | tuple):
            for item in member:
                element.append(_member_to_element(item, name))
        else:
            element.append(_member_to_element(member, name))
    return element


def _member_to_element(value: Any, tag: str) -> ET.Element:
    if is_dataclass(value) and not isinstance(value, type):
        return _shape_to_element(value, tag)

    element = ET.Element(tag)
    match value:
        case bool():
            element.text = "true" if value else "false"
        case int() | float() | str():
            element.text = str(value)
        case _:
            raise SerializationError(
                f"Unable to serialize member {tag} of type {type(value).__name__}."
            )
    return element


def deserialize(body: bytes, shape: type[_T]) -> _T:
    """Deserialize an XML document into an instance of ``shape``.

    Namespaces are ignored when matching element names, and elements that don't map
    to a field are skipped.

    :raises DeserializationError: If the document is malformed, its root element
        doesn't match the shape, or a member can't be converted.
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise DeserializationError(f"Malformed XML document: {e}") from e

    expected = root_name(shape)
    if _local_name(root.tag) != expected:
        raise DeserializationError(
            f"Expected element type <{expected}> but found <{_local_name(root.tag)}>."
        )
    return _element_to_shape(root, shape)


def _element_to_shape(element: ET.Element, shape: type[_T]) -> _T:
    if not is_dataclass(shape):
        raise DeserializationError(f"{shape!r} is not a deserializable shape.")

    hints = get_type_hints(shape)
    kwargs: dict[str, Any] = {}
    for fld in fields(shape):
        if not fld.init:
            continue
        name = _element_name(fld)
        matched = [child for child in element if _local_name(child.tag) == name]
        if not matched:
            continue
        target = _unwrap_optional(hints[fld.name])
        if get_origin(target) is list:
            (item_type,) = get_args(target)
            kwargs[fld.name] = [_convert(child, item_type) for child in matched]
        else:
            kwargs[fld.name] = _convert(matched[0], target)

    try:
        return shape(**kwargs)
    except TypeError as e:
        raise DeserializationError(f"Unable to build {shape.__name__}: {e}") from e


def _convert(element: ET.Element, target: Any) -> Any:
    if is_dataclass(target):
        return _element_to_shape(element, target)

    text = (element.text or "").strip()
    try:
        if target is bool:
            match text:
                case "true":
                    return True
                case "false":
                    return False
                case _:
                    raise ValueError(f"expected 'true' or 'false', found {text!r}")
        if target is int or target is float:
            return target(text)
    except ValueError as e:
        raise DeserializationError(
            f"Invalid value for <{_local_name(element.tag)}>: {e}"
        ) from e
    return element.text or ""


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _element_name(fld: Field[Any]) -> str:
    return fld.metadata.get("xml_name", fld.name)


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]

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
import base64
from dataclasses import dataclass
from hashlib import md5
from typing import Any, NamedTuple, TypeVar

from ._private import xmlcodec
from .exceptions import SerializationError
from .interfaces import Decoder, Encoder

_T = TypeVar("_T")


@dataclass(frozen=True)
class RawPayload:
    """A request body that is sent exactly as given."""

    data: bytes


@dataclass(frozen=True)
class XMLPayload:
    """A request body that is serialized to an XML document before sending.

    :param value: A shape instance from :py:mod:`mns_python.models` or any other
        dataclass shape, or an ``xml.etree.ElementTree.Element``.
    """

    value: Any


Payload = RawPayload | XMLPayload | None


class EncodedBody(NamedTuple):
    """A serialized request body and its digest."""

    data: bytes
    """The bytes sent as the request body."""

    content_md5: str
    """The value of the ``Content-MD5`` header for ``data``."""


class XMLEncoder(Encoder):
    """Serializes shapes into XML documents."""

    def encode(self, value: Any) -> bytes:
        return xmlcodec.serialize(value)


class XMLDecoder(Decoder):
    """Deserializes XML documents into shapes."""

    def decode(self, body: bytes, shape: type[_T]) -> _T:
        return xmlcodec.deserialize(body, shape)


def content_md5(data: bytes) -> str:
    """Compute the ``Content-MD5`` header value for a body.

    The service expects the base64 encoding of the lowercase hex MD5 digest, not of
    the raw digest bytes.
    """
    return base64.b64encode(md5(data).hexdigest().encode("ascii")).decode("ascii")


def encode_payload(payload: Payload, encoder: Encoder | None = None) -> EncodedBody:
    """Resolve a payload into the bytes to send and their digest.

    :param payload: The payload to encode. ``None`` encodes to an empty body.
    :param encoder: The encoder for structured payloads. Defaults to
        :py:class:`XMLEncoder`.
    :raises SerializationError: If a structured payload can't be serialized.
    """
    match payload:
        case None:
            data = b""
        case RawPayload(data=raw):
            data = raw
        case XMLPayload(value=value):
            data = (encoder or XMLEncoder()).encode(value)
        case _:
            raise SerializationError(
                "Expected a RawPayload, XMLPayload, or None payload, got "
                f"{type(payload).__name__}."
            )
    return EncodedBody(data=data, content_md5=content_md5(data))

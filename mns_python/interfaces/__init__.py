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
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class Decoder(Protocol):
    """Deserializes response bodies into typed shapes."""

    def decode(self, body: bytes, shape: type[T]) -> T:
        """Deserialize ``body`` into an instance of ``shape``.

        :param body: The complete response body.
        :param shape: The class to build from the body.
        :raises DeserializationError: If the body is not a well-formed document for
            ``shape``.
        """
        ...


class Encoder(Protocol):
    """Serializes structured request payloads."""

    def encode(self, value: Any) -> bytes:
        """Serialize ``value`` into the wire document format.

        :raises SerializationError: If ``value`` can't be serialized.
        """
        ...

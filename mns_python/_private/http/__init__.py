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
from collections.abc import AsyncIterable
from dataclasses import dataclass, field

from ...async_utils import async_list, consume
from ...interfaces import http as http_interface


@dataclass(kw_only=True)
class HTTPRequest(http_interface.HTTPRequest):
    """A single physical HTTP request."""

    destination: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


# HTTPResponse implements interfaces.http.HTTPResponse but cannot be explicitly
# annotated to reflect this because doing so causes Python to raise an error on the
# read-only properties of the protocol.
class HTTPResponse:
    """An HTTP response whose body is already held in memory."""

    def __init__(
        self,
        *,
        status: int,
        headers: dict[str, str] | None = None,
        body: bytes | AsyncIterable[bytes] = b"",
        reason: str | None = None,
    ) -> None:
        self.status = status
        self.headers = headers if headers is not None else {}
        self.reason = reason
        self._body = async_list([body]) if isinstance(body, bytes) else body
        self.closed = False
        self.consumed = False

    @property
    def body(self) -> AsyncIterable[bytes]:
        return self._body

    async def consume_body(self) -> bytes:
        """Iterate over response body and return as bytes."""
        self.consumed = True
        return await consume(self._body)

    async def close(self) -> None:
        self._body = async_list([])
        self.closed = True

    def __repr__(self) -> str:
        return (
            f"HTTPResponse(status={self.status}, headers={self.headers!r}, "
            f"reason={self.reason!r})"
        )

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
from typing import Protocol

DEFAULT_TIMEOUT = 35.0
DEFAULT_CONNECT_TIMEOUT = 3.0

# The service sends response headers after the timeout it was asked to honor, so the
# read timeout gets a fixed margin on top of the configured value.
RESPONSE_HEADER_TIMEOUT_MARGIN = 1.0


class HTTPRequest(Protocol):
    """HTTP primitive used to construct a single physical HTTP request.

    :param destination: The full URL the request is sent to, including any query.
    :param method: The HTTP method of the request, for example "GET".
    :param headers: Header names mapped to values. Names are sent exactly as given.
    :param body: The encoded request body.
    """

    destination: str
    method: str
    headers: dict[str, str]
    body: bytes


class HTTPResponse(Protocol):
    """HTTP primitives returned from an HTTP client."""

    @property
    def status(self) -> int:
        """The 3 digit response status code (1xx, 2xx, 3xx, 4xx, 5xx)."""
        ...

    @property
    def headers(self) -> dict[str, str]:
        """The response headers."""
        ...

    @property
    def reason(self) -> str | None:
        """Optional string provided by the server explaining the status."""
        ...

    @property
    def body(self) -> AsyncIterable[bytes]:
        """The response payload as iterable of chunks of bytes."""
        ...

    async def consume_body(self) -> bytes:
        """Iterate over response body and return as bytes."""
        ...

    async def close(self) -> None:
        """Release the response body and any resources held for it."""
        ...


@dataclass(kw_only=True)
class HTTPClientConfiguration:
    """Client-level HTTP configuration.

    :param timeout: How long, in seconds, the service is given to answer a request.
    :param connect_timeout: How long, in seconds, to wait for a connection to be
        established.
    """

    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = field(init=False)

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        self.read_timeout = self.timeout + RESPONSE_HEADER_TIMEOUT_MARGIN


@dataclass(kw_only=True)
class HTTPRequestConfiguration:
    """Request-level HTTP configuration.

    :param proxy: URL of the HTTP proxy to send the request through, if any.
    """

    proxy: str | None = None


class HTTPClient(Protocol):
    """An asynchronous HTTP client interface."""

    async def send(
        self,
        request: HTTPRequest,
        *,
        request_config: HTTPRequestConfiguration | None = None,
    ) -> HTTPResponse:
        """Send HTTP request over the wire and return the response.

        :param request: The request including destination, headers, payload.
        :param request_config: Configuration specific to this request.
        :raises TransportError: If the request could not be sent or the response
            did not arrive in time.
        """
        ...

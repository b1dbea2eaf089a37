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
import logging
from collections.abc import Mapping
from threading import Lock
from typing import Any
from urllib.parse import urlsplit

from ._private.auth import (
    AUTHORIZATION,
    CONTENT_MD5,
    CONTENT_TYPE,
    DATE,
    MNS_VERSION,
    MNSCredential,
)
from ._private.http import HTTPRequest
from ._private.http.aiohttp_client import AIOHTTPClient, AIOHTTPClientConfig
from .codecs import Payload, encode_payload
from .interfaces import Encoder
from .interfaces.http import (
    DEFAULT_TIMEOUT,
    HTTPClient,
    HTTPRequestConfiguration,
    HTTPResponse,
)
from .utils import format_http_date

logger = logging.getLogger(__name__)

MNS_API_VERSION = "2015-06-06"
XML_CONTENT_TYPE = "application/xml"
METHODS = frozenset({"GET", "PUT", "POST", "DELETE"})

# Headers the client always sets itself, so the signature covers what is sent.
_MANAGED_HEADERS = frozenset(
    name.lower()
    for name in (MNS_VERSION, CONTENT_TYPE, CONTENT_MD5, DATE, AUTHORIZATION)
)


class MNSClient:
    """Sends signed requests to a single MNS endpoint.

    A client is meant to be created once per endpoint and shared. Concurrent calls to
    :py:meth:`send` are safe; the proxy setting is the only state that can change
    after construction and it's read under a lock.
    """

    def __init__(
        self,
        endpoint: str,
        access_key_id: str,
        access_key_secret: str,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        http_client: HTTPClient | None = None,
        encoder: Encoder | None = None,
    ) -> None:
        """
        :param endpoint: The base URL of the service, for example
            ``http://1234.mns.cn-hangzhou.aliyuncs.com``.
        :param access_key_id: The access key id placed in the authorization header.
        :param access_key_secret: The secret used to sign requests.
        :param timeout: Seconds the service is given to answer. Defaults to 35. Ignored
            when ``http_client`` is given.
        :param proxy: URL of an HTTP proxy to send requests through.
        :param http_client: The HTTP client to send requests with. Defaults to an
            :py:class:`AIOHTTPClient`.
        :param encoder: The encoder for structured payloads.
        :raises ValueError: If the endpoint is empty or not an absolute URL.
        """
        if not endpoint:
            raise ValueError("MNS endpoint is empty.")
        parsed = urlsplit(endpoint)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(f"MNS endpoint must be an absolute URL, got {endpoint!r}.")

        self._endpoint = endpoint.rstrip("/")
        self._access_key_id = access_key_id
        self._credential = MNSCredential(access_key_secret)
        self._encoder = encoder
        if http_client is None:
            if timeout is None or timeout <= 0:
                timeout = DEFAULT_TIMEOUT
            http_client = AIOHTTPClient(
                client_config=AIOHTTPClientConfig(timeout=timeout)
            )
        self._http_client = http_client
        self._proxy_lock = Lock()
        self._proxy = proxy or None

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def proxy(self) -> str | None:
        with self._proxy_lock:
            return self._proxy

    def set_proxy(self, url: str | None) -> None:
        """Route subsequent requests through the proxy at ``url``.

        An empty value or ``None`` sends requests directly.
        """
        with self._proxy_lock:
            self._proxy = url or None

    def authorization(
        self, method: str, headers: Mapping[str, str], resource: str
    ) -> str:
        """Build the ``Authorization`` header value for a request.

        :raises SigningError: If the request can't be signed.
        """
        signature = self._credential.signature(method, headers, resource)
        return f"MNS {self._access_key_id}:{signature}"

    async def send(
        self,
        method: str,
        headers: Mapping[str, str] | None,
        payload: Payload,
        resource: str,
    ) -> HTTPResponse:
        """Sign and send one request, returning the raw response.

        The caller's headers are copied and the version, content type, content digest,
        date and authorization headers are always set by the client, replacing any
        caller values with the same name in any case.

        :param method: One of GET, PUT, POST or DELETE.
        :param headers: Extra request headers, for example ``x-mns-prefix``.
        :param payload: The request body.
        :param resource: The resource path relative to the endpoint, such as
            ``queues/my-queue``. It may carry a query string.
        :raises SerializationError: If the payload can't be serialized.
        :raises SigningError: If the request can't be signed.
        :raises TransportError: If the request can't be sent or times out.
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        body = encode_payload(payload, self._encoder)

        request_headers = {
            name: value
            for name, value in (headers or {}).items()
            if name.lower() not in _MANAGED_HEADERS
        }
        request_headers[MNS_VERSION] = MNS_API_VERSION
        request_headers[CONTENT_TYPE] = XML_CONTENT_TYPE
        request_headers[CONTENT_MD5] = body.content_md5
        request_headers[DATE] = format_http_date()
        request_headers[AUTHORIZATION] = self.authorization(
            method, request_headers, f"/{resource}"
        )

        request = HTTPRequest(
            destination=f"{self._endpoint}/{resource}",
            method=method,
            headers=request_headers,
            body=body.data,
        )
        request_config = HTTPRequestConfiguration(proxy=self.proxy)
        logger.debug("Sending %s /%s", method, resource)
        return await self._http_client.send(request, request_config=request_config)

    async def close(self) -> None:
        """Close the underlying HTTP client if it holds resources."""
        close = getattr(self._http_client, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "MNSClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (
            f"MNSClient(endpoint={self._endpoint!r}, "
            f"access_key_id={self._access_key_id!r})"
        )

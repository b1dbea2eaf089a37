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
import aiohttp

from ...exceptions import TransportError
from ...interfaces import http as http_interface
from . import HTTPResponse

logger = logging.getLogger(__name__)


class AIOHTTPClientConfig(http_interface.HTTPClientConfiguration):
    pass


class AIOHTTPClient(http_interface.HTTPClient):
    """Implementation of :py:class:`...interfaces.http.HTTPClient` using aiohttp."""

    TIMEOUT_EXCEPTIONS = (TimeoutError, aiohttp.ServerTimeoutError)

    def __init__(
        self,
        *,
        client_config: AIOHTTPClientConfig | None = None,
        _session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        :param client_config: Configuration that applies to all requests made with this
        client.
        """
        self._config = client_config or AIOHTTPClientConfig()
        self._timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=self._config.connect_timeout,
            sock_read=self._config.read_timeout,
        )
        # The session binds to the running event loop, so it's created on first use.
        self._session = _session

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def send(
        self,
        request: http_interface.HTTPRequest,
        *,
        request_config: http_interface.HTTPRequestConfiguration | None = None,
    ) -> HTTPResponse:
        """Send HTTP request using aiohttp client.

        Redirects are not followed, a 3xx response is returned as is.

        :param request: The request including destination, headers, payload.
        :param request_config: Configuration specific to this request.
        """
        request_config = request_config or http_interface.HTTPRequestConfiguration()
        logger.debug("Sending %s request to %s", request.method, request.destination)

        try:
            async with self.session.request(
                method=request.method,
                url=request.destination,
                headers=request.headers,
                data=request.body,
                proxy=request_config.proxy,
                timeout=self._timeout,
                allow_redirects=False,
            ) as resp:
                return await self._marshal_response(resp)
        except self.TIMEOUT_EXCEPTIONS as e:
            raise TransportError(
                f"Timed out sending request to {request.destination}: {e!r}",
                is_timeout_error=True,
            ) from e
        except (aiohttp.ClientError, OSError) as e:
            raise TransportError(
                f"Failed to send request to {request.destination}: {e!r}"
            ) from e

    async def _marshal_response(
        self, aiohttp_resp: aiohttp.ClientResponse
    ) -> HTTPResponse:
        """Convert a ``aiohttp.ClientResponse`` to a
        ``mns_python._private.http.HTTPResponse``"""
        # Reading inside the ``async with`` block returns the connection to the pool
        # as soon as the body is buffered.
        body = await aiohttp_resp.read()
        return HTTPResponse(
            status=aiohttp_resp.status,
            headers=dict(aiohttp_resp.headers),
            body=body,
            reason=aiohttp_resp.reason,
        )

    async def close(self) -> None:
        """Close the underlying session and its connection pool."""
        if self._session is not None and not self._session.closed:
            await self._session.close()

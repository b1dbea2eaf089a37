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
import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterable
from concurrent.futures import Future
from functools import partial
from io import BytesIO
from threading import Lock
from typing import Any
from urllib.parse import urlsplit

from awscrt import http as crt_http
from awscrt import io as crt_io
from awscrt.exceptions import AwsCrtError

from ...exceptions import TransportError
from ...interfaces import http as http_interface

logger = logging.getLogger(__name__)

_TIMEOUT_ERROR_NAMES = frozenset({"AWS_IO_SOCKET_TIMEOUT", "AWS_IO_SOCKET_CLOSED"})


class _AWSCRTEventLoop:
    def __init__(self) -> None:
        self.bootstrap = self._initialize_default_loop()

    def _initialize_default_loop(self) -> crt_io.ClientBootstrap:
        event_loop_group = crt_io.EventLoopGroup(1)
        host_resolver = crt_io.DefaultHostResolver(event_loop_group)
        return crt_io.ClientBootstrap(event_loop_group, host_resolver)


class AWSCRTHTTPResponse:
    """Streaming HTTP response fed by awscrt callbacks.

    Implements :py:class:`...interfaces.http.HTTPResponse`.
    """

    def __init__(self) -> None:
        self._stream: crt_http.HttpClientStream | None = None
        self._status_code_future: Future[int] = Future()
        self._headers_future: Future[dict[str, str]] = Future()
        self._chunk_futures: list[Future[bytes]] = []
        self._received_chunks: list[bytes] = []
        self._chunk_lock: Lock = Lock()
        self._closed = False

    def _set_stream(self, stream: crt_http.HttpClientStream) -> None:
        if self._stream is not None:
            raise TransportError("Stream already set on AWSCRTHTTPResponse object")
        self._stream = stream
        self._stream.completion_future.add_done_callback(self._on_complete)
        self._stream.activate()

    def _on_headers(
        self, status_code: int, headers: list[tuple[str, str]], **kwargs: Any
    ) -> None:  # pragma: crt-callback
        if self._status_code_future.done():
            # Informational responses such as 100-continue come first.
            return
        self._status_code_future.set_result(status_code)
        self._headers_future.set_result(dict(headers))

    def _on_body(self, chunk: bytes, **kwargs: Any) -> None:  # pragma: crt-callback
        with self._chunk_lock:
            if self._closed:
                return
            if self._chunk_futures:
                future = self._chunk_futures.pop(0)
                future.set_result(chunk)
            else:
                self._received_chunks.append(chunk)

    def _get_chunk_future(self) -> Future[bytes]:
        if self._stream is None:
            raise TransportError("Stream not set")
        with self._chunk_lock:
            future: Future[bytes] = Future()
            if self._received_chunks:
                chunk = self._received_chunks.pop(0)
                future.set_result(chunk)
            elif self._closed or self._stream.completion_future.done():
                future.set_result(b"")
            else:
                self._chunk_futures.append(future)
        return future

    def _on_complete(
        self, completion_future: Future[int]
    ) -> None:  # pragma: crt-callback
        error = completion_future.exception()
        if error is not None and not self._status_code_future.done():
            self._status_code_future.set_exception(error)
        with self._chunk_lock:
            while self._chunk_futures:
                self._chunk_futures.pop(0).set_result(b"")

    async def wait_for_status(self, timeout: float) -> None:
        await asyncio.wait_for(
            asyncio.wrap_future(self._status_code_future), timeout=timeout
        )

    @property
    def status(self) -> int:
        """The 3 digit response status code (1xx, 2xx, 3xx, 4xx, 5xx)."""
        return self._status_code_future.result()

    @property
    def headers(self) -> dict[str, str]:
        if not self._headers_future.done():
            raise TransportError("Headers not received yet")
        return self._headers_future.result()

    @property
    def reason(self) -> str | None:
        """Always None, awscrt doesn't report the reason phrase."""
        return None

    @property
    def body(self) -> AsyncIterable[bytes]:
        return self.chunks()

    async def chunks(self) -> AsyncGenerator[bytes, None]:
        while True:
            chunk = await asyncio.wrap_future(self._get_chunk_future())
            if chunk:
                yield chunk
            else:
                break

    async def consume_body(self) -> bytes:
        """Iterate over response body and return as bytes."""
        body = b""
        async for chunk in self.body:
            body += chunk
        return body

    async def close(self) -> None:
        with self._chunk_lock:
            self._closed = True
            self._received_chunks.clear()
            while self._chunk_futures:
                self._chunk_futures.pop(0).set_result(b"")


ConnectionPoolKey = tuple[str, str, int | None, str | None]
ConnectionPoolDict = dict[ConnectionPoolKey, list[crt_http.HttpClientConnection]]


class AWSCRTHTTPClientConfig(http_interface.HTTPClientConfiguration):
    pass


class AWSCRTHTTPClient(http_interface.HTTPClient):
    """Implementation of :py:class:`...interfaces.http.HTTPClient` using awscrt."""

    _HTTP_PORT = 80
    _HTTPS_PORT = 443

    def __init__(
        self,
        eventloop: _AWSCRTEventLoop | None = None,
        client_config: AWSCRTHTTPClientConfig | None = None,
    ) -> None:
        """
        :param client_config: Configuration that applies to all requests made with this
        client.
        """
        self._config = client_config or AWSCRTHTTPClientConfig()
        if eventloop is None:
            eventloop = _AWSCRTEventLoop()
        self._eventloop = eventloop
        self._client_bootstrap = self._eventloop.bootstrap
        self._tls_ctx = crt_io.ClientTlsContext(crt_io.TlsContextOptions())
        self._socket_options = crt_io.SocketOptions()
        self._socket_options.connect_timeout_ms = int(
            self._config.connect_timeout * 1000
        )
        self._connections: ConnectionPoolDict = {}
        self._pool_lock = Lock()

    async def send(
        self,
        request: http_interface.HTTPRequest,
        *,
        request_config: http_interface.HTTPRequestConfiguration | None = None,
    ) -> AWSCRTHTTPResponse:
        """Send HTTP request using awscrt client.

        Each request holds a connection to itself until its stream completes. A
        connection whose request failed or timed out is closed rather than reused.

        :param request: The request including destination, headers, payload.
        :param request_config: Configuration specific to this request.
        """
        request_config = request_config or http_interface.HTTPRequestConfiguration()
        logger.debug("Sending %s request to %s", request.method, request.destination)
        connection_key = self._connection_key(request.destination, request_config.proxy)
        connection: crt_http.HttpClientConnection | None = None
        try:
            connection = await self._get_connection(
                connection_key, request.destination, request_config.proxy
            )
            crt_response = AWSCRTHTTPResponse()
            crt_stream = connection.request(
                self._marshal_request(request),
                crt_response._on_headers,
                crt_response._on_body,
            )
            crt_stream.completion_future.add_done_callback(
                partial(self._release_connection, connection_key, connection)
            )
            crt_response._set_stream(crt_stream)
            await crt_response.wait_for_status(self._config.read_timeout)
        except TimeoutError as e:
            self._discard_connection(connection)
            raise TransportError(
                f"Timed out sending request to {request.destination}",
                is_timeout_error=True,
            ) from e
        except AwsCrtError as e:
            self._discard_connection(connection)
            raise TransportError(
                f"Failed to send request to {request.destination}: {e.name}",
                is_timeout_error=e.name in _TIMEOUT_ERROR_NAMES,
            ) from e
        return crt_response

    async def close(self) -> None:
        """Close every idle pooled connection."""
        with self._pool_lock:
            connections = [c for idle in self._connections.values() for c in idle]
            self._connections.clear()
        for connection in connections:
            await asyncio.wrap_future(connection.close())

    def _connection_key(self, destination: str, proxy: str | None) -> ConnectionPoolKey:
        url = urlsplit(destination)
        return (url.scheme, url.hostname or "", url.port, proxy)

    async def _get_connection(
        self, connection_key: ConnectionPoolKey, destination: str, proxy: str | None
    ) -> crt_http.HttpClientConnection:
        with self._pool_lock:
            idle = self._connections.get(connection_key, [])
            while idle:
                connection = idle.pop()
                if connection.is_open():
                    return connection

        connect_future = self._build_new_connection(destination, proxy)
        return await asyncio.wait_for(
            asyncio.wrap_future(connect_future), timeout=self._config.connect_timeout
        )

    def _release_connection(
        self,
        connection_key: ConnectionPoolKey,
        connection: crt_http.HttpClientConnection,
        completion_future: Future[int],
    ) -> None:  # pragma: crt-callback
        if completion_future.exception() is not None or not connection.is_open():
            return
        with self._pool_lock:
            self._connections.setdefault(connection_key, []).append(connection)

    def _discard_connection(
        self, connection: crt_http.HttpClientConnection | None
    ) -> None:
        # An HTTP/1.1 connection can't carry another request while a stream on it is
        # still pending.
        if connection is not None:
            connection.close()

    def _build_new_connection(
        self, destination: str, proxy: str | None
    ) -> Future[crt_http.HttpClientConnection]:
        url = urlsplit(destination)
        if url.hostname is None:
            raise TransportError(f"Unable to parse host from URL: {destination}")
        if url.scheme == "http":
            port = self._HTTP_PORT
            tls_connection_options = None
        elif url.scheme == "https":
            port = self._HTTPS_PORT
            tls_connection_options = self._tls_ctx.new_connection_options()
            tls_connection_options.set_server_name(url.hostname)
        else:
            raise TransportError(
                f"AWSCRTHTTPClient does not support URL scheme {url.scheme}"
            )
        if url.port is not None:
            port = url.port

        return crt_http.HttpClientConnection.new(
            bootstrap=self._client_bootstrap,
            host_name=url.hostname,
            port=port,
            socket_options=self._socket_options,
            tls_connection_options=tls_connection_options,
            proxy_options=self._proxy_options(proxy),
        )

    def _proxy_options(self, proxy: str | None) -> crt_http.HttpProxyOptions | None:
        if not proxy:
            return None
        url = urlsplit(proxy)
        if url.hostname is None:
            raise TransportError(f"Unable to parse host from proxy URL: {proxy}")
        options = crt_http.HttpProxyOptions(
            host_name=url.hostname, port=url.port or self._HTTP_PORT
        )
        if url.username is not None:
            options.auth_type = crt_http.HttpProxyAuthenticationType.Basic
            options.auth_username = url.username
            options.auth_password = url.password or ""
        return options

    def _render_path(self, destination: str) -> str:
        url = urlsplit(destination)
        path = url.path or "/"
        query = f"?{url.query}" if url.query else ""
        return f"{path}{query}"

    def _marshal_request(
        self, request: http_interface.HTTPRequest
    ) -> crt_http.HttpRequest:
        """Create :py:class:`awscrt.http.HttpRequest` from
        :py:class:`...interfaces.http.HTTPRequest`"""
        headers_list = list(request.headers.items())
        header_names = {name.lower() for name in request.headers}
        if "host" not in header_names:
            headers_list.append(("Host", urlsplit(request.destination).netloc))
        if "content-length" not in header_names:
            headers_list.append(("Content-Length", str(len(request.body))))

        return crt_http.HttpRequest(
            method=request.method,
            path=self._render_path(request.destination),
            headers=crt_http.HttpHeaders(headers_list),
            body_stream=BytesIO(request.body),
        )

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
"""End-to-end calls against a local HTTP server standing in for the service."""
import asyncio

import pytest
from aiohttp import web

from mns_python import (
    DeserializationError,
    MNSClient,
    MNSLocation,
    QueueAlreadyExistsError,
    QueueManager,
    QueueNotExistError,
    ServiceError,
    TransportError,
    XMLDecoder,
    XMLPayload,
    send,
)
from mns_python._private.auth import MNSCredential
from mns_python.models import CreateQueueRequest, QueueAttribute

NOT_EXIST = b"""<?xml version="1.0" encoding="UTF-8"?>
<Error xmlns="http://mns.aliyuncs.com/doc/v1/">
  <Code>QueueNotExist</Code>
  <Message>The queue name you provided is not exist.</Message>
  <RequestId>5F3F6A4D3B3E2C1A</RequestId>
  <HostId>http://1234.mns.cn-hangzhou.aliyuncs.com</HostId>
</Error>"""


def respond(status: int, body: bytes = b""):
    received: list[tuple[str, str, dict[str, str], bytes]] = []

    async def handler(request: web.Request) -> web.Response:
        data = await request.read()
        received.append((request.method, request.path_qs, dict(request.headers), data))
        return web.Response(
            status=status, body=body, headers={"Content-Type": "application/xml"}
        )

    return handler, received


@pytest.mark.asyncio
async def test_create_queue_created(serve) -> None:
    handler, received = respond(201)

    async with serve(handler) as endpoint:
        async with MNSClient(endpoint, "access-id", "secret") as client:
            result = await send(
                client,
                XMLDecoder(),
                "PUT",
                None,
                XMLPayload(CreateQueueRequest(visibility_timeout=30)),
                "queues/test-queue",
            )

    assert result.status == 201
    assert result.output is None

    (method, path, headers, body) = received[0]
    assert method == "PUT"
    assert path == "/queues/test-queue"
    assert b"<VisibilityTimeout>30</VisibilityTimeout>" in body
    signature = MNSCredential("secret").signature(method, headers, path)
    assert headers["Authorization"] == f"MNS access-id:{signature}"


@pytest.mark.asyncio
async def test_create_queue_already_exists(serve) -> None:
    handler, received = respond(204)

    async with serve(handler) as endpoint:
        async with MNSClient(endpoint, "access-id", "secret") as client:
            result = await send(
                client,
                XMLDecoder(),
                "PUT",
                None,
                XMLPayload(CreateQueueRequest()),
                "queues/test-queue",
            )
        assert result.status == 204

        # The manager builds regional endpoints, so reach the server as a proxy.
        manager = QueueManager("1234", "access-id", "secret", proxy=endpoint)
        try:
            with pytest.raises(QueueAlreadyExistsError):
                await manager.create_queue(MNSLocation.HANGZHOU, "test-queue")
        finally:
            await manager.close()

    assert received[1][2]["Host"] == "1234.mns.cn-hangzhou.aliyuncs.com"


@pytest.mark.asyncio
async def test_get_missing_queue(serve) -> None:
    handler, _ = respond(404, NOT_EXIST)

    async with serve(handler) as endpoint:
        async with MNSClient(endpoint, "access-id", "secret") as client:
            with pytest.raises(ServiceError) as exc_info:
                await send(
                    client,
                    XMLDecoder(),
                    "GET",
                    None,
                    None,
                    "queues/missing",
                    QueueAttribute,
                )

        manager = QueueManager("1234", "access-id", "secret", proxy=endpoint)
        try:
            with pytest.raises(QueueNotExistError):
                await manager.get_queue_attributes(MNSLocation.HANGZHOU, "missing")
        finally:
            await manager.close()

    assert exc_info.value.status == 404
    assert exc_info.value.code == "QueueNotExist"
    assert exc_info.value.message == "The queue name you provided is not exist."


@pytest.mark.asyncio
async def test_endpoint_never_answers(serve) -> None:
    release = asyncio.Event()

    async def handler(request: web.Request) -> web.Response:
        await release.wait()
        return web.Response(status=200)

    async with serve(handler) as endpoint:
        async with MNSClient(endpoint, "access-id", "secret", timeout=0.2) as client:
            with pytest.raises(TransportError) as exc_info:
                await send(
                    client, XMLDecoder(), "GET", None, None, "queues/test-queue"
                )
        release.set()

    assert exc_info.value.is_timeout_error


@pytest.mark.asyncio
async def test_redirect_is_not_success(serve) -> None:
    seen_paths: list[str] = []

    async def handler(request: web.Request) -> web.Response:
        seen_paths.append(request.path)
        if request.path == "/queues/q":
            return web.Response(status=302, headers={"Location": "/elsewhere"})
        return web.Response(status=200)

    async with serve(handler) as endpoint:
        async with MNSClient(endpoint, "access-id", "secret") as client:
            with pytest.raises(DeserializationError):
                await send(client, XMLDecoder(), "DELETE", None, None, "queues/q")

    assert seen_paths == ["/queues/q"]


@pytest.mark.asyncio
async def test_redirect_with_error_body(serve) -> None:
    handler, received = respond(301, NOT_EXIST)

    async with serve(handler) as endpoint:
        async with MNSClient(endpoint, "access-id", "secret") as client:
            with pytest.raises(ServiceError) as exc_info:
                await send(client, XMLDecoder(), "GET", None, None, "queues/q")

    assert exc_info.value.status == 301
    assert len(received) == 1

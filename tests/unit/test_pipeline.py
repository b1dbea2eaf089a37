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

import pytest

from mns_python.client import MNSClient
from mns_python.codecs import XMLDecoder
from mns_python.exceptions import DeserializationError, ServiceError, TransportError
from mns_python.models import QueueAttribute
from mns_python.pipeline import SendResult, is_success, send
from mns_python.testing import MockHTTPClient

ENDPOINT = "http://1234.mns.cn-hangzhou.aliyuncs.com"

ERROR_BODY = b"""<?xml version="1.0" encoding="UTF-8"?>
<Error xmlns="http://mns.aliyuncs.com/doc/v1/">
  <Code>QueueNotExist</Code>
  <Message>The queue name you provided is not exist.</Message>
  <RequestId>5F3F6A4D3B3E2C1A</RequestId>
  <HostId>http://1234.mns.cn-hangzhou.aliyuncs.com</HostId>
</Error>"""


@pytest.fixture
def http_client() -> MockHTTPClient:
    return MockHTTPClient()


@pytest.fixture
def client(http_client: MockHTTPClient) -> MNSClient:
    return MNSClient(ENDPOINT, "access-id", "secret", http_client=http_client)


@pytest.mark.parametrize(
    "status,expected",
    [
        (100, False),
        (200, True),
        (201, True),
        (202, False),
        (204, True),
        (301, False),
        (302, False),
        (304, False),
        (404, False),
        (500, False),
    ],
)
def test_is_success(status: int, expected: bool) -> None:
    assert is_success(status) is expected


@pytest.mark.parametrize("status", [200, 201, 204])
@pytest.mark.asyncio
async def test_success_without_output(
    client: MNSClient, http_client: MockHTTPClient, status: int
) -> None:
    response = http_client.add_response(status, body=b"ignored, not even xml")

    result = await send(client, XMLDecoder(), "DELETE", None, None, "queues/q")

    assert result == SendResult(status=status, output=None)
    assert not response.consumed
    assert response.closed


@pytest.mark.asyncio
async def test_success_with_output(
    client: MNSClient, http_client: MockHTTPClient
) -> None:
    response = http_client.add_response(
        200,
        body=b"<Queue><QueueName>q</QueueName><DelaySeconds>3</DelaySeconds></Queue>",
    )

    result = await send(
        client, XMLDecoder(), "GET", None, None, "queues/q", QueueAttribute
    )

    assert result.status == 200
    assert result.output == QueueAttribute(queue_name="q", delay_seconds=3)
    assert response.closed


@pytest.mark.asyncio
async def test_success_with_malformed_output(
    client: MNSClient, http_client: MockHTTPClient
) -> None:
    response = http_client.add_response(200, body=b"<Queue>")

    with pytest.raises(DeserializationError):
        await send(client, XMLDecoder(), "GET", None, None, "queues/q", QueueAttribute)
    assert response.closed


@pytest.mark.asyncio
async def test_service_error_is_raised(
    client: MNSClient, http_client: MockHTTPClient
) -> None:
    response = http_client.add_response(404, body=ERROR_BODY)

    with pytest.raises(ServiceError) as exc_info:
        await send(client, XMLDecoder(), "GET", None, None, "queues/q", QueueAttribute)

    error = exc_info.value
    assert error.status == 404
    assert error.code == "QueueNotExist"
    assert error.message == "The queue name you provided is not exist."
    assert error.request_id == "5F3F6A4D3B3E2C1A"
    assert error.host_id == "http://1234.mns.cn-hangzhou.aliyuncs.com"
    assert str(error) == "QueueNotExist: The queue name you provided is not exist."
    assert response.closed


@pytest.mark.asyncio
async def test_service_error_without_output_shape(
    client: MNSClient, http_client: MockHTTPClient
) -> None:
    # The decoded error is surfaced rather than reported as a success.
    http_client.add_response(403, body=ERROR_BODY)

    with pytest.raises(ServiceError):
        await send(client, XMLDecoder(), "DELETE", None, None, "queues/q")


@pytest.mark.parametrize("body", [b"", b"<html>Bad Gateway</html>", b"<Error>"])
@pytest.mark.asyncio
async def test_malformed_error_body(
    client: MNSClient, http_client: MockHTTPClient, body: bytes
) -> None:
    response = http_client.add_response(502, body=body)

    with pytest.raises(DeserializationError):
        await send(client, XMLDecoder(), "GET", None, None, "queues/q")
    assert response.closed


@pytest.mark.asyncio
async def test_transport_error_is_not_wrapped(
    client: MNSClient, http_client: MockHTTPClient
) -> None:
    http_client.add_error(TransportError("timed out", is_timeout_error=True))

    with pytest.raises(TransportError) as exc_info:
        await send(client, XMLDecoder(), "GET", None, None, "queues/q")
    assert exc_info.value.is_timeout_error


@pytest.mark.asyncio
async def test_no_retry_on_server_error(
    client: MNSClient, http_client: MockHTTPClient
) -> None:
    http_client.add_response(500, body=ERROR_BODY)
    http_client.add_response(200)

    with pytest.raises(ServiceError):
        await send(client, XMLDecoder(), "GET", None, None, "queues/q")
    assert http_client.call_count == 1

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
from typing import Any, NamedTuple, TypeVar

from .client import MNSClient
from .codecs import Payload
from .exceptions import ServiceError
from .interfaces import Decoder
from .models import ErrorResponse

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({200, 201, 204})

_T = TypeVar("_T")


class SendResult(NamedTuple):
    """The outcome of a successful call."""

    status: int
    """The HTTP status code, one of 200, 201 or 204."""

    output: Any = None
    """The decoded response body, or None when no output shape was requested."""


def is_success(status: int) -> bool:
    """Whether a status code belongs to the success class."""
    return status in SUCCESS_STATUSES


async def send(
    client: MNSClient,
    decoder: Decoder,
    method: str,
    headers: Mapping[str, str] | None,
    payload: Payload,
    resource: str,
    output_shape: type[_T] | None = None,
) -> SendResult:
    """Send one request and interpret the response.

    The response body is released before this returns, whatever the outcome.

    :param client: The client for the target endpoint.
    :param decoder: The decoder for success and error bodies.
    :param method: The HTTP method.
    :param headers: Extra request headers.
    :param payload: The request body.
    :param resource: The resource path relative to the endpoint.
    :param output_shape: The shape to decode a success body into. If None, the body
        of a successful response is not read.
    :returns: The status code and the decoded output, if any.
    :raises ServiceError: If the service answered with a non-success status. The
        error carries the decoded code and message.
    :raises DeserializationError: If a success body doesn't match ``output_shape``
        or an error body is malformed.
    """
    response = await client.send(method, headers, payload, resource)
    try:
        if not is_success(response.status):
            body = await response.consume_body()
            error = decoder.decode(body, ErrorResponse)
            logger.debug(
                "%s /%s failed with status %s: %s",
                method,
                resource,
                response.status,
                error.code,
            )
            raise ServiceError(
                status=response.status,
                code=error.code,
                message=error.message,
                request_id=error.request_id,
                host_id=error.host_id,
            )

        if output_shape is None:
            return SendResult(status=response.status)

        body = await response.consume_body()
        return SendResult(
            status=response.status, output=decoder.decode(body, output_shape)
        )
    finally:
        await response.close()

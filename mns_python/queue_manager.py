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
from enum import Enum

from .client import MNSClient
from .codecs import XMLDecoder, XMLPayload
from .exceptions import (
    MNSError,
    QueueAlreadyExistsError,
    QueueNotExistError,
    ServiceError,
)
from .interfaces import Decoder
from .interfaces.http import HTTPClient
from .models import CreateQueueRequest, QueueAttribute, Queues
from .pipeline import SendResult, send
from .validation import check_attributes, check_queue_name, check_ret_number

logger = logging.getLogger(__name__)

MARKER_HEADER = "x-mns-marker"
RET_NUMBER_HEADER = "x-mns-ret-number"
PREFIX_HEADER = "x-mns-prefix"


class MNSLocation(str, Enum):
    """Regions with an MNS endpoint."""

    BEIJING = "cn-beijing"
    HANGZHOU = "cn-hangzhou"
    QINGDAO = "cn-qingdao"
    SINGAPORE = "ap-southeast-1"


class QueueManager:
    """Creates, configures, inspects, lists and deletes queues.

    One :py:class:`MNSClient` is created per region on first use and reused for
    every later call to that region.
    """

    def __init__(
        self,
        owner_id: str,
        access_key_id: str,
        access_key_secret: str,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        http_client: HTTPClient | None = None,
        decoder: Decoder | None = None,
    ) -> None:
        """
        :param owner_id: The account id that owns the queues.
        :param access_key_id: The access key id used to sign requests.
        :param access_key_secret: The access key secret used to sign requests.
        :param timeout: Seconds the service is given to answer each request.
        :param proxy: URL of an HTTP proxy to send requests through.
        :param http_client: The HTTP client shared by the regional clients.
        :param decoder: The decoder for response bodies.
        """
        self._owner_id = owner_id
        self._access_key_id = access_key_id
        self._access_key_secret = access_key_secret
        self._timeout = timeout
        self._proxy = proxy
        self._http_client = http_client
        self._decoder = decoder or XMLDecoder()
        self._clients: dict[str, MNSClient] = {}

    def endpoint(self, location: MNSLocation | str) -> str:
        """The service endpoint for a region."""
        region = location.value if isinstance(location, MNSLocation) else location
        return f"http://{self._owner_id}.mns.{region}.aliyuncs.com"

    def client(self, location: MNSLocation | str) -> MNSClient:
        """Get the client for a region, creating it on first use."""
        endpoint = self.endpoint(location)
        if endpoint not in self._clients:
            self._clients[endpoint] = MNSClient(
                endpoint,
                self._access_key_id,
                self._access_key_secret,
                timeout=self._timeout,
                proxy=self._proxy,
                http_client=self._http_client,
            )
        return self._clients[endpoint]

    async def create_queue(
        self,
        location: MNSLocation | str,
        queue_name: str,
        *,
        delay_seconds: int = 0,
        max_message_size: int = 65536,
        message_retention_period: int = 345600,
        visibility_timeout: int = 30,
        polling_wait_seconds: int = 0,
    ) -> None:
        """Create a queue.

        :raises QueueAlreadyExistsError: If a queue with the name already exists.
        :raises ParameterValidationError: If the name or an attribute is invalid.
        """
        queue_name = queue_name.strip()
        check_queue_name(queue_name)
        message = self._queue_request(
            delay_seconds=delay_seconds,
            max_message_size=max_message_size,
            message_retention_period=message_retention_period,
            visibility_timeout=visibility_timeout,
            polling_wait_seconds=polling_wait_seconds,
        )

        result = await self._send(
            location, "PUT", f"queues/{queue_name}", payload=XMLPayload(message)
        )
        # The service answers 204 when an identical queue already exists.
        if result.status == 204:
            raise QueueAlreadyExistsError(f"Queue {queue_name} already exists.")
        logger.debug("Created queue %s in %s", queue_name, location)

    async def set_queue_attributes(
        self,
        location: MNSLocation | str,
        queue_name: str,
        *,
        delay_seconds: int,
        max_message_size: int,
        message_retention_period: int,
        visibility_timeout: int,
        polling_wait_seconds: int,
    ) -> None:
        """Replace the attributes of an existing queue."""
        queue_name = queue_name.strip()
        check_queue_name(queue_name)
        message = self._queue_request(
            delay_seconds=delay_seconds,
            max_message_size=max_message_size,
            message_retention_period=message_retention_period,
            visibility_timeout=visibility_timeout,
            polling_wait_seconds=polling_wait_seconds,
        )
        await self._send(
            location,
            "PUT",
            f"queues/{queue_name}?metaoverride=true",
            payload=XMLPayload(message),
        )

    async def get_queue_attributes(
        self, location: MNSLocation | str, queue_name: str
    ) -> QueueAttribute:
        """Get the attributes and message counts of a queue.

        :raises QueueNotExistError: If the queue doesn't exist.
        """
        queue_name = queue_name.strip()
        check_queue_name(queue_name)
        result = await self._send(
            location, "GET", f"queues/{queue_name}", output_shape=QueueAttribute
        )
        return result.output

    async def delete_queue(self, location: MNSLocation | str, queue_name: str) -> None:
        """Delete a queue and every message in it."""
        queue_name = queue_name.strip()
        check_queue_name(queue_name)
        await self._send(location, "DELETE", f"queues/{queue_name}")

    async def list_queues(
        self,
        location: MNSLocation | str,
        *,
        marker: str | bytes | None = None,
        ret_number: int = 0,
        prefix: str = "",
    ) -> Queues:
        """List one page of queues.

        :param marker: The ``next_marker`` of the previous page.
        :param ret_number: The page size, between 1 and 1000. Zero uses the service
            default.
        :param prefix: Only list queues whose names start with this prefix.
        """
        check_ret_number(ret_number)
        headers: dict[str, str] = {}

        if isinstance(marker, bytes):
            marker = marker.decode("utf-8")
        if marker and (marker := marker.strip()):
            headers[MARKER_HEADER] = marker
        if ret_number:
            headers[RET_NUMBER_HEADER] = str(ret_number)
        if prefix := prefix.strip():
            headers[PREFIX_HEADER] = prefix

        result = await self._send(
            location, "GET", "queues", headers=headers, output_shape=Queues
        )
        return result.output

    async def close(self) -> None:
        """Close the HTTP clients this manager created.

        An ``http_client`` passed to the constructor is left open for its owner.
        """
        clients = list(self._clients.values())
        self._clients.clear()
        if self._http_client is not None:
            return
        for client in clients:
            await client.close()

    def _queue_request(
        self,
        *,
        delay_seconds: int,
        max_message_size: int,
        message_retention_period: int,
        visibility_timeout: int,
        polling_wait_seconds: int,
    ) -> CreateQueueRequest:
        check_attributes(
            delay_seconds=delay_seconds,
            max_message_size=max_message_size,
            message_retention_period=message_retention_period,
            visibility_timeout=visibility_timeout,
            polling_wait_seconds=polling_wait_seconds,
        )
        return CreateQueueRequest(
            delay_seconds=delay_seconds,
            max_message_size=max_message_size,
            message_retention_period=message_retention_period,
            visibility_timeout=visibility_timeout,
            polling_wait_seconds=polling_wait_seconds,
        )

    async def _send(
        self,
        location: MNSLocation | str,
        method: str,
        resource: str,
        *,
        headers: dict[str, str] | None = None,
        payload: XMLPayload | None = None,
        output_shape: type | None = None,
    ) -> SendResult:
        try:
            return await send(
                self.client(location),
                self._decoder,
                method,
                headers,
                payload,
                resource,
                output_shape,
            )
        except ServiceError as e:
            mapped = _map_service_error(e)
            if mapped is e:
                raise
            raise mapped from e


_ERROR_CODES: dict[str, type[ServiceError]] = {
    "QueueNotExist": QueueNotExistError,
}


def _map_service_error(error: ServiceError) -> MNSError:
    if error.code == "QueueAlreadyExist":
        return QueueAlreadyExistsError(error.message or error.code)
    if (error_type := _ERROR_CODES.get(error.code)) is not None:
        return error_type(
            status=error.status,
            code=error.code,
            message=error.message,
            request_id=error.request_id,
            host_id=error.host_id,
        )
    return error

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
"""Shapes for the XML documents exchanged with the queue API."""
from dataclasses import dataclass
from typing import ClassVar

from ._private.xmlcodec import xml_field

MNS_XML_NAMESPACE = "http://mns.aliyuncs.com/doc/v1/"


@dataclass(kw_only=True)
class CreateQueueRequest:
    """The attributes sent when creating a queue or changing its attributes."""

    _xml_name: ClassVar[str] = "Queue"
    _xml_namespace: ClassVar[str] = MNS_XML_NAMESPACE

    delay_seconds: int | None = xml_field("DelaySeconds")
    max_message_size: int | None = xml_field("MaxMessageSize")
    message_retention_period: int | None = xml_field("MessageRetentionPeriod")
    visibility_timeout: int | None = xml_field("VisibilityTimeout")
    polling_wait_seconds: int | None = xml_field("PollingWaitSeconds")


@dataclass(kw_only=True)
class QueueAttribute:
    """The attributes and message counts of a queue."""

    _xml_name: ClassVar[str] = "Queue"

    queue_name: str = xml_field("QueueName", default="")
    create_time: int = xml_field("CreateTime", default=0)
    last_modify_time: int = xml_field("LastModifyTime", default=0)
    delay_seconds: int = xml_field("DelaySeconds", default=0)
    max_message_size: int = xml_field("MaxMessageSize", default=0)
    message_retention_period: int = xml_field("MessageRetentionPeriod", default=0)
    visibility_timeout: int = xml_field("VisibilityTimeout", default=0)
    polling_wait_seconds: int = xml_field("PollingWaitSeconds", default=0)
    active_messages: int = xml_field("ActiveMessages", default=0)
    inactive_messages: int = xml_field("InactiveMessages", default=0)
    delay_messages: int = xml_field("DelayMessages", default=0)


@dataclass(kw_only=True)
class QueueEntry:
    _xml_name: ClassVar[str] = "Queue"

    queue_url: str = xml_field("QueueURL", default="")


@dataclass(kw_only=True)
class Queues:
    """One page of a queue listing."""

    _xml_name: ClassVar[str] = "Queues"

    queues: list[QueueEntry] = xml_field("Queue", default_factory=list)
    next_marker: str = xml_field("NextMarker", default="")


@dataclass(kw_only=True)
class ErrorResponse:
    """The body the service returns with a non-success status."""

    _xml_name: ClassVar[str] = "Error"

    code: str = xml_field("Code", default="")
    message: str = xml_field("Message", default="")
    request_id: str | None = xml_field("RequestId")
    host_id: str | None = xml_field("HostId")

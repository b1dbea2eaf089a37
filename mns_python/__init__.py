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
"""Client for the Alibaba Cloud Message Service (MNS) queue API."""

from .client import MNSClient
from .codecs import RawPayload, XMLDecoder, XMLEncoder, XMLPayload
from .exceptions import (
    DeserializationError,
    MNSError,
    ParameterValidationError,
    QueueAlreadyExistsError,
    QueueNotExistError,
    SerializationError,
    ServiceError,
    SigningError,
    TransportError,
)
from .pipeline import SendResult, send
from .queue_manager import MNSLocation, QueueManager

__version__ = "0.1.0"

__all__ = (
    "DeserializationError",
    "MNSClient",
    "MNSError",
    "MNSLocation",
    "ParameterValidationError",
    "QueueAlreadyExistsError",
    "QueueManager",
    "QueueNotExistError",
    "RawPayload",
    "SendResult",
    "SerializationError",
    "ServiceError",
    "SigningError",
    "TransportError",
    "XMLDecoder",
    "XMLEncoder",
    "XMLPayload",
    "send",
)

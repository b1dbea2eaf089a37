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
from dataclasses import dataclass, field


class MNSError(Exception):
    """Base exception type for all exceptions raised by mns-python."""


class SerializationError(MNSError):
    """Exception raised when a request payload can't be serialized to XML."""


class DeserializationError(MNSError):
    """Exception raised when a response body can't be deserialized from XML."""


class SigningError(MNSError):
    """Exception raised when a request can't be canonicalized for signing."""


class TransportError(MNSError):
    """Exception raised when an HTTP request could not be sent or answered.

    This covers DNS, connection and timeout failures. These are never retried by the
    client.
    """

    def __init__(self, message: str, *, is_timeout_error: bool = False) -> None:
        super().__init__(message)
        self.is_timeout_error = is_timeout_error
        """Whether the failure was caused by a connect or read timeout."""


class ParameterValidationError(MNSError, ValueError):
    """Exception raised when an operation parameter is out of its allowed range."""


class QueueAlreadyExistsError(MNSError):
    """Exception raised when creating a queue that already exists."""


@dataclass(kw_only=True)
class ServiceError(MNSError):
    """A well-formed error returned by the service.

    Unlike the other exceptions in this module, a service error means the request
    reached the service and was rejected.
    """

    status: int
    """The HTTP status code of the response."""

    code: str = ""
    """The service error code, for example ``QueueNotExist``."""

    message: str = field(default="")
    """The error message returned by the service."""

    request_id: str | None = None
    """The id the service assigned to the failed request."""

    host_id: str | None = None
    """The service host that handled the request."""

    def __post_init__(self) -> None:
        super().__init__(f"{self.code}: {self.message}" if self.code else self.message)


@dataclass(kw_only=True)
class QueueNotExistError(ServiceError):
    """The queue named in the request does not exist."""

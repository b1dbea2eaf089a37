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
"""Range checks for queue operation parameters."""
from .exceptions import ParameterValidationError

MAX_QUEUE_NAME_LENGTH = 256

DELAY_SECONDS_RANGE = (0, 60480)
MAX_MESSAGE_SIZE_RANGE = (1024, 65536)
MESSAGE_RETENTION_PERIOD_RANGE = (60, 1296000)
VISIBILITY_TIMEOUT_RANGE = (1, 43200)
POLLING_WAIT_SECONDS_RANGE = (0, 30)
RET_NUMBER_RANGE = (1, 1000)


def _check_range(name: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ParameterValidationError(
            f"{name} must be between {low} and {high}, got {value}."
        )


def check_queue_name(queue_name: str) -> None:
    if not queue_name:
        raise ParameterValidationError("Queue name must not be empty.")
    if len(queue_name) > MAX_QUEUE_NAME_LENGTH:
        raise ParameterValidationError(
            f"Queue name must be at most {MAX_QUEUE_NAME_LENGTH} characters, got "
            f"{len(queue_name)}."
        )


def check_delay_seconds(seconds: int) -> None:
    _check_range("DelaySeconds", seconds, DELAY_SECONDS_RANGE)


def check_max_message_size(max_size: int) -> None:
    _check_range("MaxMessageSize", max_size, MAX_MESSAGE_SIZE_RANGE)


def check_message_retention_period(retention_period: int) -> None:
    _check_range(
        "MessageRetentionPeriod", retention_period, MESSAGE_RETENTION_PERIOD_RANGE
    )


def check_visibility_timeout(visibility_timeout: int) -> None:
    _check_range("VisibilityTimeout", visibility_timeout, VISIBILITY_TIMEOUT_RANGE)


def check_polling_wait_seconds(polling_wait_seconds: int) -> None:
    _check_range(
        "PollingWaitSeconds", polling_wait_seconds, POLLING_WAIT_SECONDS_RANGE
    )


def check_ret_number(ret_number: int) -> None:
    """Check a listing page size. Zero means the service default."""
    if ret_number != 0:
        _check_range("RetNumber", ret_number, RET_NUMBER_RANGE)


def check_attributes(
    *,
    delay_seconds: int,
    max_message_size: int,
    message_retention_period: int,
    visibility_timeout: int,
    polling_wait_seconds: int,
) -> None:
    """Check every queue attribute, raising on the first one out of range.

    :raises ParameterValidationError: If an attribute is out of range.
    """
    check_delay_seconds(delay_seconds)
    check_max_message_size(max_message_size)
    check_message_retention_period(message_retention_period)
    check_visibility_timeout(visibility_timeout)
    check_polling_wait_seconds(polling_wait_seconds)

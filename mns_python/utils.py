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
from datetime import datetime, timezone
from email.utils import format_datetime


def ensure_utc(value: datetime) -> datetime:
    """Ensures that the given datetime is a UTC timezone-aware datetime.

    If the datetime isn't timzezone-aware, its timezone is set to UTC. If it is
    aware, it's replaced with the equivalent datetime under UTC.

    :param value: A datetime object that may or may not be timezone-aware.
    :returns: A UTC timezone-aware equivalent datetime.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    else:
        return value.astimezone(timezone.utc)


def format_http_date(value: datetime | None = None) -> str:
    """Format a datetime as an :rfc:`9110#section-5.6.7` HTTP-date.

    :param value: The datetime to format. Defaults to the current time.
    :returns: A string such as ``Sun, 06 Nov 1994 08:49:37 GMT``.
    """
    if value is None:
        value = datetime.now(timezone.utc)
    return format_datetime(ensure_utc(value).replace(microsecond=0), usegmt=True)

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
from collections.abc import Mapping
from typing import Protocol


class Credential(Protocol):
    """Computes request signatures from a secret key."""

    def signature(self, method: str, headers: Mapping[str, str], resource: str) -> str:
        """Compute the signature for a request.

        The result only depends on the arguments and the stored key, so the same
        request always produces the same signature. Freshness comes from the ``Date``
        header the caller already put into ``headers``.

        :param method: The HTTP method, for example "PUT".
        :param headers: The request headers as they will be sent.
        :param resource: The resource path, starting with "/".
        :raises SigningError: If the request can't be canonicalized.
        """
        ...

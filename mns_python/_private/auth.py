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
import base64
import hmac
import logging
from collections.abc import Mapping
from hashlib import sha1

from ..exceptions import SigningError
from ..interfaces.auth import Credential

logger = logging.getLogger(__name__)

CONTENT_MD5 = "Content-MD5"
CONTENT_TYPE = "Content-Type"
DATE = "Date"
MNS_VERSION = "x-mns-version"
AUTHORIZATION = "Authorization"

MNS_HEADER_PREFIX = "x-mns-"

# The headers that lead the string to sign, in order. The service version is an
# ``x-mns-`` header, so it's signed with the canonicalized MNS headers.
SIGNED_HEADERS: tuple[str, ...] = (CONTENT_MD5, CONTENT_TYPE, DATE)
REQUIRED_HEADERS: tuple[str, ...] = (*SIGNED_HEADERS, MNS_VERSION)


class MNSCredential(Credential):
    """Signs requests with an MNS access key secret.

    The string to sign is::

        <Method>\\n
        <Content-MD5>\\n
        <Content-Type>\\n
        <Date>\\n
        <CanonicalizedMNSHeaders>\\n
        <CanonicalizedResource>

    where ``CanonicalizedMNSHeaders`` are the ``x-mns-*`` headers as lowercase
    ``name:value`` pairs sorted by name and joined with newlines. The signature is the
    base64 encoded HMAC-SHA1 of the string to sign.
    """

    def __init__(self, access_key_secret: str) -> None:
        self._key = access_key_secret.encode("utf-8")

    def signature(self, method: str, headers: Mapping[str, str], resource: str) -> str:
        string_to_sign = self.string_to_sign(method, headers, resource)
        digest = hmac.new(self._key, string_to_sign.encode("utf-8"), sha1).digest()
        return base64.b64encode(digest).decode("ascii")

    def string_to_sign(
        self, method: str, headers: Mapping[str, str], resource: str
    ) -> str:
        """Build the canonical signing input for a request.

        This is useful to compare against the string the service reports when it
        rejects a signature.

        :raises SigningError: If a required header is missing or the resource path
            does not start with "/".
        """
        if not resource.startswith("/"):
            raise SigningError(f"Resource path must start with '/', got {resource!r}")

        missing = [name for name in REQUIRED_HEADERS if name not in headers]
        if missing:
            raise SigningError(
                f"Cannot sign request without the {', '.join(missing)} header(s)."
            )

        lines = [method.upper()]
        lines.extend(headers[name] for name in SIGNED_HEADERS)
        lines.extend(self._canonicalize_mns_headers(headers))
        lines.append(resource)
        string_to_sign = "\n".join(lines)
        logger.debug("Signing request: %r", string_to_sign)
        return string_to_sign

    def _canonicalize_mns_headers(self, headers: Mapping[str, str]) -> list[str]:
        mns_headers = {
            name.lower(): value.strip()
            for name, value in headers.items()
            if name.lower().startswith(MNS_HEADER_PREFIX)
        }
        return [f"{name}:{value}" for name, value in sorted(mns_headers.items())]

    def __repr__(self) -> str:
        return "MNSCredential(access_key_secret=***)"

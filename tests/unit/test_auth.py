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

from mns_python._private.auth import MNSCredential
from mns_python.exceptions import SigningError

DATE = "Thu, 17 Oct 2024 12:00:00 GMT"
EMPTY_MD5 = "ZDQxZDhjZDk4ZjAwYjIwNGU5ODAwOTk4ZWNmODQyN2U="


@pytest.fixture
def credential() -> MNSCredential:
    return MNSCredential("secret")


def headers() -> dict[str, str]:
    return {
        "Content-MD5": EMPTY_MD5,
        "Content-Type": "application/xml",
        "Date": DATE,
        "x-mns-version": "2015-06-06",
    }


def test_string_to_sign(credential: MNSCredential) -> None:
    actual = credential.string_to_sign("PUT", headers(), "/queues/test-queue")
    expected = (
        "PUT\n"
        f"{EMPTY_MD5}\n"
        "application/xml\n"
        f"{DATE}\n"
        "x-mns-version:2015-06-06\n"
        "/queues/test-queue"
    )
    assert actual == expected


def test_signature(credential: MNSCredential) -> None:
    signature = credential.signature("PUT", headers(), "/queues/test-queue")
    assert signature == "Uf72kPqeWAaL0i2oZBqwtQp8VQM="


def test_signature_includes_sorted_mns_headers(credential: MNSCredential) -> None:
    given = headers()
    given["X-MNS-Prefix"] = " abc "

    assert credential.string_to_sign("GET", given, "/queues") == (
        "GET\n"
        f"{EMPTY_MD5}\n"
        "application/xml\n"
        f"{DATE}\n"
        "x-mns-prefix:abc\n"
        "x-mns-version:2015-06-06\n"
        "/queues"
    )
    assert credential.signature("GET", given, "/queues") == (
        "LKF1QFWyCWUkgBDfVA2pJ95n8nw="
    )


def test_signature_is_deterministic(credential: MNSCredential) -> None:
    first = credential.signature("GET", headers(), "/queues/q")
    second = MNSCredential("secret").signature("GET", headers(), "/queues/q")
    assert first == second == credential.signature("GET", headers(), "/queues/q")


def test_signature_ignores_unrelated_headers(credential: MNSCredential) -> None:
    given = headers()
    given["User-Agent"] = "mns-python-test"
    given["Accept"] = "*/*"

    assert credential.signature("GET", given, "/queues/q") == credential.signature(
        "GET", headers(), "/queues/q"
    )


@pytest.mark.parametrize(
    "name,value",
    [
        ("Content-MD5", "NWQ0MTQwMmFiYzRiMmE3NmI5NzE5ZDkxMTAxN2M1OTI="),
        ("Content-Type", "text/xml"),
        ("Date", "Thu, 17 Oct 2024 12:00:01 GMT"),
        ("x-mns-version", "2015-06-07"),
    ],
)
def test_signature_changes_with_signed_headers(
    credential: MNSCredential, name: str, value: str
) -> None:
    changed = headers()
    changed[name] = value

    assert credential.signature("GET", changed, "/queues/q") != credential.signature(
        "GET", headers(), "/queues/q"
    )


def test_signature_changes_with_method_resource_and_key(
    credential: MNSCredential,
) -> None:
    baseline = credential.signature("GET", headers(), "/queues/q")

    assert credential.signature("DELETE", headers(), "/queues/q") != baseline
    assert credential.signature("GET", headers(), "/queues/r") != baseline
    assert MNSCredential("other").signature("GET", headers(), "/queues/q") != baseline


@pytest.mark.parametrize(
    "missing", ["Content-MD5", "Content-Type", "Date", "x-mns-version"]
)
def test_missing_required_header(credential: MNSCredential, missing: str) -> None:
    given = headers()
    del given[missing]

    with pytest.raises(SigningError, match=missing):
        credential.signature("GET", given, "/queues/q")


def test_resource_must_be_rooted(credential: MNSCredential) -> None:
    with pytest.raises(SigningError):
        credential.signature("GET", headers(), "queues/q")


def test_repr_hides_secret() -> None:
    assert "hunter2" not in repr(MNSCredential("hunter2"))

"""
Unit tests for credential payload encoding and fragment parsing.

These tests are CI-safe (no network), cover:
* encode / decode of the persisted payload
* Compatibility with browser ``btoa`` output
* Rejection of corrupt payloads
* decode_hash edge cases (router slash, missing values, empty input)
"""

from __future__ import annotations

import base64

import pytest

from oauth_session.codec import (
    InvalidPayloadError,
    decode_credential,
    decode_hash,
    encode_credential,
)


# --------------------------------------------------------------------------- #
# Persisted payload                                                           #
# --------------------------------------------------------------------------- #
@pytest.mark.parametrize(
    ("access_token", "token_type", "scope"),
    [
        ("tok1", "bearer", "read"),
        ("a.b-c_d~e", "Bearer", "read write admin"),
        ("tök", "bearer", ""),
        ("tok", "bearer", "read:user repo:status"),
    ],
)
def test_credential_round_trip(access_token: str, token_type: str, scope: str) -> None:
    payload = encode_credential(access_token, token_type, scope)
    assert decode_credential(payload) == (access_token, token_type, scope)


def test_payload_matches_btoa_format() -> None:
    expected = base64.b64encode(b"tok1:bearer:read").decode("ascii")
    assert encode_credential("tok1", "bearer", "read") == expected


def test_decode_tolerates_missing_padding_and_fields() -> None:
    payload = base64.b64encode(b"only-token").decode("ascii").rstrip("=")
    assert decode_credential(payload) == ("only-token", "", "")


def test_decode_rejects_garbage() -> None:
    with pytest.raises(InvalidPayloadError):
        decode_credential("not base64 !!")


def test_decode_rejects_empty_token() -> None:
    payload = base64.b64encode(b":bearer:read").decode("ascii")
    with pytest.raises(InvalidPayloadError):
        decode_credential(payload)


# --------------------------------------------------------------------------- #
# Fragment parsing                                                            #
# --------------------------------------------------------------------------- #
def test_decode_hash_basic() -> None:
    assert decode_hash("access_token=tok2&token_type=bearer") == {
        "access_token": "tok2",
        "token_type": "bearer",
    }


def test_decode_hash_strips_router_slash() -> None:
    assert decode_hash("/access_token=tok2") == {"access_token": "tok2"}
    # the fragment is passed without its "#"
    assert decode_hash("#access_token=tok2") == {"#access_token": "tok2"}


def test_decode_hash_keeps_values_raw() -> None:
    parsed = decode_hash("access_token=a%2Bb&scope=read%20write&state=x=y")
    assert parsed["access_token"] == "a%2Bb"
    assert parsed["scope"] == "read%20write"
    # split on the first '=' only
    assert parsed["state"] == "x=y"


def test_decode_hash_key_without_value() -> None:
    assert decode_hash("flag&access_token=t") == {"flag": "", "access_token": "t"}


def test_decode_hash_empty() -> None:
    assert decode_hash("") == {}

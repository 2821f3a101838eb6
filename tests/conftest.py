"""Shared fixtures for unmunge tests."""

import base64

import pytest

from unmunge.authority import DecodeResult
from unmunge.status import StatusCode

AUTHORITY_URL = "http://munge.test"
DECODE_URL = f"{AUTHORITY_URL}/v1/decode"

CREDENTIAL = b"MUNGE:AwQDAACV8zRuFh8VPm0z9Hc8tLr0XWNp4nrHZlY3QnhWqGoRCg==:\n"


@pytest.fixture
def credential() -> bytes:
    """A sample credential as produced by munge(1)."""
    return CREDENTIAL


@pytest.fixture
def success_body() -> dict:
    """Daemon answer for a good credential carrying b"hello"."""
    return {
        "status": 0,
        "message": "Success",
        "uid": 1000,
        "gid": 100,
        "payload": base64.b64encode(b"hello").decode(),
    }


@pytest.fixture
def success_result() -> DecodeResult:
    """A successful decode with a five byte payload."""
    return DecodeResult(
        status=StatusCode.SUCCESS,
        payload=bytearray(b"hello"),
        uid=1000,
        gid=100,
    )


@pytest.fixture
def bad_format_result() -> DecodeResult:
    """A decode rejected as a badly formatted credential."""
    return DecodeResult.failure(StatusCode.BAD_CRED)

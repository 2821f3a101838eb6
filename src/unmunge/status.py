"""
MUNGE status codes.

A decode either succeeds or fails with one of these classified codes. The
code doubles as the process exit status.
"""

from __future__ import annotations

from enum import IntEnum


class StatusCode(IntEnum):
    """Status codes reported by the MUNGE authority."""

    SUCCESS = 0
    SNAFU = 1
    BAD_ARG = 2
    BAD_LENGTH = 3
    OVERFLOW = 4
    NO_MEMORY = 5
    SOCKET = 6
    TIMEOUT = 7
    BAD_CRED = 8
    BAD_VERSION = 9
    BAD_CIPHER = 10
    BAD_MAC = 11
    BAD_ZIP = 12
    BAD_REALM = 13
    CRED_INVALID = 14
    CRED_EXPIRED = 15
    CRED_REWOUND = 16
    CRED_REPLAYED = 17
    CRED_UNAUTHORIZED = 18


STATUS_TEXT: dict[StatusCode, str] = {
    StatusCode.SUCCESS: "Success",
    StatusCode.SNAFU: "Internal error",
    StatusCode.BAD_ARG: "Invalid argument",
    StatusCode.BAD_LENGTH: "Exceeded maximum message length",
    StatusCode.OVERFLOW: "Buffer overflow",
    StatusCode.NO_MEMORY: "Out of memory",
    StatusCode.SOCKET: "Socket communication error",
    StatusCode.TIMEOUT: "Socket timeout",
    StatusCode.BAD_CRED: "Invalid credential format",
    StatusCode.BAD_VERSION: "Invalid credential version",
    StatusCode.BAD_CIPHER: "Invalid cipher type",
    StatusCode.BAD_MAC: "Invalid MAC type",
    StatusCode.BAD_ZIP: "Invalid compression type",
    StatusCode.BAD_REALM: "Unrecognized security realm",
    StatusCode.CRED_INVALID: "Invalid credential",
    StatusCode.CRED_EXPIRED: "Expired credential",
    StatusCode.CRED_REWOUND: "Rewound credential",
    StatusCode.CRED_REPLAYED: "Replayed credential",
    StatusCode.CRED_UNAUTHORIZED: "Unauthorized credential",
}


def status_text(code: int) -> str:
    """Describe a status code.

    Codes outside the known table are described as "Unknown error <n>".
    """
    try:
        return STATUS_TEXT[StatusCode(code)]
    except ValueError:
        return f"Unknown error {code}"

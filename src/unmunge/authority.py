"""
MUNGE authority client.

Sends a credential to the local MUNGE daemon for validation and decoding.
The daemon is reached over HTTP, either on its unix domain socket or, when
the socket is given as an http(s) URL, over TCP.

Protocol:
    POST /v1/decode with the raw credential as the request body.
    The daemon answers with JSON:
        {"status": 0, "uid": 1000, "gid": 100, "payload": "<base64>"}
    or, when the credential is rejected:
        {"status": 15, "message": "Expired credential"}

The daemon's "message" is kept only as a detail for diagnostics; the
STATUS-TEXT line always comes from the fixed status table.

Every failure is reported as a status code on the DecodeResult; nothing in
here raises for a bad credential or an unreachable daemon.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any

import httpx

from unmunge.config import DEFAULT_SOCKET, DEFAULT_TIMEOUT
from unmunge.status import StatusCode, status_text

DECODE_PATH = "/v1/decode"
CREDENTIAL_MEDIA_TYPE = "application/x-munge-credential"

# Host used in request URLs when talking over the unix socket.
_UDS_BASE_URL = "http://munge"


@dataclass
class DecodeResult:
    """Outcome of a single decode request.

    uid, gid and payload are only meaningful when status is SUCCESS.
    """

    status: int
    detail: str | None = None
    payload: bytearray = field(default_factory=bytearray)
    uid: int | None = None
    gid: int | None = None

    @property
    def ok(self) -> bool:
        """Check if the credential was decoded successfully."""
        return self.status == StatusCode.SUCCESS

    @property
    def message(self) -> str:
        """Fixed description of the status, as shown on the STATUS-TEXT line."""
        return status_text(self.status)

    @classmethod
    def failure(cls, status: int, detail: str | None = None) -> DecodeResult:
        """Build a result for a failed decode."""
        return cls(status=status, detail=detail)

    def scrub(self) -> None:
        """Overwrite the payload with zero bytes and drop it."""
        self.payload[:] = bytes(len(self.payload))
        self.payload.clear()


class AuthorityClient:
    """Client for the MUNGE daemon's decode operation."""

    def __init__(
        self,
        socket: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            socket: Unix socket path of the daemon, or an http(s) base URL.
                Defaults to the standard MUNGE socket.
            timeout: Request timeout in seconds.
            transport: Custom httpx transport. Built from socket if not given.
        """
        self.socket = socket or DEFAULT_SOCKET
        self.timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        """Base URL requests are sent to."""
        if self._is_url(self.socket):
            return self.socket.rstrip("/")
        return _UDS_BASE_URL

    def _is_url(self, socket: str) -> bool:
        return socket.startswith("http://") or socket.startswith("https://")

    def _make_transport(self) -> httpx.BaseTransport:
        if self._transport is not None:
            return self._transport
        if self._is_url(self.socket):
            return httpx.HTTPTransport()
        return httpx.HTTPTransport(uds=self.socket)

    def decode(self, credential: bytes | bytearray) -> DecodeResult:
        """Ask the daemon to validate and decode a credential.

        Exactly one request is made; a failed decode is never retried.

        Args:
            credential: Raw credential bytes. Not modified.

        Returns:
            DecodeResult carrying the daemon's verdict.
        """
        try:
            with httpx.Client(
                base_url=self.base_url,
                transport=self._make_transport(),
                timeout=self.timeout,
            ) as client:
                response = client.post(
                    DECODE_PATH,
                    content=bytes(credential),
                    headers={
                        "Content-Type": CREDENTIAL_MEDIA_TYPE,
                        "Accept": "application/json",
                    },
                )
        except httpx.TimeoutException:
            return DecodeResult.failure(StatusCode.TIMEOUT)
        except httpx.RequestError:
            return DecodeResult.failure(StatusCode.SOCKET)

        try:
            data = response.json()
        except ValueError:
            return DecodeResult.failure(
                StatusCode.SNAFU,
                f"Invalid response from MUNGE daemon (HTTP {response.status_code})",
            )

        return self._parse_response(data)

    def _parse_response(self, data: Any) -> DecodeResult:
        """Turn the daemon's JSON answer into a DecodeResult."""
        if not isinstance(data, dict):
            return DecodeResult.failure(
                StatusCode.SNAFU, "Invalid response from MUNGE daemon"
            )

        status = data.get("status")
        if not isinstance(status, int) or isinstance(status, bool):
            return DecodeResult.failure(
                StatusCode.SNAFU, "Missing status in MUNGE daemon response"
            )

        try:
            status = StatusCode(status)
        except ValueError:
            return DecodeResult.failure(
                StatusCode.SNAFU, f"Unknown status {status} in MUNGE daemon response"
            )

        detail = _clean_detail(data.get("message"))

        if status != StatusCode.SUCCESS:
            return DecodeResult.failure(status, detail)

        uid = data.get("uid")
        gid = data.get("gid")
        if not self._is_id(uid) or not self._is_id(gid):
            return DecodeResult.failure(
                StatusCode.SNAFU, "Missing uid/gid in MUNGE daemon response"
            )

        try:
            payload = bytearray(base64.b64decode(data.get("payload") or "", validate=True))
        except (binascii.Error, TypeError, ValueError):
            return DecodeResult.failure(
                StatusCode.SNAFU, "Invalid payload in MUNGE daemon response"
            )

        return DecodeResult(
            status=StatusCode.SUCCESS,
            detail=detail,
            payload=payload,
            uid=uid,
            gid=gid,
        )

    def _is_id(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


def _clean_detail(message: Any) -> str | None:
    """Make the daemon's free-form message safe to print on one line."""
    if not isinstance(message, str):
        return None
    message = message.encode("utf-8", "replace").decode("utf-8")
    message = "".join(ch if ch.isprintable() else " " for ch in message).strip()
    return message or None

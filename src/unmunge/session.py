"""
Unmunge session.

A Session carries one run through its stages:

    with Session.create(config) as session:
        session.open()
        session.read_credential()
        session.decode()
        session.display_meta()
        session.display_data()

Leaving the with block (or calling destroy()) closes the streams the session
opened and scrubs the credential and payload buffers.

Scrubbing overwrites the session's own bytearrays with zeros before they are
released. Python gives no control over other copies of the same bytes
(chunks returned by read(), the HTTP request and response bodies, the
decoded base64), so this narrows but cannot eliminate the window in which
secrets stay in memory.
"""

from __future__ import annotations

from typing import BinaryIO

from unmunge.authority import AuthorityClient, DecodeResult
from unmunge.config import Config
from unmunge.destinations import Destinations, resolve_destinations
from unmunge.errors import CloseError, ReadError, SessionError
from unmunge.render import label_pad_width, write_metadata, write_payload

READ_CHUNK_SIZE = 64 * 1024


class Session:
    """State for a single unmunge run."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.destinations: Destinations | None = None
        self.credential: bytearray | None = None
        self.result: DecodeResult | None = None
        self.label_pad_width = label_pad_width()
        self._destroyed = False

    @classmethod
    def create(cls, config: Config) -> Session:
        """Create a session with nothing opened, read or decoded yet."""
        return cls(config)

    def __enter__(self) -> Session:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.destroy()
        except CloseError as close_error:
            if exc is None:
                raise
            # The run had already failed; that failure is the cause.
            raise close_error from exc

    @property
    def status(self) -> int | None:
        """Decode status, or None if decode has not been attempted."""
        return self.result.status if self.result is not None else None

    def open(self, stdin: BinaryIO | None = None, stdout: BinaryIO | None = None) -> Destinations:
        """Resolve and open the input and output streams."""
        if self.destinations is not None:
            raise SessionError("Destinations already opened")
        self.destinations = resolve_destinations(self.config, stdin=stdin, stdout=stdout)
        return self.destinations

    def read_credential(self) -> bytearray:
        """Read the input stream to exhaustion.

        Raises:
            ReadError: If the input cannot be read.
            SessionError: If streams are not open or the credential was
                already read.
        """
        if self.destinations is None:
            raise SessionError("Destinations not opened")
        if self.credential is not None:
            raise SessionError("Credential already read")

        buf = bytearray()
        self.credential = buf
        stream = self.destinations.input
        try:
            while True:
                chunk = stream.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                buf += chunk
        except OSError as e:
            raise ReadError(f"Read error: {e.strerror or e}") from e
        return buf

    def decode(self, client: AuthorityClient | None = None) -> DecodeResult:
        """Submit the credential to the MUNGE authority, once."""
        if self.credential is None:
            raise SessionError("Credential not read")
        if self.result is not None:
            raise SessionError("Credential already decoded")
        if client is None:
            client = AuthorityClient(socket=self.config.socket, timeout=self.config.timeout)
        self.result = client.decode(self.credential)
        return self.result

    def display_meta(self) -> None:
        """Write the selected metadata tags."""
        result = self._decoded()
        write_metadata(
            self.destinations.metadata,
            result,
            self.config.tags,
            pad=self.label_pad_width,
            shared=self.destinations.shared,
        )

    def display_data(self) -> None:
        """Write the payload if the decode succeeded."""
        result = self._decoded()
        write_payload(self.destinations.payload, result)

    def _decoded(self) -> DecodeResult:
        if self.result is None or self.destinations is None:
            raise SessionError("Credential not decoded")
        return self.result

    def destroy(self) -> None:
        """Close owned streams and scrub buffers. Safe to call twice.

        Raises:
            CloseError: If an owned stream fails to close. Buffers are
                scrubbed regardless.
        """
        if self._destroyed:
            return
        self._destroyed = True
        try:
            if self.destinations is not None:
                self.destinations.close()
        finally:
            if self.credential is not None:
                self.credential[:] = bytes(len(self.credential))
                self.credential.clear()
                self.credential = None
            if self.result is not None:
                self.result.scrub()

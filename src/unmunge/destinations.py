"""
Destination routing.

Resolves the input, metadata and payload paths of a Config into open binary
streams. At most one writable handle is opened per distinct path, and no
output may name the input file.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import BinaryIO

from unmunge.config import STDIO, Config
from unmunge.errors import AliasingError, CloseError, OpenError


@dataclass
class Destinations:
    """Open streams for one run.

    payload may be the very same object as metadata; it is then closed once.
    """

    input: BinaryIO
    metadata: BinaryIO | None
    payload: BinaryIO | None
    stdin: BinaryIO
    stdout: BinaryIO

    @property
    def shared(self) -> bool:
        """True if metadata and payload go to the same stream."""
        return self.metadata is not None and self.metadata is self.payload

    def close(self) -> None:
        """Close owned streams. Standard streams are left open.

        Raises:
            CloseError: If a stream fails to close. Remaining streams are
                still closed.
        """
        failures: list[str] = []
        for role, stream in self._owned():
            try:
                stream.close()
            except OSError as e:
                failures.append(f"Unable to close {role} file: {e.strerror or e}")
        if failures:
            raise CloseError("; ".join(failures))

    def _owned(self) -> list[tuple[str, BinaryIO]]:
        owned: list[tuple[str, BinaryIO]] = []
        if self.input is not self.stdin:
            owned.append(("input", self.input))
        if self.metadata is not None and self.metadata is not self.stdout:
            owned.append(("metadata output", self.metadata))
        if (
            self.payload is not None
            and self.payload is not self.stdout
            and self.payload is not self.metadata
        ):
            owned.append(("payload output", self.payload))
        return owned


def check_aliasing(config: Config) -> None:
    """Reject outputs that name the input file.

    Paths are compared literally; "-" never aliases since it means stdin for
    input and stdout for output.

    Raises:
        AliasingError: If the metadata or payload path equals the input path.
    """
    if config.input_path == STDIO:
        return
    for path in (config.metadata_path, config.payload_path):
        if path is not None and path == config.input_path:
            raise AliasingError(f'Cannot read and write to the same file "{path}"')


def resolve_destinations(
    config: Config,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> Destinations:
    """Open the streams named by a Config.

    Args:
        config: Run configuration.
        stdin: Binary standard input. Defaults to sys.stdin.buffer.
        stdout: Binary standard output. Defaults to sys.stdout.buffer.

    Returns:
        The resolved Destinations.

    Raises:
        AliasingError: If an output names the input file. Nothing is opened.
        OpenError: If a file cannot be opened. Files opened before the
            failure are closed again.
    """
    check_aliasing(config)

    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer
    opened: list[BinaryIO] = []

    try:
        if config.input_path == STDIO:
            input_stream = stdin
        else:
            input_stream = _open(config.input_path, "rb", "read from")
            opened.append(input_stream)

        metadata_stream: BinaryIO | None = None
        if config.metadata_path == STDIO:
            metadata_stream = stdout
        elif config.metadata_path is not None:
            metadata_stream = _open(config.metadata_path, "wb", "write to")
            opened.append(metadata_stream)

        payload_stream: BinaryIO | None = None
        if config.payload_path == STDIO:
            payload_stream = stdout
        elif config.payload_path is not None:
            if config.payload_path == config.metadata_path:
                payload_stream = metadata_stream
            else:
                payload_stream = _open(config.payload_path, "wb", "write to")
                opened.append(payload_stream)

    except OpenError:
        for stream in opened:
            stream.close()
        raise

    return Destinations(
        input=input_stream,
        metadata=metadata_stream,
        payload=payload_stream,
        stdin=stdin,
        stdout=stdout,
    )


def _open(path: str, mode: str, action: str) -> BinaryIO:
    try:
        return open(path, mode)
    except OSError as e:
        raise OpenError(f'Unable to {action} "{path}": {e.strerror or e}') from e

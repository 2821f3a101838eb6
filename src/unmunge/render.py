"""
Metadata and payload output.

Metadata lines look like:

    STATUS-CODE:  0
    STATUS-TEXT:  Success
    UID:          1000
    GID:          100
    LENGTH:       5

Values line up in one column. Only STATUS-CODE and STATUS-TEXT are written
for a failed decode.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import BinaryIO

from unmunge.authority import DecodeResult
from unmunge.errors import WriteError
from unmunge.tags import STATUS_TAGS, MetadataTag, all_tags, max_tag_name_length

# Spaces between the longest "NAME:" and its value.
LABEL_GUTTER = 2


def label_pad_width() -> int:
    """Column width used to align metadata values."""
    return max_tag_name_length() + LABEL_GUTTER


def format_line(tag: MetadataTag, value: object, pad: int) -> str:
    """Format one metadata line, including its newline."""
    name = tag.label
    return f"{name}:{' ' * (pad - len(name))}{value}\n"


def tag_value(tag: MetadataTag, result: DecodeResult) -> object:
    """Value reported for a tag."""
    if tag == MetadataTag.STATUS_CODE:
        return int(result.status)
    if tag == MetadataTag.STATUS_TEXT:
        return result.message
    if tag == MetadataTag.UID:
        return result.uid
    if tag == MetadataTag.GID:
        return result.gid
    return len(result.payload)


def render_metadata(
    result: DecodeResult,
    tags: Collection[MetadataTag],
    pad: int | None = None,
) -> list[str]:
    """Build the metadata lines for the selected tags.

    Args:
        result: Decode outcome.
        tags: Selected tags. Order is ignored; registry order is used.
        pad: Column width. Defaults to label_pad_width().

    Returns:
        Lines in registry order, each ending with a newline.
    """
    if pad is None:
        pad = label_pad_width()
    lines: list[str] = []
    for tag in all_tags():
        if tag not in STATUS_TAGS and not result.ok:
            break
        if tag in tags:
            lines.append(format_line(tag, tag_value(tag, result), pad))
    return lines


def write_metadata(
    stream: BinaryIO | None,
    result: DecodeResult,
    tags: Collection[MetadataTag],
    pad: int | None = None,
    shared: bool = False,
) -> None:
    """Write metadata lines to a stream.

    Each line goes out in a single write call. When the payload follows on
    the same stream (shared), a blank line separates the two.

    Raises:
        WriteError: If a write fails or comes up short.
    """
    if stream is None:
        return
    for line in render_metadata(result, tags, pad):
        _write(stream, line.encode("utf-8"))
    if shared and result.ok:
        _write(stream, b"\n")
    _flush(stream)


def write_payload(stream: BinaryIO | None, result: DecodeResult) -> None:
    """Write the decoded payload verbatim.

    Nothing is written unless the decode succeeded. An empty payload is
    not an error.

    Raises:
        WriteError: If fewer bytes than the payload length are written.
    """
    if stream is None or not result.ok:
        return
    if result.payload:
        _write(stream, result.payload)
    _flush(stream)


def _write(stream: BinaryIO, data: bytes | bytearray) -> None:
    try:
        written = stream.write(data)
    except OSError as e:
        raise WriteError(f"Write error: {e.strerror or e}") from e
    if written is not None and written != len(data):
        raise WriteError(f"Write error: wrote {written} of {len(data)} bytes")


def _flush(stream: BinaryIO) -> None:
    try:
        stream.flush()
    except OSError as e:
        raise WriteError(f"Write error: {e.strerror or e}") from e

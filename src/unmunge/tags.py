"""
Metadata tags.

The fixed, ordered catalogue of attributes that unmunge can report about a
decoded credential. Tag order is rendering order.
"""

from __future__ import annotations

import re
from enum import IntEnum


class MetadataTag(IntEnum):
    """Metadata attributes, in rendering order."""

    STATUS_CODE = 0
    STATUS_TEXT = 1
    UID = 2
    GID = 3
    LENGTH = 4

    @property
    def label(self) -> str:
        """Display name of the tag (e.g. "STATUS-CODE")."""
        return TAG_NAMES[self]


TAG_NAMES: dict[MetadataTag, str] = {
    MetadataTag.STATUS_CODE: "STATUS-CODE",
    MetadataTag.STATUS_TEXT: "STATUS-TEXT",
    MetadataTag.UID: "UID",
    MetadataTag.GID: "GID",
    MetadataTag.LENGTH: "LENGTH",
}

# Only these tags may be rendered for a failed decode.
STATUS_TAGS = frozenset({MetadataTag.STATUS_CODE, MetadataTag.STATUS_TEXT})

_TAG_SEPARATORS = re.compile(r"[ \t\n.,;]+")


def all_tags() -> list[MetadataTag]:
    """Return every tag in registry order."""
    return sorted(MetadataTag)


def tag_name(ordinal: int) -> str | None:
    """Look up the display name for a tag ordinal.

    Args:
        ordinal: Tag ordinal.

    Returns:
        The display name, or None if the ordinal is out of range.
    """
    try:
        return TAG_NAMES[MetadataTag(ordinal)]
    except ValueError:
        return None


def tag_from_name(name: str | None) -> MetadataTag | None:
    """Look up a tag by display name, ignoring case.

    Args:
        name: Display name such as "uid" or "STATUS-TEXT".

    Returns:
        The matching tag, or None if nothing matches.
    """
    if not name:
        return None
    wanted = name.casefold()
    for tag, label in TAG_NAMES.items():
        if label.casefold() == wanted:
            return tag
    return None


def parse_tags(spec: str | None) -> set[MetadataTag]:
    """Parse a tag subset such as "status-code,uid gid".

    Names may be separated by spaces, tabs, newlines, '.', ',' or ';'.
    Unrecognized names are ignored.
    """
    tags: set[MetadataTag] = set()
    if not spec:
        return tags
    for token in _TAG_SEPARATORS.split(spec):
        tag = tag_from_name(token)
        if tag is not None:
            tags.add(tag)
    return tags


def max_tag_name_length() -> int:
    """Length of the longest tag display name."""
    return max(len(label) for label in TAG_NAMES.values())

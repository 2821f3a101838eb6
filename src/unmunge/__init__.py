"""
unmunge - validate and decode MUNGE credentials.

Reads a credential, has the local MUNGE daemon validate and decode it, and
writes the selected metadata (status, UID, GID, payload length) and the
recovered payload to stdout or to files.
"""

__version__ = "0.1.0"

from unmunge.authority import AuthorityClient, DecodeResult
from unmunge.config import Config, ConfigBuilder
from unmunge.destinations import Destinations, resolve_destinations
from unmunge.errors import UnmungeError
from unmunge.session import Session
from unmunge.status import StatusCode, status_text
from unmunge.tags import MetadataTag, parse_tags, tag_from_name, tag_name

__all__ = [
    "AuthorityClient",
    "DecodeResult",
    "Config",
    "ConfigBuilder",
    "Destinations",
    "resolve_destinations",
    "UnmungeError",
    "Session",
    "StatusCode",
    "status_text",
    "MetadataTag",
    "parse_tags",
    "tag_from_name",
    "tag_name",
]

"""
Run configuration.

A Config is immutable once built. ConfigBuilder collects settings in any
order (usually straight from command-line options) and produces one.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from unmunge.tags import MetadataTag, all_tags, parse_tags

# Path sentinel selecting stdin for input and stdout for output.
STDIO = "-"

DEFAULT_SOCKET = "/var/run/munge/munge.socket.2"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Config:
    """Settings for a single unmunge run.

    A None metadata_path or payload_path means that output is not produced.
    """

    input_path: str = STDIO
    metadata_path: str | None = STDIO
    payload_path: str | None = STDIO
    tags: frozenset[MetadataTag] = field(default_factory=lambda: frozenset(all_tags()))
    socket: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.input_path:
            raise ValueError("An input path is required")


class ConfigBuilder:
    """Incrementally assemble a Config.

    Example:
        config = ConfigBuilder().input("cred.txt").tags("uid,gid").build()
    """

    def __init__(self) -> None:
        self._input: str = STDIO
        self._metadata: str | None = STDIO
        self._output: str | None = STDIO
        self._no_output = False
        self._tags: set[MetadataTag] | None = None
        self._socket: str | None = None
        self._timeout = DEFAULT_TIMEOUT
        self._verbose = False

    def input(self, path: str) -> ConfigBuilder:
        self._input = path
        return self

    def metadata(self, path: str | None) -> ConfigBuilder:
        self._metadata = path
        return self

    def output(self, path: str | None) -> ConfigBuilder:
        self._output = path
        return self

    def no_output(self, enabled: bool = True) -> ConfigBuilder:
        """Discard both metadata and payload, whatever paths were given."""
        self._no_output = enabled
        return self

    def tags(self, spec: str) -> ConfigBuilder:
        """Add the tags named in spec to the selected subset.

        Once called, only explicitly named tags are rendered, even if spec
        names none that are recognized.
        """
        if self._tags is None:
            self._tags = set()
        self._tags |= parse_tags(spec)
        return self

    def socket(self, socket: str | None) -> ConfigBuilder:
        self._socket = socket
        return self

    def timeout(self, seconds: float) -> ConfigBuilder:
        self._timeout = seconds
        return self

    def verbose(self, enabled: bool = True) -> ConfigBuilder:
        self._verbose = enabled
        return self

    def build(self) -> Config:
        """Produce the immutable Config."""
        tags = all_tags() if self._tags is None else self._tags
        return Config(
            input_path=self._input,
            metadata_path=None if self._no_output else self._metadata,
            payload_path=None if self._no_output else self._output,
            tags=frozenset(tags),
            socket=self._socket,
            timeout=self._timeout,
            verbose=self._verbose,
        )

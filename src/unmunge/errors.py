"""Fatal pipeline errors.

Anything raised from here ends the run. Decode failures reported by the
authority are not errors in this sense; they travel as a status code.
"""

from __future__ import annotations

from unmunge.status import StatusCode


class UnmungeError(Exception):
    """Base class for fatal unmunge errors."""

    exit_code: int = StatusCode.SNAFU

    def describe(self) -> str:
        """Message including any earlier unmunge error that caused this one."""
        messages = [str(self)]
        cause = self.__cause__
        while isinstance(cause, UnmungeError):
            messages.insert(0, str(cause))
            cause = cause.__cause__
        return "; ".join(messages)


class OpenError(UnmungeError):
    """Raised when an input or output file cannot be opened."""


class AliasingError(UnmungeError):
    """Raised when an output destination names the input file."""


class ReadError(UnmungeError):
    """Raised when the credential cannot be read."""


class WriteError(UnmungeError):
    """Raised when metadata or payload cannot be written in full."""


class CloseError(UnmungeError):
    """Raised when an owned stream fails to close."""


class SessionError(UnmungeError):
    """Raised when pipeline stages run out of order or twice."""

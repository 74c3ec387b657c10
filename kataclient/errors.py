"""
Error hierarchy for the analysis engine client.

Every failure the client reports derives from KataClientError, so callers can
catch the whole family at one seam:

    try:
        channel = await DuplexChannel.spawn(process)
    except SpawnError as e:
        logger.error(f"engine did not start: {e.message}")

Decode failures are different from the rest: the response stream hands them
back as values instead of raising, so one bad line does not end iteration.
"""

from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "KataClientError",
    "SpawnError",
    "EncodeError",
    "WriteError",
    "DecodeError",
    "UnrecognizedResponse",
    "UnrecognizedAction",
    "MissingFieldError",
]


class KataClientError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SpawnError(KataClientError):
    """The engine process could not be started."""

    def __init__(self, message: str, command: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.command = list(command)


class EncodeError(KataClientError):
    """An action could not be serialized; nothing was written."""

    def __init__(self, message: str, action_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.action_id = action_id


class WriteError(KataClientError):
    """The engine's input pipe is closed or broken."""


class DecodeError(KataClientError):
    """A line could not be mapped onto a known message shape."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line[:200]!r}")
        self.line = line
        self.reason = reason


class UnrecognizedResponse(DecodeError):
    pass


class UnrecognizedAction(DecodeError):
    pass


class MissingFieldError(KataClientError, ValueError):
    """A builder was finished without all required fields."""

    def __init__(self, fields: Sequence[str]) -> None:
        super().__init__(f"Missing required field(s): {', '.join(fields)}")
        self.fields = list(fields)

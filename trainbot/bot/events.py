"""Inbound events and parsed commands."""

from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class InboundEvent:
    """Platform-neutral chat event."""

    type: str
    text: Optional[str]
    channel: Optional[str]
    user: Optional[str]


@dataclass(frozen=True)
class HelpCommand:
    """Request for the usage message."""
    pass


@dataclass(frozen=True)
class LookupCommand:
    """Request for the next train from origin to destination."""

    origin: str
    destination: Optional[str] = None
    time_hint: Optional[str] = None


Command = Union[HelpCommand, LookupCommand]


def _segment(segments: List[str], index: int) -> Optional[str]:
    """Return the trimmed segment at index, or None if it is absent."""
    if index >= len(segments):
        return None
    return segments[index].strip()


def parse_command(text: str) -> Command:
    """
    Parse mention text of the form "trainbot, origin, destination, time".

    The first comma segment is the mention itself and is ignored. An absent,
    empty or literal "help" first argument yields HelpCommand.

    Args:
        text: Message text

    Returns:
        HelpCommand or LookupCommand
    """
    segments = text.split(",")
    origin = _segment(segments, 1)

    if origin is None or origin == "" or origin == "help":
        return HelpCommand()

    return LookupCommand(
        origin=origin,
        destination=_segment(segments, 2),
        time_hint=_segment(segments, 3),
    )

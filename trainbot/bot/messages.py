"""Reply texts for the bot."""

from typing import Optional

from trainbot.schedule.models import DepartureResult
from trainbot.utils.datetime_utils import format_time_of_day

HELP_MESSAGE = (
    "Hi!\n"
    "Usage: {name} <command>\n"
    "\n"
    "where <command> are the following arguments:\n"
    "{{origin}}, {{destination}}, {{time of day}}\n"
    "\n"
    "Example: {name}, Central, North, 7:00 am"
)

WELCOME_MESSAGE = (
    "Hi!\n"
    "Just say `{name}` to invoke me!"
)

ERROR_MESSAGE = "Sorry, I can't read the timetable right now. Please try again later."


def format_help(bot_name: str) -> str:
    """Usage message naming the invocation syntax."""
    return HELP_MESSAGE.format(name=bot_name)


def format_welcome(bot_name: str) -> str:
    """One-time greeting posted on first run."""
    return WELCOME_MESSAGE.format(name=bot_name)


def format_error() -> str:
    return ERROR_MESSAGE


def format_no_match(origin: str, destination: Optional[str], after: str) -> str:
    """
    Reply for a lookup that found no train.

    Args:
        origin: Requested origin
        destination: Requested destination (may be absent)
        after: Time of day boundary as "HH:MM"

    Returns:
        Formatted message
    """
    if not destination:
        return (
            f"No upcoming train found from {origin}: please tell me where you are going.\n"
            "{origin}, {destination}, {time of day}"
        )

    return (
        f"No upcoming train found from {origin} to {destination} "
        f"after {format_time_of_day(after)}."
    )


def format_departure(result: DepartureResult) -> str:
    """
    Reply for a found departure.

    Args:
        result: Departure found by the schedule lookup

    Returns:
        Formatted message, e.g.
        "The next train (Northern Express 101) leaves Central at 7:18 am
        and arrives at North at 8:02 am"
    """
    train = result.train_name
    if result.train_number:
        train = f"{train} {result.train_number}"

    return (
        f"The next train ({train}) leaves {result.origin} at "
        f"{format_time_of_day(result.departure_time)} and arrives at "
        f"{result.destination} at {format_time_of_day(result.arrival_time)}"
    )

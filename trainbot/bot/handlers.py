"""Message handling for the train bot."""

from datetime import datetime
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from trainbot.bot.events import Command, HelpCommand, InboundEvent, LookupCommand, parse_command
from trainbot.bot.filters import MessageFilter
from trainbot.bot.messages import (
    format_departure,
    format_error,
    format_help,
    format_no_match,
    format_welcome,
)
from trainbot.bot.platform import ChatPlatform, event_from_update
from trainbot.schedule.store import ScheduleStore, ScheduleStoreError
from trainbot.utils.config import Settings, get_settings
from trainbot.utils.datetime_utils import current_time_of_day, parse_time_of_day
from trainbot.utils.logger import get_logger

logger = get_logger()


class TrainBotHandlers:
    """
    Answers mentions with the next train between two stations.

    Owns the schedule store for the lifetime of the process and talks to
    the chat through a ChatPlatform. Every accepted event gets exactly one
    reply.
    """

    def __init__(
        self,
        store: ScheduleStore,
        platform: ChatPlatform,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize bot handlers.

        Args:
            store: Opened schedule store
            platform: Chat platform used for replies
            settings: Application settings (default: global settings)
            clock: Source of the current local time
        """
        self.settings = settings or get_settings()
        self.store = store
        self.platform = platform
        self.clock = clock
        self.message_filter = MessageFilter(
            bot_name=self.settings.bot_name,
            channel_prefix=self.settings.channel_prefix,
            self_identity=platform.self_identity(),
        )

        logger.info(f"TrainBotHandlers initialized (name: {self.settings.bot_name})")

    async def announce_first_run(self) -> bool:
        """
        Record this start and greet the welcome chat on the very first run.

        Returns:
            True if this was the first run
        """
        try:
            first_run = self.store.record_run(self.clock())
        except ScheduleStoreError as e:
            logger.error(f"Failed to record run: {e}")
            return False

        if first_run:
            logger.info("First run detected")
            if self.settings.welcome_chat_id:
                await self.platform.post_message(
                    self.settings.welcome_chat_id,
                    format_welcome(self.settings.bot_name),
                )

        return first_run

    async def on_event(self, event: InboundEvent) -> bool:
        """
        Handle an event if it passes the message filter.

        Args:
            event: Inbound chat event

        Returns:
            True if the event was handled
        """
        if not self.message_filter.accept(event):
            return False

        await self.handle(event)
        return True

    async def handle(self, event: InboundEvent) -> None:
        """
        Parse the mention and send exactly one reply.

        Send failures propagate to the caller.

        Args:
            event: Accepted inbound event
        """
        command = parse_command(event.text)
        channel_name = await self.platform.resolve_channel_name(event.channel)

        logger.info(
            f"{type(command).__name__} from {event.user} in {channel_name}: {event.text[:50]}"
        )

        reply = self._build_reply(command)
        await self.platform.post_message(event.channel, reply)

    def _build_reply(self, command: Command) -> str:
        if isinstance(command, HelpCommand):
            return format_help(self.settings.bot_name)
        if isinstance(command, LookupCommand):
            return self._lookup_reply(command)
        raise TypeError(f"Unknown command: {command!r}")

    def _lookup_reply(self, command: LookupCommand) -> str:
        after = self._resolve_boundary(command.time_hint)

        try:
            result = self.store.find_next_departure(command.origin, command.destination, after)
        except ScheduleStoreError:
            logger.exception(
                f"Schedule lookup failed for {command.origin} -> {command.destination}"
            )
            return format_error()

        if result is None:
            return format_no_match(command.origin, command.destination, after)

        logger.info(
            f"Next departure {result.origin} {result.departure_time} -> "
            f"{result.destination} {result.arrival_time} ({result.train_name})"
        )
        return format_departure(result)

    def _resolve_boundary(self, time_hint: Optional[str]) -> str:
        """Current time of day, moved later by the time hint if one parses.

        A hint earlier than now is ignored: only future trains are offered.
        """
        now = current_time_of_day(self.clock())

        if time_hint:
            parsed = parse_time_of_day(time_hint)
            if parsed is not None:
                return max(now, parsed)
            logger.warning(f"Ignoring unparseable time of day: {time_hint!r}")

        return now

    async def handle_update(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Telegram callback for every incoming update."""
        event = event_from_update(update)
        if event is None:
            logger.debug("Ignoring update without message")
            return

        await self.on_event(event)

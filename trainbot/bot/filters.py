"""Decides which inbound events the bot should answer."""

from typing import Optional

from trainbot.bot.events import InboundEvent


class MessageFilter:
    """
    Accepts channel messages that mention the bot.

    An event is accepted only if it is a chat message with text, posted in a
    channel (chat id starts with the channel prefix), not sent by the bot
    itself, and its text mentions the bot name case-insensitively.
    """

    def __init__(self, bot_name: str, channel_prefix: str, self_identity: Optional[str] = None):
        """
        Initialize message filter.

        Args:
            bot_name: Invocation name, e.g. "trainbot"
            channel_prefix: Prefix of channel-scoped chat ids
            self_identity: The bot's own user id (may be set later)
        """
        self.bot_name = bot_name.lower()
        self.channel_prefix = channel_prefix
        self.self_identity = self_identity

    def is_chat_message(self, event: InboundEvent) -> bool:
        return event.type == "message" and bool(event.text)

    def is_channel_conversation(self, event: InboundEvent) -> bool:
        return isinstance(event.channel, str) and event.channel.startswith(self.channel_prefix)

    def is_from_self(self, event: InboundEvent) -> bool:
        return self.self_identity is not None and event.user == self.self_identity

    def is_mentioning_bot(self, event: InboundEvent) -> bool:
        return bool(event.text) and self.bot_name in event.text.lower()

    def accept(self, event: InboundEvent) -> bool:
        """Check whether the event should be handled."""
        return (
            self.is_chat_message(event)
            and self.is_channel_conversation(event)
            and not self.is_from_self(event)
            and self.is_mentioning_bot(event)
        )

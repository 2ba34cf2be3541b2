"""
Chat platform adapters.

The command handler only talks to a ChatPlatform. Two implementations:
1. TelegramPlatform - actual sending through the Telegram Bot API
2. LogPlatform (dry-run) - logging only, no actual sending
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from telegram import Bot, Update
from telegram.error import TelegramError

from trainbot.bot.events import InboundEvent
from trainbot.utils.logger import get_logger

logger = get_logger()


class ChatPlatform(ABC):
    """Capabilities the bot needs from a chat platform."""

    @abstractmethod
    def self_identity(self) -> Optional[str]:
        """
        Get the bot's own user id.

        Returns:
            User id string, or None if not known yet
        """
        pass

    @abstractmethod
    async def resolve_channel_name(self, channel_id: str) -> str:
        """
        Get a display name for a channel.

        Args:
            channel_id: Channel (chat) id

        Returns:
            str: Channel name, or the id itself if it cannot be resolved
        """
        pass

    @abstractmethod
    async def post_message(self, channel_id: str, text: str) -> None:
        """
        Post a message to a channel as the bot.

        Args:
            channel_id: Channel (chat) id
            text: Message text
        """
        pass


class LogPlatform(ChatPlatform):
    """
    Platform for development mode - logging only.

    Replies are written to logs but not sent to Telegram.
    """

    def __init__(self, identity: Optional[str] = None):
        self._identity = identity
        logger.info("🔧 LogPlatform initialized (DRY-RUN mode)")

    def self_identity(self) -> Optional[str]:
        return self._identity

    async def resolve_channel_name(self, channel_id: str) -> str:
        return channel_id

    async def post_message(self, channel_id: str, text: str) -> None:
        logger.info("=" * 70)
        logger.info(f"📢 [DRY-RUN] MESSAGE TO {channel_id} (NOT SENT)")
        logger.info("-" * 70)
        for line in text.split("\n"):
            logger.info(line)
        logger.info("=" * 70)


class TelegramPlatform(ChatPlatform):
    """
    Platform for production - wraps a python-telegram-bot Bot.

    The bot must be initialized (Application does this on startup)
    before self_identity() is called.
    """

    def __init__(self, bot: Bot):
        self.bot = bot
        self._channel_names: Dict[str, str] = {}

    def self_identity(self) -> Optional[str]:
        return str(self.bot.id)

    async def resolve_channel_name(self, channel_id: str) -> str:
        if channel_id in self._channel_names:
            return self._channel_names[channel_id]

        try:
            chat = await self.bot.get_chat(chat_id=channel_id)
        except TelegramError as e:
            logger.warning(f"Could not resolve channel {channel_id}: {e}")
            return channel_id

        name = chat.title or chat.username or channel_id
        self._channel_names[channel_id] = name
        return name

    async def post_message(self, channel_id: str, text: str) -> None:
        await self.bot.send_message(chat_id=channel_id, text=text)


def event_from_update(update: Update) -> Optional[InboundEvent]:
    """
    Convert a Telegram update into an InboundEvent.

    Args:
        update: Telegram update

    Returns:
        InboundEvent, or None if the update carries no message
    """
    message = update.effective_message
    if message is None:
        return None

    if update.message is not None or update.channel_post is not None:
        event_type = "message"
    else:
        event_type = "edited_message"

    # Channel posts have no sending user, only a sender chat
    if update.effective_user is not None:
        user = str(update.effective_user.id)
    elif message.sender_chat is not None:
        user = str(message.sender_chat.id)
    else:
        user = None

    return InboundEvent(
        type=event_type,
        text=message.text,
        channel=str(message.chat_id),
        user=user,
    )

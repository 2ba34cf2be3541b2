"""
Tests for the train bot message handlers.

Drives TrainBotHandlers with a recording chat platform and a real SQLite
schedule (no Telegram connection required).
"""

import asyncio
from datetime import datetime
from typing import List, Optional, Tuple

import pytest

from trainbot.bot.events import InboundEvent
from trainbot.bot.handlers import TrainBotHandlers
from trainbot.bot.messages import format_error, format_help
from trainbot.bot.platform import ChatPlatform
from trainbot.schedule.store import ScheduleStore, ScheduleStoreError
from trainbot.utils.config import Settings

BOT_ID = "999"
CHANNEL = "-1001234567890"


class RecordingPlatform(ChatPlatform):
    """Chat platform that records posted messages."""

    def __init__(self, identity: Optional[str] = BOT_ID):
        self.identity = identity
        self.sent: List[Tuple[str, str]] = []

    def self_identity(self) -> Optional[str]:
        return self.identity

    async def resolve_channel_name(self, channel_id: str) -> str:
        return f"channel-{channel_id}"

    async def post_message(self, channel_id: str, text: str) -> None:
        self.sent.append((channel_id, text))


class FailingPlatform(RecordingPlatform):
    """Chat platform whose sends always fail."""

    async def post_message(self, channel_id: str, text: str) -> None:
        raise ConnectionError("network down")


class SpyStore:
    """Store wrapper counting lookups and optionally failing them."""

    def __init__(self, store: Optional[ScheduleStore] = None, fail: bool = False):
        self.store = store
        self.fail = fail
        self.calls: List[Tuple[str, Optional[str], str]] = []

    def find_next_departure(self, origin, destination, now):
        self.calls.append((origin, destination, now))
        if self.fail:
            raise ScheduleStoreError("database is locked")
        return self.store.find_next_departure(origin, destination, now)

    def record_run(self, timestamp=None):
        return self.store.record_run(timestamp)


def create_test_settings(**overrides) -> Settings:
    """Create test settings."""
    values = {
        "telegram_bot_token": "test-token",
        "bot_name": "trainbot",
        "channel_prefix": "-100",
        "welcome_chat_id": "",
    }
    values.update(overrides)
    return Settings(**values)


def create_test_event(text: str, channel: str = CHANNEL, user: str = "42") -> InboundEvent:
    """Create a test channel message."""
    return InboundEvent(type="message", text=text, channel=channel, user=user)


def fixed_clock(hour: int, minute: int = 0):
    """Clock returning a fixed local time."""
    return lambda: datetime(2026, 3, 2, hour, minute, 30)


def create_handlers(store, platform=None, hour: int = 6, minute: int = 0, **settings):
    return TrainBotHandlers(
        store,
        platform or RecordingPlatform(),
        create_test_settings(**settings),
        clock=fixed_clock(hour, minute),
    )


class TestScenarios:
    """End-to-end reply scenarios."""

    def test_next_departure(self, store):
        """Train at 07:18 from Central to North, now 06:00."""
        handlers = create_handlers(store, hour=6)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North")))

        assert len(handlers.platform.sent) == 1
        channel, text = handlers.platform.sent[0]
        assert channel == CHANNEL
        assert "7:18 am" in text
        assert "Central" in text
        assert "North" in text

    def test_after_last_departure(self, store):
        """Now 23:00, no train left today."""
        handlers = create_handlers(store, hour=23)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North")))

        assert handlers.platform.sent == [
            (CHANNEL, "No upcoming train found from Central to North after 11:00 pm.")
        ]

    def test_help(self, store):
        handlers = create_handlers(store)

        asyncio.run(handlers.on_event(create_test_event("trainbot, help")))

        assert handlers.platform.sent == [(CHANNEL, format_help("trainbot"))]

    def test_bare_mention(self, store):
        handlers = create_handlers(store)

        asyncio.run(handlers.on_event(create_test_event("trainbot")))

        assert handlers.platform.sent == [(CHANNEL, format_help("trainbot"))]

    def test_store_fault_then_recovery(self, store):
        """A failing lookup yields the error reply and the bot keeps serving."""
        spy = SpyStore(store, fail=True)
        handlers = create_handlers(spy)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North")))
        assert handlers.platform.sent == [(CHANNEL, format_error())]

        asyncio.run(handlers.on_event(create_test_event("trainbot, help")))
        spy.fail = False
        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North")))

        assert len(handlers.platform.sent) == 3
        assert handlers.platform.sent[1][1] == format_help("trainbot")
        assert "7:18 am" in handlers.platform.sent[2][1]


    def test_bad_stored_time_gets_error_reply(self, store):
        """Times stored with seconds yield the error reply, not an exception."""
        store._conn.execute("UPDATE times SET time = '07:18:00' WHERE time = '07:18'")
        handlers = create_handlers(store, hour=6)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North")))

        assert handlers.platform.sent == [(CHANNEL, format_error())]


class TestDispatch:
    """Test parsing and dispatch."""

    @pytest.mark.parametrize("text", ["trainbot", "trainbot,", "trainbot,  ", "trainbot,help"])
    def test_help_never_queries_store(self, store, text):
        spy = SpyStore(store)
        handlers = create_handlers(spy)

        asyncio.run(handlers.on_event(create_test_event(text)))

        assert spy.calls == []
        assert handlers.platform.sent == [(CHANNEL, format_help("trainbot"))]

    def test_one_lookup_with_trimmed_arguments(self, store):
        spy = SpyStore(store)
        handlers = create_handlers(spy, hour=6, minute=5)

        asyncio.run(handlers.on_event(create_test_event("trainbot,   CEN  ,  NOR  ")))

        assert spy.calls == [("CEN", "NOR", "06:05")]
        assert len(handlers.platform.sent) == 1

    def test_time_hint_replaces_now(self, store):
        spy = SpyStore(store)
        handlers = create_handlers(spy, hour=6)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North, 2 pm")))

        assert spy.calls == [("Central", "North", "14:00")]
        assert "2:32 pm" in handlers.platform.sent[0][1]

    def test_earlier_time_hint_keeps_now(self, store):
        """A time already past never brings back trains that have left."""
        spy = SpyStore(store)
        handlers = create_handlers(spy, hour=15)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North, 7 am")))

        assert spy.calls == [("Central", "North", "15:00")]
        assert "7:18 am" not in handlers.platform.sent[0][1]
        assert "No upcoming train found" in handlers.platform.sent[0][1]

    def test_unparseable_time_hint_uses_now(self, store):
        spy = SpyStore(store)
        handlers = create_handlers(spy, hour=6)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central, North, soon")))

        assert spy.calls == [("Central", "North", "06:00")]

    def test_missing_destination(self, store):
        handlers = create_handlers(store)

        asyncio.run(handlers.on_event(create_test_event("trainbot, Central")))

        assert len(handlers.platform.sent) == 1
        assert "No upcoming train found from Central" in handlers.platform.sent[0][1]


class TestFiltering:
    """Rejected events never reach the handler."""

    @pytest.mark.parametrize("event", [
        InboundEvent(type="message", text="trainbot, help", channel="42", user="42"),
        InboundEvent(type="message", text="trainbot, help", channel=CHANNEL, user=BOT_ID),
        InboundEvent(type="edited_message", text="trainbot, help", channel=CHANNEL, user="42"),
        InboundEvent(type="message", text="next train please", channel=CHANNEL, user="42"),
        InboundEvent(type="message", text=None, channel=CHANNEL, user="42"),
    ])
    def test_rejected(self, store, event):
        spy = SpyStore(store)
        handlers = create_handlers(spy)

        handled = asyncio.run(handlers.on_event(event))

        assert handled is False
        assert handlers.platform.sent == []
        assert spy.calls == []

    def test_accepted(self, store):
        handlers = create_handlers(store)

        handled = asyncio.run(handlers.on_event(create_test_event("TRAINBOT, help")))

        assert handled is True


class TestSendFailure:
    """Send errors are not swallowed by the handler."""

    def test_send_failure_propagates(self, store):
        handlers = create_handlers(store, platform=FailingPlatform())

        with pytest.raises(ConnectionError):
            asyncio.run(handlers.on_event(create_test_event("trainbot, help")))


class TestFirstRun:
    """Test first-run welcome message."""

    def test_welcome_once(self, store):
        handlers = create_handlers(store, welcome_chat_id=CHANNEL)

        assert asyncio.run(handlers.announce_first_run()) is True
        assert asyncio.run(handlers.announce_first_run()) is False

        assert len(handlers.platform.sent) == 1
        channel, text = handlers.platform.sent[0]
        assert channel == CHANNEL
        assert "`trainbot`" in text

    def test_no_welcome_chat_configured(self, store):
        handlers = create_handlers(store)

        assert asyncio.run(handlers.announce_first_run()) is True
        assert handlers.platform.sent == []

    def test_bookkeeping_failure_is_not_fatal(self, schedule_db):
        store = ScheduleStore(schedule_db)  # never opened
        handlers = create_handlers(store, welcome_chat_id=CHANNEL)

        assert asyncio.run(handlers.announce_first_run()) is False
        assert handlers.platform.sent == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

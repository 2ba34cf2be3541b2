"""
Trainbot - a chat bot that answers "when is the next train?".

Listens for mentions in Telegram channels, looks up the next departure in a
local SQLite schedule and replies with departure and arrival times.
"""

__version__ = "1.0.0"

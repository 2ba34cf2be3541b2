"""Telegram bot: message filtering, command parsing and replies."""

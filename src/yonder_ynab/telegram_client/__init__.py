"""
Telegram Bot API Client.

Provides:
- getFile + file download (for CSV documents sent to the bot)
- sendMessage (for import summaries)
"""

from .client import TelegramAPIError, TelegramClient, TelegramError

__all__ = [
    "TelegramClient",
    "TelegramError",
    "TelegramAPIError",
]

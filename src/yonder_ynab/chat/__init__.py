"""
Chat adapter.

Provides:
- ChatTransport: fetch a file by reference, send a reply
- TelegramTransport: ChatTransport over the Telegram Bot API
- ChatAdapter: import documents sent to the bot, reply with the summary
"""

from .adapter import (
    FAILURE_REPLY_PREFIX,
    NO_DOCUMENT_REPLY,
    ChatAdapter,
    ChatMessage,
    ChatTransport,
    TelegramTransport,
)

__all__ = [
    "ChatAdapter",
    "ChatMessage",
    "ChatTransport",
    "TelegramTransport",
    "NO_DOCUMENT_REPLY",
    "FAILURE_REPLY_PREFIX",
]

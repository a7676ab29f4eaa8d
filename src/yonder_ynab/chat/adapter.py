"""
Chat adapter: CSV documents sent to a bot are imported into YNAB.

The adapter only knows the ChatTransport interface ("fetch file by
reference", "send reply"); TelegramTransport is the one implementation.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..services.yonder_import import PIPELINE_ERRORS, ImportResult
from ..telegram_client import TelegramClient, TelegramError

logger = logging.getLogger(__name__)

NO_DOCUMENT_REPLY = "Send Yonder CSV export as a document"
FAILURE_REPLY_PREFIX = "Failed to import transactions:"

# Failures rendered back to the user instead of propagating
IMPORT_ERRORS = (*PIPELINE_ERRORS, TelegramError)


class ChatTransport(Protocol):
    """What the chat adapter needs from a messaging platform."""

    def fetch_file(self, file_ref: str) -> bytes: ...

    def send_reply(self, chat_id: int | str, text: str) -> None: ...


@dataclass(frozen=True)
class ChatMessage:
    """An incoming chat message, reduced to what the adapter uses."""

    chat_id: int | str
    file_ref: str | None = None
    file_name: str | None = None

    @classmethod
    def from_telegram_update(cls, update: dict[str, Any]) -> "ChatMessage | None":
        """Extract the message from a Telegram webhook update.

        Returns:
            ChatMessage, or None for updates that carry no message
            (edited messages, callback queries, ...)
        """
        message = update.get("message")
        if not isinstance(message, dict):
            return None

        chat = message.get("chat") or {}
        chat_id = chat.get("id")
        if chat_id is None:
            return None

        document = message.get("document")
        if isinstance(document, dict) and document.get("file_id"):
            return cls(
                chat_id=chat_id,
                file_ref=document["file_id"],
                file_name=document.get("file_name"),
            )
        return cls(chat_id=chat_id)


class TelegramTransport:
    """ChatTransport backed by the Telegram Bot API."""

    def __init__(self, client: TelegramClient | None):
        # A missing client (no bot token) fails on fetch, replies need one too
        self.client = client

    def _require_client(self) -> TelegramClient:
        if self.client is None:
            raise TelegramError("Telegram API key is not set")
        return self.client

    def fetch_file(self, file_ref: str) -> bytes:
        return self._require_client().fetch_file(file_ref)

    def send_reply(self, chat_id: int | str, text: str) -> None:
        self._require_client().send_message(chat_id, text)


class ChatAdapter:
    """Turns chat messages into import runs and replies with the outcome."""

    def __init__(self, transport: ChatTransport, importer: Callable[[bytes], ImportResult]):
        """
        Args:
            transport: Messaging platform implementation
            importer: Runs the pipeline on raw CSV bytes
                (e.g. YonderImportService.import_csv)
        """
        self.transport = transport
        self.importer = importer

    def import_document(self, file_ref: str) -> ImportResult:
        """Fetch a document and import it."""
        csv_bytes = self.transport.fetch_file(file_ref)
        logger.debug(f"Fetched document {file_ref} ({len(csv_bytes)} bytes)")
        return self.importer(csv_bytes)

    def handle_message(self, message: ChatMessage) -> str:
        """
        Handle one message and send the reply.

        Returns:
            The reply text that was sent
        """
        if message.file_ref is None:
            reply = NO_DOCUMENT_REPLY
        else:
            logger.info(f"Importing document {message.file_name or message.file_ref}")
            try:
                reply = str(self.import_document(message.file_ref))
            except IMPORT_ERRORS as e:
                logger.warning(f"Import from chat {message.chat_id} failed: {e}")
                reply = f"{FAILURE_REPLY_PREFIX}\n\n{e}"

        self.transport.send_reply(message.chat_id, reply)
        return reply

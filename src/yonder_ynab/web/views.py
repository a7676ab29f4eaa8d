"""
Views for the import web endpoints.

- import_csv: raw CSV upload, authenticated by the `api_key` query parameter
- telegram_webhook: Telegram bot updates, dispatched to the chat adapter
"""

import hmac
import json
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from ..chat import ChatAdapter, ChatMessage, TelegramTransport
from ..config import Config
from ..services.yonder_import import PIPELINE_ERRORS, YonderImportService
from ..telegram_client import TelegramClient, TelegramError
from ..ynab_client import YnabClient

logger = logging.getLogger(__name__)

TELEGRAM_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def _get_config() -> Config:
    """Get the application config installed by configure_django()."""
    config = getattr(settings, "YONDER_CONFIG", None)
    if config is None:
        raise ImproperlyConfigured("YONDER_CONFIG is not set; call configure_django() first")
    return config


def _get_import_service(config: Config) -> YonderImportService:
    """Build the import pipeline for one request."""
    return YonderImportService.from_config(config, YnabClient.from_config(config))


def _get_chat_adapter(config: Config) -> ChatAdapter:
    """Build the chat adapter for one request."""
    client = None
    if config.telegram.api_key:
        client = TelegramClient(
            token=config.telegram.api_key,
            base_url=config.telegram.base_url,
            timeout=config.telegram.timeout_seconds,
        )
    service = _get_import_service(config)
    return ChatAdapter(TelegramTransport(client), service.import_csv)


def _secrets_match(given: str | None, expected: str) -> bool:
    return given is not None and hmac.compare_digest(given.encode(), expected.encode())


@csrf_exempt
@require_http_methods(["POST"])
def import_csv(request: HttpRequest) -> HttpResponse:
    """Import a Yonder CSV sent as the raw request body."""
    config = _get_config()

    expected_key = config.webhook.api_key
    if not expected_key:
        return HttpResponse("Webhook API key is not set", status=401, content_type="text/plain")

    if not _secrets_match(request.GET.get("api_key"), expected_key):
        logger.warning("Rejected CSV upload with missing or invalid API key")
        return HttpResponse("Invalid API key", status=401, content_type="text/plain")

    try:
        result = _get_import_service(config).import_csv(request.body)
    except PIPELINE_ERRORS as e:
        logger.error(f"CSV upload import failed: {e}")
        return HttpResponse(str(e), status=500, content_type="text/plain")

    return JsonResponse({"message": str(result)})


@csrf_exempt
@require_http_methods(["POST"])
def telegram_webhook(request: HttpRequest) -> HttpResponse:
    """Handle a Telegram webhook update.

    Answers 200 for every well-formed update, whatever the import outcome;
    the outcome itself is reported in the chat.
    """
    config = _get_config()

    secret = config.telegram.webhook_secret
    if secret and not _secrets_match(request.headers.get(TELEGRAM_SECRET_HEADER), secret):
        logger.warning("Rejected Telegram update with invalid secret token")
        return HttpResponse("Invalid secret token", status=401, content_type="text/plain")

    try:
        update = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        return JsonResponse({"ok": False, "error": "Invalid JSON"}, status=400)
    if not isinstance(update, dict):
        return JsonResponse({"ok": False, "error": "Invalid update"}, status=400)

    message = ChatMessage.from_telegram_update(update)
    if message is None:
        logger.debug(f"Ignoring update {update.get('update_id')} without a message")
        return JsonResponse({"ok": True})

    try:
        _get_chat_adapter(config).handle_message(message)
    except TelegramError:
        logger.exception(f"Could not reply to chat {message.chat_id}")

    return JsonResponse({"ok": True})

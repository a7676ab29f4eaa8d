"""
Telegram Bot API client implementation.
"""

import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class TelegramError(Exception):
    """Base exception for Telegram client errors."""

    pass


class TelegramAPIError(TelegramError):
    """Bot API returned an error response."""

    def __init__(self, status_code: int, message: str, method: str | None = None):
        self.status_code = status_code
        self.message = message
        self.method = method
        prefix = f"{method}: " if method else ""
        super().__init__(f"Telegram API error {status_code}: {prefix}{message}")


class TelegramClient:
    """
    Client for the Telegram Bot API.

    Features:
    - Resolve a file_id to a download path (getFile)
    - Download file contents
    - Send text messages
    - Automatic retry with backoff for GET requests

    The bot token is part of every URL, so URLs are never logged.
    """

    DEFAULT_BASE_URL = "https://api.telegram.org"
    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ):
        """
        Initialize Telegram client.

        Args:
            token: Bot token from @BotFather
            base_url: Bot API server URL
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for GET requests
            backoff_factor: Backoff factor for retries
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

        self.session = requests.Session()

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _send(self, method: str, url: str, label: str, **kwargs) -> requests.Response:
        logger.debug(f"Telegram request: {method} {label}")
        try:
            return self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            # Exception text may embed the URL, and with it the token
            logger.error(f"Telegram request {label} failed: {type(e).__name__}")
            raise TelegramError(f"Request to Telegram failed ({label}): {type(e).__name__}") from e

    def _call(self, api_method: str, http_method: str = "GET", **kwargs) -> dict | list | bool:
        """Call a Bot API method and return its `result`."""
        url = f"{self.base_url}/bot{self.token}/{api_method}"
        response = self._send(http_method, url, api_method, **kwargs)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not response.ok or not body.get("ok", False):
            message = body.get("description") or response.reason or "unknown error"
            logger.error(f"Telegram API Error {response.status_code}: {api_method}: {message}")
            raise TelegramAPIError(
                status_code=body.get("error_code", response.status_code),
                message=message,
                method=api_method,
            )

        return body.get("result")

    def get_file_path(self, file_id: str) -> str:
        """Resolve a file_id to the path used for downloading."""
        result = self._call("getFile", params={"file_id": file_id})
        file_path = result.get("file_path") if isinstance(result, dict) else None
        if not file_path:
            raise TelegramError("no file path found")
        return file_path

    def download_file(self, file_path: str) -> bytes:
        """Download a file previously resolved with get_file_path."""
        url = f"{self.base_url}/file/bot{self.token}/{file_path}"
        response = self._send("GET", url, "file download")
        if not response.ok:
            raise TelegramAPIError(response.status_code, response.reason or "download failed")
        return response.content

    def fetch_file(self, file_id: str) -> bytes:
        """Resolve and download a file in one go."""
        return self.download_file(self.get_file_path(file_id))

    def send_message(self, chat_id: int | str, text: str) -> dict:
        """Send a plain-text message to a chat."""
        return self._call("sendMessage", "POST", json={"chat_id": chat_id, "text": text})

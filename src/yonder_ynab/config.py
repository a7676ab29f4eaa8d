"""
Configuration management (SSOT).

This module defines ALL configuration for the Yonder → YNAB importer.
All config keys are defined here; no other module should invent config keys.

Key invariants:
- Config is built once at process start and passed explicitly to the
  pipeline and adapters
- Secrets (tokens, webhook keys) may come from the environment so they
  never have to live in the YAML file
"""

import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path

import yaml

# Sentinel understood by YNAB as "the budget the user last opened"
LAST_USED_BUDGET = "last-used"

DEFAULT_YNAB_URL = "https://api.ynab.com/v1"
DEFAULT_TELEGRAM_URL = "https://api.telegram.org"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class YnabConfig:
    """YNAB API configuration.

    budget_id accepts the `last-used` sentinel; it is passed through to
    YNAB verbatim and never interpreted here.
    """

    api_key: str
    account_id: str
    budget_id: str = LAST_USED_BUDGET
    base_url: str = DEFAULT_YNAB_URL
    timeout_seconds: int = 30


@dataclass
class TelegramConfig:
    """Telegram bot configuration."""

    # Bot token; the chat adapter cannot download files without it
    api_key: str | None = None
    base_url: str = DEFAULT_TELEGRAM_URL
    # Optional secret Telegram echoes in X-Telegram-Bot-Api-Secret-Token
    webhook_secret: str | None = None
    timeout_seconds: int = 30


@dataclass
class WebhookConfig:
    """HTTP upload endpoint configuration."""

    # Shared secret expected in the `api_key` query parameter
    api_key: str | None = None


@dataclass
class Config:
    """Application configuration (SSOT)."""

    ynab: YnabConfig
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    webhook: WebhookConfig = field(default_factory=WebhookConfig)

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.ynab.api_key:
            errors.append("ynab.api_key is required")
        if not self.ynab.budget_id:
            errors.append("ynab.budget_id is required (use 'last-used' for the last opened budget)")

        if not self.ynab.account_id:
            errors.append("ynab.account_id is required")
        else:
            try:
                uuid.UUID(self.ynab.account_id)
            except ValueError:
                errors.append(f"ynab.account_id is not a valid UUID: {self.ynab.account_id!r}")

        if self.ynab.timeout_seconds <= 0:
            errors.append("ynab.timeout_seconds must be positive")

        return errors

    def ensure_valid(self) -> "Config":
        """Raise ConfigValidationError if validate() reports anything."""
        errors = self.validate()
        if errors:
            raise ConfigValidationError("; ".join(errors))
        return self


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    A missing file is not an error: everything can be supplied through
    the environment. Environment variables override config values:
    - YNAB_API_KEY
    - YNAB_BUDGET_ID
    - YNAB_ACCOUNT_ID
    - YNAB_URL
    - API_KEY (Telegram bot token)
    - TELEGRAM_WEBHOOK_SECRET
    - WEBHOOK_API_KEY
    """
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    # YNAB config
    ynab_data = data.get("ynab", {})
    ynab = YnabConfig(
        api_key=os.environ.get("YNAB_API_KEY", ynab_data.get("api_key", "")),
        account_id=str(os.environ.get("YNAB_ACCOUNT_ID", ynab_data.get("account_id", ""))),
        budget_id=os.environ.get("YNAB_BUDGET_ID", ynab_data.get("budget_id", LAST_USED_BUDGET)),
        base_url=os.environ.get("YNAB_URL", ynab_data.get("base_url", DEFAULT_YNAB_URL)),
        timeout_seconds=int(ynab_data.get("timeout_seconds", 30)),
    )

    # Telegram config
    telegram_data = data.get("telegram", {})
    telegram = TelegramConfig(
        api_key=os.environ.get("API_KEY", telegram_data.get("api_key")),
        base_url=telegram_data.get("base_url", DEFAULT_TELEGRAM_URL),
        webhook_secret=os.environ.get(
            "TELEGRAM_WEBHOOK_SECRET", telegram_data.get("webhook_secret")
        ),
        timeout_seconds=int(telegram_data.get("timeout_seconds", 30)),
    )

    # Upload webhook config
    webhook_data = data.get("webhook", {})
    webhook = WebhookConfig(
        api_key=os.environ.get("WEBHOOK_API_KEY", webhook_data.get("api_key")),
    )

    return Config(ynab=ynab, telegram=telegram, webhook=webhook)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Yonder CSV → YNAB Importer Configuration
#
# Secrets can be left empty here and supplied through the environment:
# YNAB_API_KEY, YNAB_BUDGET_ID, YNAB_ACCOUNT_ID, API_KEY, WEBHOOK_API_KEY

ynab:
  api_key: "YOUR_YNAB_PERSONAL_ACCESS_TOKEN"
  budget_id: "last-used"                  # Budget UUID or "last-used"
  account_id: "YOUR_YNAB_ACCOUNT_UUID"    # Run `yonder-ynab accounts` to find it
  base_url: "https://api.ynab.com/v1"
  timeout_seconds: 30

# Telegram bot (chat adapter)
telegram:
  api_key: null                           # Bot token from @BotFather
  webhook_secret: null                    # Optional secret_token set with setWebhook

# HTTP upload endpoint (POST /import?api_key=...)
webhook:
  api_key: null                           # Shared secret; endpoint rejects all uploads if unset
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)

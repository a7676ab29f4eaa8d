"""Test fixtures and utilities."""

from datetime import datetime

import pytest

from yonder_ynab.config import Config, TelegramConfig, WebhookConfig, YnabConfig
from yonder_ynab.schemas.yonder_csv import YonderTransaction, YonderTransactionKind

from fixtures import (
    ACCOUNT_ID,
    BUDGET_ID,
    CREDIT_ROW,
    TELEGRAM_TOKEN,
    TELEGRAM_URL,
    WEBHOOK_SECRET,
    YNAB_TOKEN,
    YNAB_URL,
    get_yonder_sample,
    make_yonder_csv,
)


@pytest.fixture
def sample_csv() -> bytes:
    """The single-row Yonder export from tests/fixtures."""
    return get_yonder_sample()


@pytest.fixture
def two_row_csv(sample_csv) -> bytes:
    """Sample debit plus one credit."""
    return sample_csv + (CREDIT_ROW + "\n").encode()


@pytest.fixture
def sample_transaction() -> YonderTransaction:
    """The row of the sample export as a parsed transaction."""
    return YonderTransaction(
        date_time=datetime(2026, 1, 1, 10, 34, 50, 211697),
        description="TFL - Transport for London",
        amount_gbp=3.00,
        amount_charged=3.00,
        currency="GBP",
        category="Transport",
        kind=YonderTransactionKind.DEBIT,
        country="GBR",
    )


@pytest.fixture
def make_csv():
    """Factory building a Yonder CSV from data rows."""
    return make_yonder_csv


@pytest.fixture
def sample_config() -> Config:
    """Configuration pointing at mocked YNAB and Telegram hosts."""
    return Config(
        ynab=YnabConfig(
            api_key=YNAB_TOKEN,
            account_id=ACCOUNT_ID,
            budget_id=BUDGET_ID,
            base_url=YNAB_URL,
        ),
        telegram=TelegramConfig(api_key=TELEGRAM_TOKEN, base_url=TELEGRAM_URL),
        webhook=WebhookConfig(api_key=WEBHOOK_SECRET),
    )


@pytest.fixture(scope="session")
def django_settings():
    """Configure Django once with the web settings module."""
    import django
    from django.conf import settings

    from yonder_ynab.web import settings as web_settings

    if not settings.configured:
        values = {name: getattr(web_settings, name) for name in dir(web_settings) if name.isupper()}
        values["ALLOWED_HOSTS"] = ["testserver", "localhost"]
        settings.configure(**values)
        django.setup()

    return settings

"""
Test fixtures for Yonder CSV exports.

This module provides sample export files for testing:
- yonder.csv: a single TfL debit, as exported by the Yonder app
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent

YONDER_HEADER = (
    "Date/Time of transaction,Description,Amount (GBP),Amount (in Charged Currency),"
    "Currency,Category,Debit or Credit,Country"
)


def load_fixture_bytes(name: str) -> bytes:
    """Load a fixture file as raw bytes."""
    return (FIXTURES_DIR / name).read_bytes()


def get_yonder_sample() -> bytes:
    """Get the sample Yonder export."""
    return load_fixture_bytes("yonder.csv")


def make_yonder_csv(*rows: str, header: str = YONDER_HEADER) -> bytes:
    """Build a Yonder CSV from pre-formatted data rows."""
    return ("\n".join([header, *rows]) + "\n").encode("utf-8")


# Expected parse of yonder.csv
EXPECTED_SAMPLE = {
    "date_time": "2026-01-01T10:34:50.211697",
    "description": "TFL - Transport for London",
    "amount_gbp": 3.0,
    "amount_charged": 3.0,
    "currency": "GBP",
    "category": "Transport",
    "kind": "Debit",
    "country": "GBR",
    "import_id": "TG:3:1767263690211",
    "milliunits": -3000,
    "date": "2026-01-01",
}

# A second row used for multi-row batches
CREDIT_ROW = "2026-01-02T08:15:00.000001,Salary,10.25,10.25,GBP,Income,Credit,GBR"
CREDIT_IMPORT_ID = "TG:10.25:1767341700000"

# Mocked remote services
YNAB_URL = "https://api.ynab.test/v1"
TELEGRAM_URL = "https://telegram.test"
YNAB_TOKEN = "ynab-token-12345"
TELEGRAM_TOKEN = "123456:telegram-token"
WEBHOOK_SECRET = "webhook-secret"
ACCOUNT_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
BUDGET_ID = "last-used"

"""
Dedupe key generation (CRITICAL).

This module defines THE deterministic YNAB import_id function.
This is the ONLY way to generate import IDs in the system.

Import ID format: TG:{amount}:{epoch_millis}
- TG = static prefix marking keys produced by this importer
- amount = unscaled account-currency amount as parsed from the CSV,
  shortest round-trip decimal form without a trailing ".0" (3.0 -> "3")
- epoch_millis = transaction timestamp read as UTC, floored to milliseconds

The import_id must be:
- Stable: Same CSV row always produces the same key
- Unique per (amount, instant) pair
- Shorter than YNAB's 36 character limit

YNAB, not this module, compares keys: a re-submitted key is reported back
as a duplicate instead of creating a second transaction.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# ============================================================================
# SSOT Constants for Import ID Generation
# ============================================================================

IMPORT_ID_PREFIX = "TG"

IMPORT_ID_SEPARATOR = ":"

# YNAB rejects import_id values longer than this
MAX_IMPORT_ID_LENGTH = 36

_EPOCH = datetime(1970, 1, 1)
_ONE_MILLISECOND = timedelta(milliseconds=1)


@dataclass(frozen=True)
class ImportIdComponents:
    """Components recovered from an import_id."""

    amount: str
    epoch_millis: int

    @property
    def timestamp(self) -> datetime:
        """Naive timestamp the key was built from (millisecond precision)."""
        return _EPOCH + timedelta(milliseconds=self.epoch_millis)


def format_amount(amount: float) -> str:
    """
    Format an amount the way it appears in the import_id.

    Uses the shortest decimal string that round-trips to the same float,
    never scientific notation, and drops a trailing ".0".

    Examples:
        3.0 -> "3", 3.5 -> "3.5", 12.34 -> "12.34", 0.1 -> "0.1"
    """
    text = format(Decimal(repr(float(amount))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def epoch_millis(date_time: datetime) -> int:
    """Milliseconds since the Unix epoch, reading a naive timestamp as UTC."""
    if date_time.tzinfo is not None:
        date_time = date_time.astimezone(timezone.utc).replace(tzinfo=None)
    return (date_time - _EPOCH) // _ONE_MILLISECOND


def generate_import_id(amount: float, date_time: datetime) -> str:
    """
    Generate the YNAB import_id for a Yonder transaction.

    Args:
        amount: Unscaled account-currency amount as parsed (positive magnitude)
        date_time: Transaction timestamp from the export

    Returns:
        Deterministic import_id, e.g. "TG:3:1767263690211"
    """
    return IMPORT_ID_SEPARATOR.join(
        [IMPORT_ID_PREFIX, format_amount(amount), str(epoch_millis(date_time))]
    )


def parse_import_id(import_id: str | None) -> ImportIdComponents | None:
    """
    Parse an import_id back into its components.

    Returns:
        ImportIdComponents, or None if the value is not a key of this format
    """
    if not import_id:
        return None

    parts = import_id.split(IMPORT_ID_SEPARATOR)
    if len(parts) != 3 or parts[0] != IMPORT_ID_PREFIX:
        return None

    amount, millis = parts[1], parts[2]
    try:
        Decimal(amount)
        epoch = int(millis)
    except (ArithmeticError, ValueError):
        return None

    return ImportIdComponents(amount=amount, epoch_millis=epoch)

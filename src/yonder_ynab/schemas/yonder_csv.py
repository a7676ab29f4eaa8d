"""
Yonder CSV export decoder (SSOT).

This is THE single parser for the Yonder transaction export. It turns raw
bytes into typed YonderTransaction records or fails as a whole.

Rules:
- The header must contain every expected column (exact, case-sensitive names)
- Column order is not significant
- Every data row must have as many fields as the header
- Any unparseable field aborts the whole decode; rows are never skipped
"""

import csv
import io
import math
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# ============================================================================
# Column names as they appear in the Yonder export header
# ============================================================================

COL_DATE_TIME = "Date/Time of transaction"
COL_DESCRIPTION = "Description"
COL_AMOUNT_GBP = "Amount (GBP)"
COL_AMOUNT_CHARGED = "Amount (in Charged Currency)"
COL_CURRENCY = "Currency"
COL_CATEGORY = "Category"
COL_KIND = "Debit or Credit"
COL_COUNTRY = "Country"

EXPECTED_COLUMNS = (
    COL_DATE_TIME,
    COL_DESCRIPTION,
    COL_AMOUNT_GBP,
    COL_AMOUNT_CHARGED,
    COL_CURRENCY,
    COL_CATEGORY,
    COL_KIND,
    COL_COUNTRY,
)

# Plain decimal literal; rejects "nan", "inf" and "1_000" which float() accepts
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# 2026-01-01T10:34:50.211697; the offset group only exists to be rejected
_TIMESTAMP_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:?\d{2})?"
)


class YonderCSVError(ValueError):
    """The input is not a valid Yonder transactions CSV."""

    def __init__(self, message: str, row: int | None = None, column: str | None = None):
        self.row = row
        self.column = column
        location = ""
        if row is not None:
            location = f"row {row}"
            if column is not None:
                location += f", column '{column}'"
            location += ": "
        super().__init__(f"failed to deserialize as Yonder transactions CSV: {location}{message}")


class YonderTransactionKind(str, Enum):
    """Direction of a Yonder transaction."""

    DEBIT = "Debit"
    CREDIT = "Credit"


@dataclass(frozen=True)
class YonderTransaction:
    """One row of the Yonder CSV export."""

    date_time: datetime  # Naive local time, no offset in the export
    description: str
    amount_gbp: float  # Always a positive magnitude; sign comes from `kind`
    amount_charged: float
    currency: str
    category: str  # Not used downstream
    kind: YonderTransactionKind
    country: str


def parse_date_time(value: str) -> datetime:
    """Parse a Yonder timestamp such as `2026-01-01T10:34:50.211697`.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp or carries
            a timezone offset.
    """
    match = _TIMESTAMP_PATTERN.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"invalid timestamp {value!r}, expected YYYY-MM-DDTHH:MM:SS[.ffffff]")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    if offset:
        raise ValueError(f"unexpected timezone offset in {value!r}")

    # Digits beyond microseconds are dropped
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond
    )


def parse_amount(value: str) -> float:
    """Parse an amount column into a float.

    Raises:
        ValueError: If the value is not a finite decimal number.
    """
    text = value.strip()
    if not _DECIMAL_PATTERN.fullmatch(text):
        raise ValueError(f"invalid amount {value!r}")
    amount = float(text)
    if not math.isfinite(amount):
        raise ValueError(f"amount out of range {value!r}")
    return amount


def parse_magnitude(value: str) -> float:
    """Parse an amount that must not be negative (`Amount (GBP)`)."""
    amount = parse_amount(value)
    if amount < 0:
        raise ValueError(f"negative amount {value!r}, direction comes from 'Debit or Credit'")
    return amount


def parse_kind(value: str) -> YonderTransactionKind:
    """Parse the `Debit or Credit` column (exact, case-sensitive)."""
    for kind in YonderTransactionKind:
        if value == kind.value:
            return kind
    raise ValueError(f"unknown variant {value!r}, expected 'Debit' or 'Credit'")


def _check_header(header: list[str]) -> dict[str, int]:
    """Map each expected column to its index, or raise on a bad header."""
    positions: dict[str, int] = {}
    for idx, name in enumerate(header):
        if name in positions:
            raise YonderCSVError(f"duplicate column '{name}' in header")
        positions[name] = idx

    missing = [name for name in EXPECTED_COLUMNS if name not in positions]
    if missing:
        raise YonderCSVError(f"missing field(s) in header: {', '.join(repr(m) for m in missing)}")

    return {name: positions[name] for name in EXPECTED_COLUMNS}


def _parse_row(row: list[str], columns: dict[str, int], row_number: int) -> YonderTransaction:
    def cell(name: str) -> str:
        return row[columns[name]]

    parsers = (
        (COL_DATE_TIME, parse_date_time),
        (COL_AMOUNT_GBP, parse_magnitude),
        (COL_AMOUNT_CHARGED, parse_amount),
        (COL_KIND, parse_kind),
    )
    parsed = {}
    for column, parser in parsers:
        try:
            parsed[column] = parser(cell(column))
        except ValueError as e:
            raise YonderCSVError(str(e), row=row_number, column=column) from e

    return YonderTransaction(
        date_time=parsed[COL_DATE_TIME],
        description=cell(COL_DESCRIPTION),
        amount_gbp=parsed[COL_AMOUNT_GBP],
        amount_charged=parsed[COL_AMOUNT_CHARGED],
        currency=cell(COL_CURRENCY),
        category=cell(COL_CATEGORY),
        kind=parsed[COL_KIND],
        country=cell(COL_COUNTRY),
    )


def parse_yonder_csv(data: bytes | str) -> list[YonderTransaction]:
    """
    Parse a Yonder CSV export.

    Args:
        data: Raw CSV content (bytes are decoded as UTF-8, BOM tolerated)

    Returns:
        Transactions in file order

    Raises:
        YonderCSVError: If the header, any row, or any field is invalid
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise YonderCSVError(f"content is not valid UTF-8: {e}") from e
    else:
        text = data.removeprefix("\ufeff")

    # Tolerates ", " separators
    reader = csv.reader(io.StringIO(text, newline=""), skipinitialspace=True)

    try:
        header = next(reader, None)
        if header is None:
            raise YonderCSVError("empty input, expected a header row")
        columns = _check_header(header)

        transactions: list[YonderTransaction] = []
        row_number = 0
        for row in reader:
            if not row:
                # Blank line
                continue
            row_number += 1
            if len(row) != len(header):
                raise YonderCSVError(
                    f"found record with {len(row)} fields, but the header has {len(header)} fields",
                    row=row_number,
                )
            transactions.append(_parse_row(row, columns, row_number))
    except csv.Error as e:
        raise YonderCSVError(f"malformed CSV: {e}") from e

    return transactions

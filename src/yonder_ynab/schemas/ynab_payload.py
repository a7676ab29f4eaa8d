"""
YNAB transaction payload builder (SSOT).

This is THE single mapper from YonderTransaction → YNAB NewTransaction JSON.

Rules:
- amount is in milliunits: source amount × 1000 (decimal), truncated toward zero
- Debits are negative, credits positive
- cleared is always "cleared"
- date is the calendar date of the export timestamp (time-of-day dropped)
- import_id is always set (see dedupe.generate_import_id)
- payee_name is the description, verbatim
- category, memo, flag and approval are never set; categorisation stays a
  manual step in YNAB
- account_id is injected after mapping (with_account)
"""

import json
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any

from .dedupe import MAX_IMPORT_ID_LENGTH, generate_import_id
from .yonder_csv import YonderTransaction, YonderTransactionKind

logger = logging.getLogger(__name__)

# YNAB milliunits per currency unit
MILLIUNITS_PER_UNIT = 1000

# YNAB's documented payee_name limit; longer values are rejected server side
MAX_PAYEE_NAME_LENGTH = 200


class ClearedStatus(str, Enum):
    """YNAB transaction cleared status."""

    CLEARED = "cleared"
    UNCLEARED = "uncleared"
    RECONCILED = "reconciled"


@dataclass
class NewTransaction:
    """
    Single transaction for the YNAB API.

    Maps to NewTransaction / SaveTransaction in the YNAB API.
    """

    amount: int  # Milliunits
    date: str  # YYYY-MM-DD
    import_id: str
    payee_name: str | None = None
    cleared: ClearedStatus = ClearedStatus.CLEARED

    # Injected by the pipeline after mapping
    account_id: str | None = None

    # Never set by this importer
    payee_id: str | None = None
    category_id: str | None = None
    memo: str | None = None
    flag_color: str | None = None
    approved: bool | None = None
    subtransactions: list[dict[str, Any]] = field(default_factory=list)

    def with_account(self, account_id: str) -> "NewTransaction":
        """Return a copy assigned to the given YNAB account."""
        return replace(self, account_id=account_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to YNAB API JSON format."""
        result: dict[str, Any] = {
            "amount": self.amount,
            "date": self.date,
            "cleared": self.cleared.value,
            "import_id": self.import_id,
        }

        # Add optional fields only if set
        optional_fields = [
            ("account_id", self.account_id),
            ("payee_id", self.payee_id),
            ("payee_name", self.payee_name),
            ("category_id", self.category_id),
            ("memo", self.memo),
            ("flag_color", self.flag_color),
            ("approved", self.approved),
        ]

        for field_name, value in optional_fields:
            if value is not None:
                result[field_name] = value

        if self.subtransactions:
            result["subtransactions"] = self.subtransactions

        return result


@dataclass
class PostTransactionsWrapper:
    """
    Request body for the bulk-create endpoint.

    Maps to PostTransactionsWrapper in the YNAB API (the multi-transaction form).
    """

    transactions: list[NewTransaction]

    def to_dict(self) -> dict[str, Any]:
        """Convert to YNAB API JSON format."""
        return {"transactions": [t.to_dict() for t in self.transactions]}

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def to_milliunits(amount: float, kind: YonderTransactionKind) -> int:
    """
    Convert a Yonder amount into signed YNAB milliunits.

    Debits are negated, credits kept positive. The amount is scaled by
    1000 in decimal, so 2.01 gives exactly 2010, and truncated toward zero.
    """
    signed = -amount if kind == YonderTransactionKind.DEBIT else amount
    return int(Decimal(repr(float(signed))) * MILLIUNITS_PER_UNIT)


def build_new_transaction(
    transaction: YonderTransaction,
    account_id: str | None = None,
) -> NewTransaction:
    """
    Build a YNAB transaction from one Yonder CSV row.

    This is THE canonical mapper. Pure: no I/O, no failure path.

    Args:
        transaction: Parsed Yonder row
        account_id: Optional YNAB account UUID to assign right away

    Returns:
        NewTransaction ready for submission once account_id is set
    """
    return NewTransaction(
        account_id=account_id,
        amount=to_milliunits(transaction.amount_gbp, transaction.kind),
        date=transaction.date_time.date().isoformat(),
        cleared=ClearedStatus.CLEARED,
        import_id=generate_import_id(transaction.amount_gbp, transaction.date_time),
        payee_name=transaction.description,
    )


def validate_new_transaction(transaction: NewTransaction) -> list[str]:
    """
    Validate a transaction before submission.

    Returns:
        List of validation errors (empty if valid)
    """
    errors: list[str] = []

    if not transaction.account_id:
        errors.append("account_id is required")

    if not transaction.import_id:
        errors.append("import_id is required")
    elif len(transaction.import_id) >= MAX_IMPORT_ID_LENGTH:
        errors.append(
            f"import_id '{transaction.import_id}' must be shorter than "
            f"{MAX_IMPORT_ID_LENGTH} characters"
        )

    if transaction.cleared != ClearedStatus.CLEARED:
        errors.append(f"cleared must be 'cleared', got '{transaction.cleared.value}'")

    if transaction.payee_name and len(transaction.payee_name) > MAX_PAYEE_NAME_LENGTH:
        # Warning only, the description is never truncated
        logger.warning(
            f"payee_name is {len(transaction.payee_name)} characters "
            f"(YNAB limit {MAX_PAYEE_NAME_LENGTH}), import may be rejected: {transaction.import_id}"
        )

    return errors

"""Yonder CSV → YNAB import service.

Runs the import pipeline for one CSV upload:
decode (parse_yonder_csv) → map (build_new_transaction) → submit (bulk create).

Every stage needs the complete output of the previous one, so the run is
strictly sequential. Nothing is kept between runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from yonder_ynab.schemas.dedupe import parse_import_id
from yonder_ynab.schemas.ynab_payload import (
    NewTransaction,
    build_new_transaction,
    validate_new_transaction,
)
from yonder_ynab.schemas.yonder_csv import YonderCSVError, parse_yonder_csv
from yonder_ynab.ynab_client import YnabError

if TYPE_CHECKING:
    from yonder_ynab.config import Config
    from yonder_ynab.ynab_client import SaveTransactionsResult

logger = logging.getLogger(__name__)


class YonderImportError(Exception):
    """The mapped batch cannot be submitted."""

    pass


# Everything an import run can fail with; adapters render these to their channel
PIPELINE_ERRORS = (YonderCSVError, YonderImportError, YnabError)


class TransactionLedger(Protocol):
    """The part of the YNAB client the pipeline depends on."""

    def create_transactions(
        self, budget_id: str, transactions: list[NewTransaction]
    ) -> SaveTransactionsResult: ...


@dataclass(frozen=True)
class ImportResult:
    """Result of one import run."""

    imported: int  # Transactions YNAB created
    duplicates: int  # import_ids YNAB had already seen

    def to_dict(self) -> dict[str, int]:
        return {"imported": self.imported, "duplicates": self.duplicates}

    def __str__(self) -> str:
        return f"Imported transactions: {self.imported}\nSkipped duplicates: {self.duplicates}"


class YonderImportService:
    """Service importing Yonder CSV exports into one YNAB account.

    The target budget and account come from the configuration; the YNAB
    client is injected so adapters and tests can supply their own.
    """

    def __init__(self, ynab_client: TransactionLedger, budget_id: str, account_id: str) -> None:
        """Initialize the import service.

        Args:
            ynab_client: Client exposing create_transactions.
            budget_id: Budget UUID or "last-used" (passed through verbatim).
            account_id: YNAB account UUID every transaction is assigned to.
        """
        self.ynab = ynab_client
        self.budget_id = budget_id
        self.account_id = account_id

    @classmethod
    def from_config(cls, config: Config, ynab_client: TransactionLedger) -> YonderImportService:
        return cls(
            ynab_client=ynab_client,
            budget_id=config.ynab.budget_id,
            account_id=config.ynab.account_id,
        )

    def build_transactions(self, data: bytes | str) -> list[NewTransaction]:
        """Decode a CSV export and map it to YNAB transactions for this account.

        Raises:
            YonderCSVError: If the CSV is malformed.
            YonderImportError: If a mapped transaction fails validation.
        """
        yonder_transactions = parse_yonder_csv(data)
        logger.info(f"Parsed {len(yonder_transactions)} Yonder transaction(s)")

        transactions = [
            build_new_transaction(tx).with_account(self.account_id)
            for tx in yonder_transactions
        ]

        errors = []
        for idx, transaction in enumerate(transactions, 1):
            errors.extend(f"transaction {idx}: {e}" for e in validate_new_transaction(transaction))
        if errors:
            raise YonderImportError(f"Invalid transactions: {'; '.join(errors)}")

        return transactions

    def submit(self, transactions: list[NewTransaction]) -> ImportResult:
        """Submit the whole batch in one bulk create and count the outcome.

        Raises:
            YnabError: If the request fails; no partial result exists.
        """
        if not transactions:
            logger.info("No transactions to import")
            return ImportResult(imported=0, duplicates=0)

        response = self.ynab.create_transactions(self.budget_id, transactions)
        result = ImportResult(
            imported=len(response.transaction_ids),
            duplicates=len(response.duplicate_import_ids),
        )
        for import_id in response.duplicate_import_ids:
            components = parse_import_id(import_id)
            if components is not None:
                logger.debug(
                    f"Skipped duplicate: amount {components.amount} at {components.timestamp}"
                )
        logger.info(
            f"Import finished: {result.imported} imported, {result.duplicates} duplicate(s)"
        )
        return result

    def import_csv(self, data: bytes | str) -> ImportResult:
        """Run the full pipeline on one CSV export."""
        return self.submit(self.build_transactions(data))


def import_yonder_csv(
    data: bytes | str,
    config: Config,
    ynab_client: TransactionLedger,
) -> ImportResult:
    """Parse Yonder transactions in CSV format and import them to YNAB."""
    return YonderImportService.from_config(config, ynab_client).import_csv(data)

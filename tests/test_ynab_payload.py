"""Tests for YNAB payload builder."""

import json
import logging
from dataclasses import replace
from datetime import datetime

import pytest

from fixtures import ACCOUNT_ID, EXPECTED_SAMPLE
from yonder_ynab.schemas.ynab_payload import (
    MAX_PAYEE_NAME_LENGTH,
    ClearedStatus,
    NewTransaction,
    PostTransactionsWrapper,
    build_new_transaction,
    to_milliunits,
    validate_new_transaction,
)
from yonder_ynab.schemas.yonder_csv import YonderTransactionKind


class TestBuildNewTransaction:
    """Tests for the Yonder → YNAB mapper."""

    def test_sample_row(self, sample_transaction):
        """The sample TfL debit maps to the pinned values."""
        tx = build_new_transaction(sample_transaction)

        assert tx.amount == EXPECTED_SAMPLE["milliunits"]
        assert tx.date == EXPECTED_SAMPLE["date"]
        assert tx.payee_name == "TFL - Transport for London"
        assert tx.import_id == EXPECTED_SAMPLE["import_id"]
        assert tx.cleared == ClearedStatus.CLEARED

    def test_unset_fields(self, sample_transaction):
        """Categorisation fields are never filled in."""
        tx = build_new_transaction(sample_transaction)

        assert tx.account_id is None
        assert tx.category_id is None
        assert tx.memo is None
        assert tx.flag_color is None
        assert tx.approved is None
        assert tx.payee_id is None
        assert tx.subtransactions == []

    def test_deterministic(self, sample_transaction):
        """Mapping the same row twice yields identical transactions."""
        assert build_new_transaction(sample_transaction) == build_new_transaction(
            sample_transaction
        )

    def test_account_id_argument(self, sample_transaction):
        """An account can be assigned while mapping."""
        assert build_new_transaction(sample_transaction, ACCOUNT_ID).account_id == ACCOUNT_ID

    def test_with_account_returns_copy(self, sample_transaction):
        """with_account leaves the original untouched."""
        tx = build_new_transaction(sample_transaction)
        assigned = tx.with_account(ACCOUNT_ID)

        assert assigned.account_id == ACCOUNT_ID
        assert tx.account_id is None
        assert replace(assigned, account_id=None) == tx

    def test_credit_is_positive(self, sample_transaction):
        """Credits keep their sign."""
        credit = replace(sample_transaction, kind=YonderTransactionKind.CREDIT)

        assert build_new_transaction(credit).amount == 3000

    def test_import_id_uses_unscaled_amount(self, sample_transaction):
        """The key carries the parsed amount, not milliunits, and no sign."""
        tx = build_new_transaction(replace(sample_transaction, amount_gbp=12.5))

        assert tx.import_id.split(":")[1] == "12.5"
        assert tx.amount == -12500

    def test_import_id_ignores_direction(self, sample_transaction):
        """Debit and credit of the same amount at the same instant share a key."""
        credit = replace(sample_transaction, kind=YonderTransactionKind.CREDIT)

        assert build_new_transaction(credit).import_id == build_new_transaction(
            sample_transaction
        ).import_id

    def test_date_drops_time(self, sample_transaction):
        """Late evening stays on the same calendar date."""
        late = replace(sample_transaction, date_time=datetime(2026, 3, 31, 23, 59, 59, 999999))

        assert build_new_transaction(late).date == "2026-03-31"

    def test_payee_verbatim(self, sample_transaction):
        """The description is copied without normalisation."""
        odd = replace(sample_transaction, description="  Café  «Zürich»  ")

        assert build_new_transaction(odd).payee_name == "  Café  «Zürich»  "

    def test_charged_currency_ignored(self, sample_transaction):
        """Only the GBP amount drives the ledger amount."""
        foreign = replace(sample_transaction, amount_charged=4.12, currency="EUR")

        assert build_new_transaction(foreign).amount == -3000


class TestToMilliunits:
    """Sign and scale of the ledger amount."""

    @pytest.mark.parametrize("amount", [0.01, 0.29, 1.13, 3.0, 10.25, 99.99, 1234.56, 0.0])
    def test_debit_not_positive(self, amount):
        """Debits never produce a positive amount."""
        assert to_milliunits(amount, YonderTransactionKind.DEBIT) <= 0

    @pytest.mark.parametrize("amount", [0.01, 0.29, 1.13, 3.0, 10.25, 99.99, 1234.56, 0.0])
    def test_credit_not_negative(self, amount):
        """Credits never produce a negative amount."""
        assert to_milliunits(amount, YonderTransactionKind.CREDIT) >= 0

    def test_zero_credit(self):
        """Zero stays zero."""
        assert to_milliunits(0.0, YonderTransactionKind.CREDIT) == 0

    @pytest.mark.parametrize(
        "amount,kind,expected",
        [
            (2.01, YonderTransactionKind.DEBIT, -2010),
            (4.02, YonderTransactionKind.DEBIT, -4020),
            (8.03, YonderTransactionKind.CREDIT, 8030),
            (16.06, YonderTransactionKind.DEBIT, -16060),
            (16.06, YonderTransactionKind.CREDIT, 16060),
            (1.005, YonderTransactionKind.CREDIT, 1005),
            (0.29, YonderTransactionKind.DEBIT, -290),
            (99999.99, YonderTransactionKind.CREDIT, 99999990),
        ],
    )
    def test_two_decimal_amounts_exact(self, amount, kind, expected):
        """Amounts with few fractional digits scale without float noise."""
        assert to_milliunits(amount, kind) == expected

    def test_every_two_decimal_amount_up_to_100(self):
        """Every two-decimal amount up to 100.00 maps to exactly cents × 10."""
        for cents in range(10001):
            amount = float(f"{cents // 100}.{cents % 100:02d}")

            assert to_milliunits(amount, YonderTransactionKind.CREDIT) == cents * 10
            assert to_milliunits(amount, YonderTransactionKind.DEBIT) == -cents * 10

    @pytest.mark.parametrize(
        "amount,kind,expected",
        [
            (1.2345, YonderTransactionKind.CREDIT, 1234),
            (1.2345, YonderTransactionKind.DEBIT, -1234),
            (0.0009, YonderTransactionKind.DEBIT, 0),
        ],
    )
    def test_truncates_toward_zero(self, amount, kind, expected):
        """Sub-milliunit digits are dropped toward zero, never rounded."""
        assert to_milliunits(amount, kind) == expected

    def test_exact_values(self):
        """Binary-exact amounts scale exactly."""
        assert to_milliunits(3.0, YonderTransactionKind.DEBIT) == -3000
        assert to_milliunits(10.25, YonderTransactionKind.CREDIT) == 10250
        assert to_milliunits(0.5, YonderTransactionKind.DEBIT) == -500

    def test_returns_int(self):
        """The ledger expects an integer."""
        assert isinstance(to_milliunits(3.0, YonderTransactionKind.DEBIT), int)


class TestSerialization:
    """JSON shape sent to YNAB."""

    def test_to_dict(self, sample_transaction):
        """Unset fields are omitted, set ones use YNAB names."""
        tx = build_new_transaction(sample_transaction, ACCOUNT_ID)

        assert tx.to_dict() == {
            "account_id": ACCOUNT_ID,
            "amount": -3000,
            "date": "2026-01-01",
            "cleared": "cleared",
            "import_id": "TG:3:1767263690211",
            "payee_name": "TFL - Transport for London",
        }

    def test_wrapper(self, sample_transaction):
        """The bulk body wraps transactions in a list."""
        tx = build_new_transaction(sample_transaction, ACCOUNT_ID)
        wrapper = PostTransactionsWrapper(transactions=[tx, tx])

        body = wrapper.to_dict()

        assert list(body) == ["transactions"]
        assert len(body["transactions"]) == 2

    def test_to_json(self, sample_transaction):
        """to_json produces parseable JSON with non-ASCII kept."""
        tx = build_new_transaction(replace(sample_transaction, description="Café"), ACCOUNT_ID)

        text = PostTransactionsWrapper(transactions=[tx]).to_json()

        assert "Café" in text
        assert json.loads(text)["transactions"][0]["payee_name"] == "Café"


class TestValidateNewTransaction:
    """Tests for pre-submission validation."""

    def test_valid(self, sample_transaction):
        """A mapped transaction with an account passes."""
        assert validate_new_transaction(build_new_transaction(sample_transaction, ACCOUNT_ID)) == []

    def test_missing_account(self, sample_transaction):
        """The account must be injected before submission."""
        errors = validate_new_transaction(build_new_transaction(sample_transaction))

        assert any("account_id" in e for e in errors)

    def test_import_id_too_long(self):
        """Keys at or above the limit are reported."""
        tx = NewTransaction(amount=-1, date="2026-01-01", import_id="X" * 36, account_id=ACCOUNT_ID)

        errors = validate_new_transaction(tx)

        assert any("import_id" in e for e in errors)

    def test_import_id_just_below_limit(self):
        """35 characters is fine."""
        tx = NewTransaction(amount=-1, date="2026-01-01", import_id="X" * 35, account_id=ACCOUNT_ID)

        assert validate_new_transaction(tx) == []

    def test_not_cleared(self):
        """Only cleared transactions are emitted."""
        tx = NewTransaction(
            amount=-1,
            date="2026-01-01",
            import_id="TG:1:0",
            account_id=ACCOUNT_ID,
            cleared=ClearedStatus.UNCLEARED,
        )

        assert any("cleared" in e for e in validate_new_transaction(tx))

    def test_long_payee_only_warns(self, sample_transaction, caplog):
        """Over-long payees are flagged but neither rejected nor truncated."""
        long_name = "X" * (MAX_PAYEE_NAME_LENGTH + 1)
        tx = build_new_transaction(
            replace(sample_transaction, description=long_name), ACCOUNT_ID
        )

        with caplog.at_level(logging.WARNING):
            errors = validate_new_transaction(tx)

        assert errors == []
        assert tx.payee_name == long_name
        assert "payee_name" in caplog.text

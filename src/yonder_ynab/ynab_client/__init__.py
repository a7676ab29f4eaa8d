"""
YNAB API Client.

Provides:
- List accounts of a budget (GET /budgets/{budget_id}/accounts)
- Bulk create transactions (POST /budgets/{budget_id}/transactions)

Treats YNAB errors as loud failures carrying YNAB's own error detail.
"""

from .client import (
    SaveTransactionsResult,
    YnabAccount,
    YnabAPIError,
    YnabClient,
    YnabConnectionError,
    YnabError,
)

__all__ = [
    "YnabClient",
    "YnabError",
    "YnabAPIError",
    "YnabConnectionError",
    "YnabAccount",
    "SaveTransactionsResult",
]

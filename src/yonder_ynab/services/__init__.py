"""Import services."""

from yonder_ynab.services.yonder_import import (
    PIPELINE_ERRORS,
    ImportResult,
    TransactionLedger,
    YonderImportError,
    YonderImportService,
    import_yonder_csv,
)

__all__ = [
    "PIPELINE_ERRORS",
    "ImportResult",
    "TransactionLedger",
    "YonderImportError",
    "YonderImportService",
    "import_yonder_csv",
]

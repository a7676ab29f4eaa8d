"""
SSOT (Single Source of Truth) schemas for the pipeline.

These canonical schemas are the ONLY models used across all modules:
the Yonder CSV input, the import_id dedupe key and the YNAB payload.
"""

from .dedupe import (
    IMPORT_ID_PREFIX,
    IMPORT_ID_SEPARATOR,
    MAX_IMPORT_ID_LENGTH,
    ImportIdComponents,
    format_amount,
    generate_import_id,
    parse_import_id,
)
from .ynab_payload import (
    ClearedStatus,
    NewTransaction,
    PostTransactionsWrapper,
    build_new_transaction,
    to_milliunits,
    validate_new_transaction,
)
from .yonder_csv import (
    EXPECTED_COLUMNS,
    YonderCSVError,
    YonderTransaction,
    YonderTransactionKind,
    parse_yonder_csv,
)

__all__ = [
    # Yonder CSV (canonical input schema)
    "EXPECTED_COLUMNS",
    "YonderCSVError",
    "YonderTransaction",
    "YonderTransactionKind",
    "parse_yonder_csv",
    # YNAB payload (canonical output schema)
    "ClearedStatus",
    "NewTransaction",
    "PostTransactionsWrapper",
    "build_new_transaction",
    "to_milliunits",
    "validate_new_transaction",
    # Dedupe
    "IMPORT_ID_PREFIX",
    "IMPORT_ID_SEPARATOR",
    "MAX_IMPORT_ID_LENGTH",
    "ImportIdComponents",
    "format_amount",
    "generate_import_id",
    "parse_import_id",
]

"""
Yonder CSV → YNAB Import

A deterministic pipeline that turns Yonder bank CSV exports, delivered via a
Telegram bot or an HTTP upload, into YNAB transactions with import-id based
deduplication.
"""

__version__ = "0.1.0"

"""
CLI runner module.

Provides commands:
- import: Import a local Yonder CSV file
- accounts: List YNAB accounts
- serve: Run the web server (upload endpoint + Telegram webhook)
- init-config: Write a default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]

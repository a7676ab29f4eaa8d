"""
CLI main entry point.
"""

import argparse
import logging
import sys
from pathlib import Path

from ..config import Config, ConfigValidationError, create_default_config, load_config
from ..schemas.ynab_payload import PostTransactionsWrapper
from ..services.yonder_import import PIPELINE_ERRORS, YonderImportService
from ..ynab_client import YnabClient, YnabError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="yonder-ynab",
        description="Import Yonder CSV exports into YNAB",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # import command
    import_parser = subparsers.add_parser("import", help="Import a Yonder CSV file into YNAB")
    import_parser.add_argument(
        "file",
        type=Path,
        help="Yonder CSV export",
    )
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the YNAB payload without submitting it",
    )

    # accounts command
    subparsers.add_parser("accounts", help="List accounts of the configured YNAB budget")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve", help="Run the web server (CSV upload endpoint and Telegram webhook)"
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the web server (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for the web server (default: 8080)",
    )

    # init-config command
    subparsers.add_parser("init-config", help="Write a default config file")

    return parser


def _check_config(config: Config) -> bool:
    try:
        config.ensure_valid()
    except ConfigValidationError as e:
        print(f"❌ Invalid configuration: {e}")
        return False
    return True


def cmd_import(config: Config, file: Path, dry_run: bool = False) -> int:
    """Import a local Yonder CSV file."""
    if not _check_config(config):
        return 1

    try:
        data = file.read_bytes()
    except OSError as e:
        print(f"❌ Cannot read {file}: {e}")
        return 1

    service = YonderImportService.from_config(config, YnabClient.from_config(config))

    try:
        transactions = service.build_transactions(data)
        if dry_run:
            print(PostTransactionsWrapper(transactions=transactions).to_json())
            print(f"\nℹ️  DRY RUN: {len(transactions)} transaction(s) not submitted")
            return 0
        result = service.submit(transactions)
    except PIPELINE_ERRORS as e:
        print(f"❌ Failed to import transactions:\n\n{e}")
        return 1

    print(result)
    return 0


def cmd_accounts(config: Config) -> int:
    """List YNAB accounts so the account id can be copied into the config."""
    if not config.ynab.api_key:
        print("❌ ynab.api_key is required (or set YNAB_API_KEY)")
        return 1

    client = YnabClient.from_config(config)
    try:
        accounts = client.list_accounts(config.ynab.budget_id)
    except YnabError as e:
        print(f"❌ Failed to list accounts: {e}")
        return 1

    print(f"\n📒 Accounts in budget '{config.ynab.budget_id}'")
    print("=" * 40)
    for account in accounts:
        marker = "→" if account.id == config.ynab.account_id else " "
        print(f" {marker} {account.id}  {account.name} ({account.type})")
    print()

    return 0


def cmd_serve(config: Config, host: str = "127.0.0.1", port: int = 8080) -> int:
    """Start the web server."""
    if not _check_config(config):
        return 1

    from ..web.app import run_server

    run_server(config, host=host, port=port)
    return 0


def cmd_init_config(config_path: Path) -> int:
    """Write the default config file."""
    if config_path.exists():
        print(f"❌ {config_path} already exists")
        return 1
    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Route to command
    if parsed.command == "import":
        return cmd_import(config, parsed.file, parsed.dry_run)
    elif parsed.command == "accounts":
        return cmd_accounts(config)
    elif parsed.command == "serve":
        return cmd_serve(config, parsed.host, parsed.port)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

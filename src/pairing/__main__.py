"""appdb pairing file import. Use --help for usage."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from dotenv import load_dotenv

from config.config import AppdbConfig, load_config
from core.logging.context import set_log_context
from core.logging.setup import setup_logging
from pairing.api_client import AppdbApiClient
from pairing.identifiers import ConfigIdentifierProvider
from pairing.importer import ImportResult, PairingImporter
from pairing.progress import ImportState
from pairing.storage import PairingFileStore
from pairing.updates import check_for_update, installation_info

# Project root directory (where .env file is located)
# __main__.py is at src/pairing/__main__.py, so root is 3 levels up
PROJECT_ROOT = Path(__file__).parent.parent.parent

PROGRESS_BAR_WIDTH = 40

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m pairing",
        description="Import the device pairing file from appdb",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Fetch the pairing file into ~/Documents/pairingFile.plist
    python -m pairing import

    # Write somewhere else
    python -m pairing import --documents-dir /var/lib/jit

    # Is there a newer build on appdb?
    python -m pairing check-update

    # Show what the SDK reports about this installation
    python -m pairing info
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.yaml (default: src/config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Console logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write JSON logs to this file",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines on stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Fetch and store the pairing file")
    import_parser.add_argument(
        "--documents-dir",
        type=Path,
        default=None,
        help="Directory for pairingFile.plist (default: storage.documents_dir, "
        "PAIRING_DOCUMENTS_DIR or ~/Documents)",
    )
    import_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Don't draw the progress bar",
    )

    subparsers.add_parser("check-update", help="Check appdb for a newer build")
    subparsers.add_parser("info", help="Print installation details as JSON")

    return parser.parse_args(argv)


class ProgressPrinter:
    """Draws ImportState.import_progress as a text bar."""

    def __init__(self, stream: TextIO, width: int = PROGRESS_BAR_WIDTH):
        self.stream = stream
        self.width = width
        self._drawn = False

    def __call__(self, field: str, value: Any) -> None:
        if field == "import_progress":
            filled = int(round(value * self.width))
            bar = "#" * filled + "-" * (self.width - filled)
            self.stream.write(f"\rImporting pairing file [{bar}] {value * 100:5.1f}%")
            self.stream.flush()
            self._drawn = True
        elif field == "is_importing_file" and not value and self._drawn:
            self.stream.write("\n")
            self.stream.flush()
            self._drawn = False


async def run_import(
    config: AppdbConfig,
    documents_dir: Path | None = None,
    show_progress: bool = True,
    progress_stream: TextIO | None = None,
) -> ImportResult:
    provider = ConfigIdentifierProvider(config.sdk)
    store = PairingFileStore(
        documents_dir or config.documents_dir or None,
        filename=config.pairing_filename,
    )
    state = ImportState()
    if show_progress:
        state.subscribe(ProgressPrinter(progress_stream or sys.stderr))

    async with AppdbApiClient(
        base_url=config.api_url,
        timeout_seconds=config.timeout_seconds,
        brand=config.brand,
        lang=config.lang,
    ) as client:
        importer = PairingImporter(
            provider,
            client,
            store,
            state=state,
            progress_step=config.progress_step,
            progress_interval=config.progress_interval_seconds,
        )
        return await importer.import_from_appdb()


def _run_check_update(config: AppdbConfig) -> int:
    status = check_for_update(ConfigIdentifierProvider(config.sdk), store_url=config.store_url)
    if status.available:
        print(f"Update available on appdb: {status.url}")
    else:
        print("App is up to date")
    return 0


def _run_info(config: AppdbConfig) -> int:
    info = installation_info(ConfigIdentifierProvider(config.sdk))
    print(json.dumps(info, indent=2, sort_keys=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv(PROJECT_ROOT / ".env")
    args = parse_args(argv)

    setup_logging(
        name="pairing",
        console_level=getattr(logging, args.log_level),
        json_format=args.json_logs,
        log_file=args.log_file,
    )
    set_log_context(operation=args.command)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration", extra={"error_message": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.command == "check-update":
        return _run_check_update(config)
    if args.command == "info":
        return _run_info(config)

    result = asyncio.run(
        run_import(
            config,
            documents_dir=args.documents_dir,
            show_progress=not args.no_progress,
        )
    )
    if result.success:
        print(f"{result.message}: {result.path}")
        return 0

    print(f"Error: {result.message}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())

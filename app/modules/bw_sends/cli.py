"""Command line entry point for Bitwarden Send creation.

Usage:
  export BW_SESSION=$(bw unlock --raw)     # or export BW_PASSWORD=...
  bw-sends --csv-path ./new-users-passwords.csv --output-csv ./bw-send-links.csv
"""

import argparse
import sys
from typing import List, Optional

from infrastructure.configuration import settings
from infrastructure.logging import configure_logging, get_module_logger
from integrations.bitwarden import BitwardenSession
from modules.bw_sends.core import (
    INPUT_COLUMNS,
    OUTPUT_FIELDS,
    STATUS_FAILED,
    create_sends,
)
from modules.script_support import EXIT_FAILURE, EXIT_OK, run_script
from utils.csv_files import read_rows, write_rows

logger = get_module_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bw-sends",
        description="Create one Bitwarden Send per account in a CSV file.",
    )
    parser.add_argument("--csv-path", required=True)
    parser.add_argument("--output-csv", required=True)
    parser.add_argument("--bw-cli", default=settings.bitwarden.BW_CLI_PATH)
    parser.add_argument(
        "--deletion-days", type=int, default=settings.bitwarden.BW_SEND_DELETION_DAYS
    )
    parser.add_argument(
        "--max-access-count",
        type=int,
        default=settings.bitwarden.BW_SEND_MAX_ACCESS_COUNT,
    )
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("--log-level", default=None)
    return parser


def _run(args: argparse.Namespace) -> int:
    rows = read_rows(args.csv_path, required_columns=INPUT_COLUMNS)
    if not rows:
        logger.info("no_rows_to_process", csv_path=args.csv_path)
        return EXIT_OK

    if args.dry_run:
        create_sends(rows, None, dry_run=True)
        return EXIT_OK

    session = BitwardenSession(
        cli_path=args.bw_cli,
        session_key=settings.bitwarden.BW_SESSION,
        password=settings.bitwarden.BW_PASSWORD,
    )
    with session:
        results = create_sends(
            rows,
            session,
            deletion_days=args.deletion_days,
            max_access_count=args.max_access_count,
        )

    written = write_rows(args.output_csv, OUTPUT_FIELDS, (r.to_row() for r in results))
    failed = sum(1 for r in results if r.status == STATUS_FAILED)
    logger.info(
        "bw_sends_completed",
        output_csv=args.output_csv,
        rows=written,
        failed=failed,
    )
    return EXIT_FAILURE if failed else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level)
    return run_script("bw_sends", lambda: _run(args))


if __name__ == "__main__":
    sys.exit(main())

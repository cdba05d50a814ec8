"""Worker: export the partner ledger (or one partner's breakdown) to CSV.

Usage:
    python -m worker.export_ledger
    python -m worker.export_ledger --status due --sort balance -o due.csv
    python -m worker.export_ledger --partner-id <id>
"""

import argparse
from pathlib import Path

import structlog

from config import Settings, get_settings
from db.connection import get_session
from db.enums import SortColumn, SortDirection, StatusFilter
from partnerledger.services.export import ExportService
from partnerledger.services.schemas.results import ExportResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Export partner balances to CSV",
    )
    parser.add_argument(
        "--partner-id",
        "-p",
        default=None,
        help="Export one partner's client breakdown instead of the partner list",
    )
    parser.add_argument(
        "--status",
        choices=[e.value for e in StatusFilter],
        default=StatusFilter.ALL.value,
        help="Balance filter (default: all)",
    )
    parser.add_argument("--search", "-q", default="", help="Partner name contains")
    parser.add_argument(
        "--sort",
        choices=[e.value for e in SortColumn],
        default=SortColumn.BALANCE.value,
    )
    parser.add_argument(
        "--direction",
        choices=[e.value for e in SortDirection],
        default=SortDirection.DESC.value,
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (auto-generated if omitted)",
    )
    args: argparse.Namespace = parser.parse_args(argv)

    settings: Settings = get_settings()
    logger.info("Starting ledger export", partner_id=args.partner_id, status=args.status)

    with get_session() as session:
        service: ExportService = ExportService(
            session,
            export_dir=settings.export_dir,
            statuses=settings.ledger.status_filter(),
        )
        if args.partner_id:
            result: ExportResult = service.export_partner_csv(args.partner_id, args.output)
        else:
            result = service.export_ledger_csv(
                output_path=args.output,
                search=args.search,
                status=StatusFilter(args.status),
                sort=SortColumn(args.sort),
                direction=SortDirection(args.direction),
            )

    logger.info(
        "Export complete",
        output=str(result.output_path),
        rows=result.row_count,
        partner_share=str(result.total_partner_share),
        balance=str(result.total_balance),
    )

    for warn in result.warnings:
        logger.warning("export_warning", detail=warn)


if __name__ == "__main__":
    main()

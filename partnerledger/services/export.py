"""Export service for CSV / JSON partner ledger reports."""

import csv
import io
from collections.abc import Collection
from datetime import UTC, datetime
from pathlib import Path

import structlog
from sqlalchemy.orm import Session

from db.enums import ExportFormat, SortColumn, SortDirection, StatusFilter
from partnerledger.services._helpers import money_str, now_iso
from partnerledger.services._types import ExportDataDict
from partnerledger.services.errors import ExportError, PartnerNotFoundError
from partnerledger.services.ledger_service import LedgerService
from partnerledger.services.schemas.results import (
    ClientBreakdownLine,
    ExportResult,
    LedgerView,
    PartnerDetail,
    PartnerSummary,
)

logger = structlog.get_logger(__name__)


def _stamp() -> str:
    return datetime.now(UTC).strftime("%Y%m%dT%H%M%S")


def _write_csv(output_path: Path, rows: list[list[object]]) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerows(rows)
    except OSError as e:
        logger.error("export_write_failed", output=str(output_path), error=str(e))
        raise ExportError(f"Could not write export to {output_path}: {e}") from e


class ExportService:
    """Renders the partner ledger and per-partner breakdowns."""

    _PARTNER_COLUMNS = [
        "partner_id",
        "name",
        "clients_count",
        "total_profit",
        "partner_share",
        "owner_share",
        "total_paid",
        "balance",
        "status",
    ]

    _BREAKDOWN_COLUMNS = [
        "client_id",
        "client_name",
        "total_profit",
        "split_partner",
        "split_owner",
        "partner_share",
        "owner_share",
        "override",
        "app_split_applied",
    ]

    def __init__(
        self,
        session: Session,
        export_dir: str | Path = "exports",
        statuses: Collection[str] | None = None,
    ) -> None:
        self.session: Session = session
        self.export_dir: Path = Path(export_dir)
        self.ledger: LedgerService = LedgerService(session, statuses=statuses)

    # ------------------------------------------------------------------
    # Row builders
    # ------------------------------------------------------------------

    @staticmethod
    def _partner_row(s: PartnerSummary) -> dict[str, object]:
        return {
            "partner_id": s.partner_id,
            "name": s.name,
            "clients_count": s.clients_count,
            "total_profit": money_str(s.total_profit),
            "partner_share": money_str(s.partner_share),
            "owner_share": money_str(s.owner_share),
            "total_paid": money_str(s.total_paid),
            "balance": money_str(s.balance),
            "status": s.status.value,
        }

    @staticmethod
    def _breakdown_row(line: ClientBreakdownLine) -> dict[str, object]:
        return {
            "client_id": line.client_id,
            "client_name": line.client_name,
            "total_profit": money_str(line.total_profit),
            "split_partner": str(line.split_partner),
            "split_owner": str(line.split_owner),
            "partner_share": money_str(line.partner_share),
            "owner_share": money_str(line.owner_share),
            "override": line.override,
            "app_split_applied": line.app_split_applied,
        }

    def _detail(self, partner_id: str) -> PartnerDetail:
        detail: PartnerDetail | None = self.ledger.partner_detail(partner_id)
        if detail is None:
            raise PartnerNotFoundError(f"Partner {partner_id} not found")
        return detail

    # ------------------------------------------------------------------
    # CSV export (file-based, for workers)
    # ------------------------------------------------------------------

    def export_ledger_csv(
        self,
        output_path: Path | None = None,
        search: str = "",
        status: StatusFilter = StatusFilter.ALL,
        sort: SortColumn = SortColumn.BALANCE,
        direction: SortDirection = SortDirection.DESC,
    ) -> ExportResult:
        view: LedgerView = self.ledger.ledger_view(search, status, sort, direction)
        if output_path is None:
            output_path = self.export_dir / f"partner_ledger_{_stamp()}.csv"

        warnings: list[str] = []
        advance: int = sum(1 for s in view.rows if s.balance < 0)
        if advance:
            warnings.append(f"{advance} partners have been paid in advance")

        lines: list[list[object]] = [
            ["# Partner Ledger Export"],
            [f"# Generated: {now_iso()}"],
            [f"# Filter: status={status.value} search={search or '-'}"],
            [],
            list(self._PARTNER_COLUMNS),
        ]
        for s in view.rows:
            row: dict[str, object] = self._partner_row(s)
            lines.append([row[c] for c in self._PARTNER_COLUMNS])
        lines.append([])
        lines.append(
            [
                "TOTAL",
                "",
                view.totals.clients_count,
                money_str(view.totals.total_profit),
                money_str(view.totals.partner_share),
                money_str(view.totals.owner_share),
                money_str(view.totals.total_paid),
                money_str(view.totals.balance),
                "",
            ]
        )
        _write_csv(output_path, lines)

        logger.info("ledger_exported", output=str(output_path), rows=len(view.rows))
        return ExportResult(
            output_path=output_path,
            row_count=len(view.rows),
            total_partner_share=view.totals.partner_share,
            total_balance=view.totals.balance,
            warnings=warnings,
        )

    def export_partner_csv(self, partner_id: str, output_path: Path | None = None) -> ExportResult:
        detail: PartnerDetail = self._detail(partner_id)
        if output_path is None:
            output_path = self.export_dir / f"partner_{partner_id}_{_stamp()}.csv"

        lines: list[list[object]] = [
            ["# Partner Breakdown Export"],
            [f"# Partner: {detail.partner.name} ({detail.partner.id})"],
            [f"# Generated: {now_iso()}"],
            [],
            list(self._BREAKDOWN_COLUMNS),
        ]
        for line in detail.breakdown:
            row: dict[str, object] = self._breakdown_row(line)
            lines.append([row[c] for c in self._BREAKDOWN_COLUMNS])
        lines += [
            [],
            ["# Summary"],
            ["Field", "Value"],
            ["Total Profit", money_str(detail.balance.total_profit)],
            ["Partner Share", money_str(detail.balance.partner_share)],
            ["Owner Share", money_str(detail.balance.owner_share)],
            ["Total Paid", money_str(detail.balance.total_paid)],
            ["Balance", money_str(detail.balance.balance)],
            ["Status", detail.status.value],
        ]
        _write_csv(output_path, lines)

        return ExportResult(
            output_path=output_path,
            row_count=len(detail.breakdown),
            total_partner_share=detail.balance.partner_share,
            total_balance=detail.balance.balance,
            warnings=[],
        )

    # ------------------------------------------------------------------
    # Route-facing methods
    # ------------------------------------------------------------------

    @staticmethod
    def _render(rows: list[dict[str, object]], columns: list[str], fmt: ExportFormat) -> ExportDataDict:
        if fmt == ExportFormat.CSV:
            buf = io.StringIO()
            writer = csv.DictWriter(buf, fieldnames=columns)
            writer.writeheader()
            writer.writerows(rows)
            return {"format": "csv", "content": buf.getvalue(), "record_count": len(rows)}
        return {"format": "json", "data": rows, "record_count": len(rows)}

    def generate_export(
        self,
        fmt: ExportFormat = ExportFormat.CSV,
        search: str = "",
        status: StatusFilter = StatusFilter.ALL,
    ) -> ExportDataDict:
        view: LedgerView = self.ledger.ledger_view(search, status)
        rows: list[dict[str, object]] = [self._partner_row(s) for s in view.rows]
        return self._render(rows, self._PARTNER_COLUMNS, fmt)

    def generate_partner_export(
        self, partner_id: str, fmt: ExportFormat = ExportFormat.CSV
    ) -> ExportDataDict:
        detail: PartnerDetail = self._detail(partner_id)
        rows: list[dict[str, object]] = [self._breakdown_row(line) for line in detail.breakdown]
        return self._render(rows, self._BREAKDOWN_COLUMNS, fmt)

"""Result dataclasses returned by ledger operations."""

from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path

from db.enums import BalanceStatus, SortColumn, SortDirection
from partnerledger.services.schemas.records import Partner


@dataclass(frozen=True)
class ClientBreakdownLine:
    client_id: str
    client_name: str
    total_profit: Decimal
    split_partner: Decimal
    split_owner: Decimal
    partner_share: Decimal
    owner_share: Decimal
    override: bool
    app_split_applied: bool = False


@dataclass(frozen=True)
class PartnerBalance:
    partner_id: str
    total_profit: Decimal
    partner_share: Decimal
    owner_share: Decimal
    total_paid: Decimal
    balance: Decimal


@dataclass(frozen=True)
class PartnerSummary:
    partner_id: str
    name: str
    clients_count: int
    total_profit: Decimal
    partner_share: Decimal
    owner_share: Decimal
    total_paid: Decimal
    balance: Decimal
    status: BalanceStatus


@dataclass(frozen=True)
class LedgerTotals:
    partners: int
    clients_count: int
    total_profit: Decimal
    partner_share: Decimal
    owner_share: Decimal
    total_paid: Decimal
    balance: Decimal


@dataclass(frozen=True)
class SortState:
    column: SortColumn = SortColumn.BALANCE
    direction: SortDirection = SortDirection.DESC

    def toggle(self, column: SortColumn) -> "SortState":
        """Clicking the active column flips direction; a new column starts descending."""
        if column == self.column:
            flipped: SortDirection = (
                SortDirection.ASC if self.direction == SortDirection.DESC else SortDirection.DESC
            )
            return replace(self, direction=flipped)
        return SortState(column=column, direction=SortDirection.DESC)


@dataclass(frozen=True)
class LedgerView:
    rows: list[PartnerSummary]
    totals: LedgerTotals
    sort: SortState


@dataclass(frozen=True)
class MonthlyPoint:
    month: str
    amount: Decimal


@dataclass(frozen=True)
class PaymentHistoryItem:
    id: str
    amount: Decimal
    note: str | None
    paid_at: str


@dataclass(frozen=True)
class PartnerDetail:
    partner: Partner
    balance: PartnerBalance
    status: BalanceStatus
    breakdown: list[ClientBreakdownLine]
    monthly: list[MonthlyPoint]
    payments: list[PaymentHistoryItem]


@dataclass(frozen=True)
class AutoAssignOutcome:
    client_id: str
    client_name: str
    partner_id: str
    partner_name: str
    assigned: bool


@dataclass
class AutoAssignResult:
    run_id: str
    outcomes: list[AutoAssignOutcome]

    @property
    def assigned_count(self) -> int:
        return sum(1 for o in self.outcomes if o.assigned)

    @property
    def total_count(self) -> int:
        return len(self.outcomes)

    @property
    def message(self) -> str:
        return (
            f"Check completed. {self.assigned_count} of {self.total_count} "
            "clients assigned to partners."
        )


@dataclass
class ExportResult:
    output_path: Path
    row_count: int
    total_partner_share: Decimal
    total_balance: Decimal
    warnings: list[str]

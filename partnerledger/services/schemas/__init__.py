"""Shared dataclasses for partner ledger services."""

from partnerledger.services.schemas.records import (
    AppSplit,
    Assignment,
    Partner,
    Payment,
    ProfitRecord,
    Snapshot,
    SplitPair,
)
from partnerledger.services.schemas.results import (
    AutoAssignOutcome,
    AutoAssignResult,
    ClientBreakdownLine,
    ExportResult,
    LedgerTotals,
    LedgerView,
    MonthlyPoint,
    PartnerBalance,
    PartnerDetail,
    PartnerSummary,
    PaymentHistoryItem,
    SortState,
)

__all__ = [
    # Snapshot records
    "AppSplit",
    "Assignment",
    "Partner",
    "Payment",
    "ProfitRecord",
    "Snapshot",
    "SplitPair",
    # Result schemas
    "AutoAssignOutcome",
    "AutoAssignResult",
    "ClientBreakdownLine",
    "ExportResult",
    "LedgerTotals",
    "LedgerView",
    "MonthlyPoint",
    "PartnerBalance",
    "PartnerDetail",
    "PartnerSummary",
    "PaymentHistoryItem",
    "SortState",
]

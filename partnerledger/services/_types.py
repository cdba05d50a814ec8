"""Typed dicts for service-layer return values.

Keeps route-facing methods explicit about their shape instead of returning bare dicts.
Money is rendered as a string rounded to cents; split fractions as plain decimal strings.
"""

from typing import TypedDict

# -- Partner editors -------------------------------------------------------


class PartnerDict(TypedDict):
    id: str
    name: str
    default_split_partner: str
    default_split_owner: str
    contact_info: str | None
    notes: str | None
    created_at: str


class AssignmentDict(TypedDict):
    id: str
    client_id: str
    partner_id: str
    split_partner_override: str | None
    split_owner_override: str | None
    notes: str | None
    assigned_at: str


class PaymentDict(TypedDict):
    id: str
    partner_id: str
    amount: str
    note: str | None
    paid_at: str


class AppSplitDict(TypedDict):
    id: str
    partner_id: str
    app_id: str
    split_partner: str
    split_owner: str
    notes: str | None


# -- Ledger ----------------------------------------------------------------


class BreakdownLineDict(TypedDict):
    client_id: str
    client_name: str
    total_profit: str
    split_partner: str
    split_owner: str
    partner_share: str
    owner_share: str
    override: bool
    app_split_applied: bool


class PartnerBalanceDict(TypedDict):
    partner_id: str
    total_profit: str
    partner_share: str
    owner_share: str
    total_paid: str
    balance: str


class PartnerSummaryDict(TypedDict):
    partner_id: str
    name: str
    clients_count: int
    total_profit: str
    partner_share: str
    owner_share: str
    total_paid: str
    balance: str
    status: str


class LedgerTotalsDict(TypedDict):
    partners: int
    clients_count: int
    total_profit: str
    partner_share: str
    owner_share: str
    total_paid: str
    balance: str


class LedgerViewDict(TypedDict):
    rows: list[PartnerSummaryDict]
    totals: LedgerTotalsDict
    sort: str
    direction: str


class MonthlyPointDict(TypedDict):
    month: str
    amount: str


class PaymentHistoryDict(TypedDict):
    id: str
    amount: str
    note: str | None
    paid_at: str


class PartnerDetailDict(TypedDict):
    partner: PartnerDict
    balance: PartnerBalanceDict
    status: str
    breakdown: list[BreakdownLineDict]
    monthly: list[MonthlyPointDict]
    payments: list[PaymentHistoryDict]


# -- Auto-assignment -------------------------------------------------------


class AutoAssignOutcomeDict(TypedDict):
    client_id: str
    client_name: str
    partner_id: str
    partner_name: str
    assigned: bool


class AutoAssignDict(TypedDict):
    run_id: str
    assigned_count: int
    total_count: int
    message: str
    outcomes: list[AutoAssignOutcomeDict]


# -- Export ----------------------------------------------------------------


class ExportDataDict(TypedDict, total=False):
    format: str
    content: str
    data: list[dict[str, object]]
    record_count: int


# -- Health ----------------------------------------------------------------


class DbInfoDict(TypedDict, total=False):
    backend_type: str
    database_url_or_path: str | None
    tables_present: list[str]
    schema_initialized: bool
    pid: int
    error: str

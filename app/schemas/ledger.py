"""Partner ledger schemas."""

from app.schemas.common import CamelModel
from app.schemas.partners import PartnerResponse


class PartnerSummaryResponse(CamelModel):
    partner_id: str
    name: str
    clients_count: int
    total_profit: str
    partner_share: str
    owner_share: str
    total_paid: str
    balance: str
    status: str


class LedgerTotalsResponse(CamelModel):
    partners: int
    clients_count: int
    total_profit: str
    partner_share: str
    owner_share: str
    total_paid: str
    balance: str


class LedgerViewResponse(CamelModel):
    rows: list[PartnerSummaryResponse]
    totals: LedgerTotalsResponse
    sort: str
    direction: str


class BreakdownLineResponse(CamelModel):
    client_id: str
    client_name: str
    total_profit: str
    split_partner: str
    split_owner: str
    partner_share: str
    owner_share: str
    override: bool
    app_split_applied: bool


class PartnerBalanceResponse(CamelModel):
    partner_id: str
    total_profit: str
    partner_share: str
    owner_share: str
    total_paid: str
    balance: str


class MonthlyPointResponse(CamelModel):
    month: str
    amount: str


class PaymentHistoryResponse(CamelModel):
    id: str
    amount: str
    note: str | None
    paid_at: str


class PartnerDetailResponse(CamelModel):
    partner: PartnerResponse
    balance: PartnerBalanceResponse
    status: str
    breakdown: list[BreakdownLineResponse]
    monthly: list[MonthlyPointResponse]
    payments: list[PaymentHistoryResponse]

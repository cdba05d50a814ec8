"""Partner balance: aggregate share netted against payments."""

from collections.abc import Collection, Iterable
from decimal import Decimal

from db.enums import BalanceStatus
from partnerledger.services._helpers import ZERO, sum_decimals, to_decimal
from partnerledger.services.breakdown import build_breakdown
from partnerledger.services.schemas.records import (
    AppSplit,
    Assignment,
    Partner,
    Payment,
    ProfitRecord,
)
from partnerledger.services.schemas.results import (
    ClientBreakdownLine,
    PartnerBalance,
    PaymentHistoryItem,
)


def classify_balance(balance: Decimal) -> BalanceStatus:
    """Positive: partner is owed. Negative: partner was paid in advance."""
    if balance > 0:
        return BalanceStatus.DUE
    if balance < 0:
        return BalanceStatus.ADVANCE
    return BalanceStatus.SETTLED


def total_paid(partner_id: str, payments: Iterable[Payment]) -> Decimal:
    return sum_decimals(to_decimal(p.amount) for p in payments if p.partner_id == partner_id)


def balance_from_breakdown(
    partner_id: str,
    breakdown: Iterable[ClientBreakdownLine],
    payments: Iterable[Payment],
) -> PartnerBalance:
    lines: list[ClientBreakdownLine] = list(breakdown)
    partner_share: Decimal = sum_decimals(line.partner_share for line in lines)
    owner_share: Decimal = sum_decimals(line.owner_share for line in lines)
    total_profit: Decimal = sum_decimals(line.total_profit for line in lines)
    paid: Decimal = total_paid(partner_id, payments)
    return PartnerBalance(
        partner_id=partner_id,
        total_profit=total_profit,
        partner_share=partner_share,
        owner_share=owner_share,
        total_paid=paid,
        balance=partner_share - paid,
    )


def calculate_balance(
    partner: Partner,
    assignments: Iterable[Assignment],
    profit_records: Iterable[ProfitRecord],
    payments: Iterable[Payment],
    *,
    app_splits: Iterable[AppSplit] = (),
    statuses: Collection[str] | None = None,
) -> PartnerBalance:
    """Balance for one partner. Payments to other partners are ignored."""
    breakdown: list[ClientBreakdownLine] = build_breakdown(
        partner,
        assignments,
        profit_records,
        app_splits=app_splits,
        statuses=statuses,
    )
    return balance_from_breakdown(partner.id, breakdown, payments)


def payment_history(partner_id: str, payments: Iterable[Payment]) -> list[PaymentHistoryItem]:
    """Payments to the partner, newest first."""
    own: list[Payment] = [p for p in payments if p.partner_id == partner_id]
    own.sort(key=lambda p: p.paid_at or "", reverse=True)
    return [
        PaymentHistoryItem(id=p.id, amount=to_decimal(p.amount), note=p.note, paid_at=p.paid_at)
        for p in own
    ]

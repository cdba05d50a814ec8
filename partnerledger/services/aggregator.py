"""Cross-partner ledger view: summaries, filters, sort and totals."""

from collections.abc import Callable, Collection, Iterable
from decimal import Decimal

import structlog

from db.enums import SortColumn, SortDirection, StatusFilter
from partnerledger.services._helpers import sum_decimals
from partnerledger.services.balance import (
    balance_from_breakdown,
    classify_balance,
    payment_history,
)
from partnerledger.services.breakdown import build_breakdown, build_monthly_series
from partnerledger.services.schemas.records import Partner, Snapshot
from partnerledger.services.schemas.results import (
    ClientBreakdownLine,
    LedgerTotals,
    LedgerView,
    PartnerBalance,
    PartnerDetail,
    PartnerSummary,
    SortState,
)

logger = structlog.get_logger(__name__)

_STATUS_PREDICATES: dict[StatusFilter, Callable[[Decimal], bool]] = {
    StatusFilter.ALL: lambda b: True,
    StatusFilter.DUE: lambda b: b > 0,
    StatusFilter.SETTLED: lambda b: b == 0,
    StatusFilter.NEGATIVE: lambda b: b < 0,
    StatusFilter.ADVANCE: lambda b: b < 0,
}


def summarize_partner(
    partner: Partner,
    snapshot: Snapshot,
    statuses: Collection[str] | None = None,
) -> PartnerSummary:
    breakdown: list[ClientBreakdownLine] = build_breakdown(
        partner,
        snapshot.assignments,
        snapshot.profit_records,
        app_splits=snapshot.app_splits,
        statuses=statuses,
    )
    bal: PartnerBalance = balance_from_breakdown(partner.id, breakdown, snapshot.payments)
    return PartnerSummary(
        partner_id=partner.id,
        name=partner.name,
        clients_count=len(breakdown),
        total_profit=bal.total_profit,
        partner_share=bal.partner_share,
        owner_share=bal.owner_share,
        total_paid=bal.total_paid,
        balance=bal.balance,
        status=classify_balance(bal.balance),
    )


def summarize_partners(
    snapshot: Snapshot,
    *,
    statuses: Collection[str] | None = None,
) -> list[PartnerSummary]:
    return [summarize_partner(p, snapshot, statuses) for p in snapshot.partners]


def filter_summaries(
    summaries: Iterable[PartnerSummary],
    *,
    search: str = "",
    status: StatusFilter = StatusFilter.ALL,
) -> list[PartnerSummary]:
    """Case-insensitive name search combined with a balance-sign filter."""
    needle: str = (search or "").strip().lower()
    keep: Callable[[Decimal], bool] = _STATUS_PREDICATES[status]
    return [
        s
        for s in summaries
        if (not needle or needle in s.name.lower()) and keep(s.balance)
    ]


def _sort_key(column: SortColumn) -> Callable[[PartnerSummary], object]:
    if column == SortColumn.NAME:
        return lambda s: s.name.lower()
    return lambda s: getattr(s, column.value)


def sort_summaries(
    summaries: Iterable[PartnerSummary],
    sort: SortState | None = None,
) -> list[PartnerSummary]:
    """Stable sort; ties keep their incoming order."""
    state: SortState = sort or SortState()
    return sorted(
        summaries,
        key=_sort_key(state.column),
        reverse=state.direction == SortDirection.DESC,
    )


def compute_totals(summaries: Iterable[PartnerSummary]) -> LedgerTotals:
    rows: list[PartnerSummary] = list(summaries)
    return LedgerTotals(
        partners=len(rows),
        clients_count=sum(s.clients_count for s in rows),
        total_profit=sum_decimals(s.total_profit for s in rows),
        partner_share=sum_decimals(s.partner_share for s in rows),
        owner_share=sum_decimals(s.owner_share for s in rows),
        total_paid=sum_decimals(s.total_paid for s in rows),
        balance=sum_decimals(s.balance for s in rows),
    )


def build_ledger_view(
    snapshot: Snapshot,
    *,
    search: str = "",
    status: StatusFilter = StatusFilter.ALL,
    sort: SortState | None = None,
    statuses: Collection[str] | None = None,
) -> LedgerView:
    """Full recomputation of the partner list from ``snapshot``."""
    state: SortState = sort or SortState()
    summaries: list[PartnerSummary] = summarize_partners(snapshot, statuses=statuses)
    filtered: list[PartnerSummary] = filter_summaries(summaries, search=search, status=status)
    logger.debug(
        "ledger_view_built",
        partners=len(summaries),
        shown=len(filtered),
        status=status.value,
        sort=state.column.value,
        direction=state.direction.value,
    )
    return LedgerView(
        rows=sort_summaries(filtered, state),
        totals=compute_totals(filtered),
        sort=state,
    )


def build_partner_detail(
    snapshot: Snapshot,
    partner_id: str,
    *,
    statuses: Collection[str] | None = None,
) -> PartnerDetail | None:
    partner: Partner | None = snapshot.partner(partner_id)
    if partner is None:
        return None
    breakdown: list[ClientBreakdownLine] = build_breakdown(
        partner,
        snapshot.assignments,
        snapshot.profit_records,
        app_splits=snapshot.app_splits,
        statuses=statuses,
    )
    bal: PartnerBalance = balance_from_breakdown(partner.id, breakdown, snapshot.payments)
    return PartnerDetail(
        partner=partner,
        balance=bal,
        status=classify_balance(bal.balance),
        breakdown=breakdown,
        monthly=build_monthly_series(
            partner,
            snapshot.assignments,
            snapshot.profit_records,
            app_splits=snapshot.app_splits,
            statuses=statuses,
        ),
        payments=payment_history(partner.id, snapshot.payments),
    )

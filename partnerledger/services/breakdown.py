"""Per-client breakdown of a partner's profit shares."""

from collections import defaultdict
from collections.abc import Collection, Iterable, Sequence
from decimal import Decimal

from db.enums import SplitSource
from partnerledger.services._helpers import ZERO, to_decimal
from partnerledger.services.schemas.records import (
    AppSplit,
    Assignment,
    Partner,
    ProfitRecord,
    SplitPair,
)
from partnerledger.services.schemas.results import ClientBreakdownLine, MonthlyPoint
from partnerledger.services.splits import index_app_splits, resolve_record_split, resolve_split


def filter_assignments_by_partner(
    assignments: Iterable[Assignment] | None, partner_id: str
) -> list[Assignment]:
    if not assignments:
        return []
    return [a for a in assignments if a.partner_id == partner_id]


def _contributes(record: ProfitRecord, statuses: frozenset[str] | None) -> bool:
    if statuses is None:
        return True
    return (record.status or "").lower() in statuses


def group_records_by_client(
    profit_records: Iterable[ProfitRecord],
    statuses: Collection[str] | None = None,
) -> dict[str, list[ProfitRecord]]:
    """client_id -> contributing records, in input order.

    Status matching is case-insensitive on both sides.
    """
    wanted: frozenset[str] | None = (
        None if statuses is None else frozenset(s.lower() for s in statuses)
    )
    grouped: defaultdict[str, list[ProfitRecord]] = defaultdict(list)
    for record in profit_records:
        if _contributes(record, wanted):
            grouped[record.client_id].append(record)
    return dict(grouped)


def _build_line(
    partner: Partner,
    assignment: Assignment,
    records: Sequence[ProfitRecord],
    app_splits: dict[str, SplitPair],
) -> ClientBreakdownLine:
    base: SplitPair = resolve_split(assignment, partner)
    total_profit: Decimal = ZERO
    partner_share: Decimal = ZERO
    owner_share: Decimal = ZERO
    app_split_applied: bool = False

    for record in records:
        profit: Decimal = to_decimal(record.profit)
        split, source = resolve_record_split(record, assignment, partner, app_splits)
        if source == SplitSource.APP:
            app_split_applied = True
        total_profit += profit
        partner_share += profit * split.partner
        owner_share += profit * split.owner

    split_partner: Decimal = base.partner
    split_owner: Decimal = base.owner
    # Mixed splits: report the profit-weighted average.
    if app_split_applied and total_profit != 0:
        split_partner = partner_share / total_profit
        split_owner = owner_share / total_profit

    return ClientBreakdownLine(
        client_id=assignment.client_id,
        client_name=assignment.client_name,
        total_profit=total_profit,
        split_partner=split_partner,
        split_owner=split_owner,
        partner_share=partner_share,
        owner_share=owner_share,
        override=assignment.override is not None,
        app_split_applied=app_split_applied,
    )


def build_breakdown(
    partner: Partner,
    assignments: Iterable[Assignment],
    profit_records: Iterable[ProfitRecord],
    *,
    app_splits: Iterable[AppSplit] = (),
    statuses: Collection[str] | None = None,
) -> list[ClientBreakdownLine]:
    """One line per assignment of ``partner``, in assignment order.

    ``statuses`` restricts which profit records count; ``None`` counts all.
    """
    split_index: dict[str, SplitPair] = index_app_splits(partner, app_splits)
    by_client: dict[str, list[ProfitRecord]] = group_records_by_client(profit_records, statuses)
    return [
        _build_line(partner, assignment, by_client.get(assignment.client_id, []), split_index)
        for assignment in filter_assignments_by_partner(assignments, partner.id)
    ]


def build_monthly_series(
    partner: Partner,
    assignments: Iterable[Assignment],
    profit_records: Iterable[ProfitRecord],
    *,
    app_splits: Iterable[AppSplit] = (),
    statuses: Collection[str] | None = None,
) -> list[MonthlyPoint]:
    """Partner share per calendar month, by completion date (else creation date)."""
    split_index: dict[str, SplitPair] = index_app_splits(partner, app_splits)
    by_client: dict[str, list[ProfitRecord]] = group_records_by_client(profit_records, statuses)
    monthly: defaultdict[str, Decimal] = defaultdict(lambda: ZERO)

    for assignment in filter_assignments_by_partner(assignments, partner.id):
        for record in by_client.get(assignment.client_id, []):
            raw_date: str = record.completed_at or record.created_at or ""
            if not raw_date:
                continue
            split, _ = resolve_record_split(record, assignment, partner, split_index)
            monthly[raw_date[:7]] += to_decimal(record.profit) * split.partner

    return [MonthlyPoint(month=m, amount=monthly[m]) for m in sorted(monthly)]

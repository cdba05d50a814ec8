"""Route-facing ledger reads: load a snapshot, recompute, serialize."""

from collections.abc import Collection

from sqlalchemy.orm import Session

from db.enums import SortColumn, SortDirection, StatusFilter
from partnerledger.services._helpers import money_str
from partnerledger.services._types import (
    BreakdownLineDict,
    LedgerTotalsDict,
    LedgerViewDict,
    MonthlyPointDict,
    PartnerBalanceDict,
    PartnerDetailDict,
    PartnerDict,
    PartnerSummaryDict,
    PaymentHistoryDict,
)
from partnerledger.services.aggregator import build_ledger_view, build_partner_detail
from partnerledger.services.schemas.records import Partner, Snapshot
from partnerledger.services.schemas.results import (
    ClientBreakdownLine,
    LedgerView,
    PartnerBalance,
    PartnerDetail,
    PartnerSummary,
    SortState,
)
from partnerledger.services.snapshot import SnapshotRepository


def summary_dict(s: PartnerSummary) -> PartnerSummaryDict:
    return PartnerSummaryDict(
        partner_id=s.partner_id,
        name=s.name,
        clients_count=s.clients_count,
        total_profit=money_str(s.total_profit),
        partner_share=money_str(s.partner_share),
        owner_share=money_str(s.owner_share),
        total_paid=money_str(s.total_paid),
        balance=money_str(s.balance),
        status=s.status.value,
    )


def breakdown_line_dict(line: ClientBreakdownLine) -> BreakdownLineDict:
    return BreakdownLineDict(
        client_id=line.client_id,
        client_name=line.client_name,
        total_profit=money_str(line.total_profit),
        split_partner=str(line.split_partner),
        split_owner=str(line.split_owner),
        partner_share=money_str(line.partner_share),
        owner_share=money_str(line.owner_share),
        override=line.override,
        app_split_applied=line.app_split_applied,
    )


def balance_dict(b: PartnerBalance) -> PartnerBalanceDict:
    return PartnerBalanceDict(
        partner_id=b.partner_id,
        total_profit=money_str(b.total_profit),
        partner_share=money_str(b.partner_share),
        owner_share=money_str(b.owner_share),
        total_paid=money_str(b.total_paid),
        balance=money_str(b.balance),
    )


def _partner_dict(p: Partner) -> PartnerDict:
    return PartnerDict(
        id=p.id,
        name=p.name,
        default_split_partner=str(p.default_split.partner),
        default_split_owner=str(p.default_split.owner),
        contact_info=p.contact_info,
        notes=p.notes,
        created_at=p.created_at or "",
    )


class LedgerService:
    """Recomputes the ledger from a fresh snapshot on every call."""

    def __init__(self, session: Session, statuses: Collection[str] | None = None) -> None:
        self.session: Session = session
        self.statuses: Collection[str] | None = statuses

    def snapshot(self) -> Snapshot:
        return SnapshotRepository(self.session).load()

    def ledger_view(
        self,
        search: str = "",
        status: StatusFilter = StatusFilter.ALL,
        sort: SortColumn = SortColumn.BALANCE,
        direction: SortDirection = SortDirection.DESC,
    ) -> LedgerView:
        return build_ledger_view(
            self.snapshot(),
            search=search,
            status=status,
            sort=SortState(column=sort, direction=direction),
            statuses=self.statuses,
        )

    def partner_detail(self, partner_id: str) -> PartnerDetail | None:
        return build_partner_detail(self.snapshot(), partner_id, statuses=self.statuses)

    # ------------------------------------------------------------------
    # Route-facing methods
    # ------------------------------------------------------------------

    def get_ledger_view(
        self,
        search: str = "",
        status: StatusFilter = StatusFilter.ALL,
        sort: SortColumn = SortColumn.BALANCE,
        direction: SortDirection = SortDirection.DESC,
    ) -> LedgerViewDict:
        view: LedgerView = self.ledger_view(search, status, sort, direction)
        return LedgerViewDict(
            rows=[summary_dict(s) for s in view.rows],
            totals=LedgerTotalsDict(
                partners=view.totals.partners,
                clients_count=view.totals.clients_count,
                total_profit=money_str(view.totals.total_profit),
                partner_share=money_str(view.totals.partner_share),
                owner_share=money_str(view.totals.owner_share),
                total_paid=money_str(view.totals.total_paid),
                balance=money_str(view.totals.balance),
            ),
            sort=view.sort.column.value,
            direction=view.sort.direction.value,
        )

    def get_partner_detail(self, partner_id: str) -> PartnerDetailDict | None:
        detail: PartnerDetail | None = self.partner_detail(partner_id)
        if detail is None:
            return None
        return PartnerDetailDict(
            partner=_partner_dict(detail.partner),
            balance=balance_dict(detail.balance),
            status=detail.status.value,
            breakdown=[breakdown_line_dict(line) for line in detail.breakdown],
            monthly=[MonthlyPointDict(month=m.month, amount=money_str(m.amount)) for m in detail.monthly],
            payments=[
                PaymentHistoryDict(
                    id=p.id,
                    amount=money_str(p.amount),
                    note=p.note,
                    paid_at=p.paid_at,
                )
                for p in detail.payments
            ],
        )

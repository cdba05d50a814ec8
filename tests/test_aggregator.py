"""Tests for partnerledger.services.aggregator."""

import random
from decimal import Decimal

from db.enums import BalanceStatus, SortColumn, SortDirection, StatusFilter
from partnerledger.services.aggregator import (
    build_ledger_view,
    build_partner_detail,
    compute_totals,
    filter_summaries,
    sort_summaries,
    summarize_partners,
)
from partnerledger.services.ledger_service import summary_dict
from partnerledger.services.schemas.records import (
    Assignment,
    Partner,
    Payment,
    ProfitRecord,
    Snapshot,
    SplitPair,
)
from partnerledger.services.schemas.results import (
    LedgerView,
    PartnerDetail,
    PartnerSummary,
    SortState,
)


def _partner(pid: str, name: str, partner: str, owner: str) -> Partner:
    return Partner(id=pid, name=name, default_split=SplitPair(Decimal(partner), Decimal(owner)))


def _snapshot() -> Snapshot:
    """Three partners: Alpha settled, Bravo due, Charlie in advance."""
    return Snapshot(
        partners=(
            _partner("p", "Alpha", "0.30", "0.70"),
            _partner("q", "Bravo", "0.40", "0.60"),
            _partner("r", "charlie", "0.20", "0.80"),
        ),
        assignments=(
            Assignment(id="a1", client_id="C", partner_id="p", client_name="Carla Rossi"),
            Assignment(
                id="a2",
                client_id="D",
                partner_id="p",
                override=SplitPair(Decimal("0.50"), Decimal("0.50")),
                client_name="Dario",
            ),
            Assignment(id="a3", client_id="X", partner_id="q"),
            Assignment(id="a4", client_id="Y", partner_id="r"),
        ),
        profit_records=(
            ProfitRecord(id="r1", client_id="C", profit=Decimal("100.00"), status="completed",
                         completed_at="2026-01-15T10:00:00+00:00"),
            ProfitRecord(id="r2", client_id="C", profit=Decimal("50.00"), status="completed",
                         completed_at="2026-02-03T10:00:00+00:00"),
            ProfitRecord(id="r3", client_id="D", profit=Decimal("200.00"), status="completed",
                         completed_at="2026-02-20T10:00:00+00:00"),
            ProfitRecord(id="r4", client_id="X", profit=Decimal("200.00"), status="completed"),
            ProfitRecord(id="r5", client_id="Y", profit=Decimal("100.00"), status="completed"),
        ),
        payments=(
            Payment(id="pay1", partner_id="p", amount=Decimal("145.00"),
                    paid_at="2026-03-01T00:00:00+00:00"),
            Payment(id="pay2", partner_id="r", amount=Decimal("50.00"),
                    paid_at="2026-03-02T00:00:00+00:00"),
        ),
    )


class TestSummaries:
    def test_one_summary_per_partner(self) -> None:
        summaries: list[PartnerSummary] = summarize_partners(_snapshot())
        by_id: dict[str, PartnerSummary] = {s.partner_id: s for s in summaries}
        assert by_id["p"].balance == 0
        assert by_id["p"].status == BalanceStatus.SETTLED
        assert by_id["p"].clients_count == 2
        assert by_id["q"].balance == Decimal("80.00")
        assert by_id["q"].status == BalanceStatus.DUE
        assert by_id["r"].balance == Decimal("-30.00")
        assert by_id["r"].status == BalanceStatus.ADVANCE

    def test_partner_without_clients(self) -> None:
        snap: Snapshot = Snapshot(partners=(_partner("z", "Zed", "0.25", "0.75"),))
        summary: PartnerSummary = summarize_partners(snap)[0]
        assert summary.clients_count == 0
        assert summary.balance == 0
        assert summary.status == BalanceStatus.SETTLED


class TestFilters:
    def test_search_case_insensitive(self) -> None:
        summaries: list[PartnerSummary] = summarize_partners(_snapshot())
        assert [s.name for s in filter_summaries(summaries, search="CHAR")] == ["charlie"]
        assert [s.name for s in filter_summaries(summaries, search="  bra ")] == ["Bravo"]

    def test_empty_search_keeps_all(self) -> None:
        summaries: list[PartnerSummary] = summarize_partners(_snapshot())
        assert len(filter_summaries(summaries, search="")) == 3

    def test_status_filters_partition(self) -> None:
        summaries: list[PartnerSummary] = summarize_partners(_snapshot())
        due = filter_summaries(summaries, status=StatusFilter.DUE)
        settled = filter_summaries(summaries, status=StatusFilter.SETTLED)
        negative = filter_summaries(summaries, status=StatusFilter.NEGATIVE)
        assert [s.partner_id for s in due] == ["q"]
        assert [s.partner_id for s in settled] == ["p"]
        assert [s.partner_id for s in negative] == ["r"]
        assert len(due) + len(settled) + len(negative) == len(summaries)

    def test_advance_is_alias_of_negative(self) -> None:
        summaries: list[PartnerSummary] = summarize_partners(_snapshot())
        assert filter_summaries(summaries, status=StatusFilter.ADVANCE) == filter_summaries(
            summaries, status=StatusFilter.NEGATIVE
        )

    def test_search_and_status_combine(self) -> None:
        summaries: list[PartnerSummary] = summarize_partners(_snapshot())
        assert filter_summaries(summaries, search="alpha", status=StatusFilter.DUE) == []


class TestSorting:
    def test_default_is_balance_desc(self) -> None:
        rows: list[PartnerSummary] = sort_summaries(summarize_partners(_snapshot()))
        assert [s.partner_id for s in rows] == ["q", "p", "r"]

    def test_name_sort_ignores_case(self) -> None:
        rows: list[PartnerSummary] = sort_summaries(
            summarize_partners(_snapshot()), SortState(SortColumn.NAME, SortDirection.ASC)
        )
        assert [s.name for s in rows] == ["Alpha", "Bravo", "charlie"]

    def test_numeric_column(self) -> None:
        rows: list[PartnerSummary] = sort_summaries(
            summarize_partners(_snapshot()),
            SortState(SortColumn.CLIENTS_COUNT, SortDirection.DESC),
        )
        assert rows[0].partner_id == "p"

    def test_ties_keep_input_order(self) -> None:
        snap: Snapshot = Snapshot(
            partners=(
                _partner("a", "Same", "0.25", "0.75"),
                _partner("b", "Same", "0.25", "0.75"),
            )
        )
        asc = sort_summaries(summarize_partners(snap), SortState(SortColumn.BALANCE, SortDirection.ASC))
        assert [s.partner_id for s in asc] == ["a", "b"]

    def test_toggle_same_column_flips(self) -> None:
        state: SortState = SortState()
        flipped: SortState = state.toggle(SortColumn.BALANCE)
        assert flipped.direction == SortDirection.ASC
        assert flipped.toggle(SortColumn.BALANCE).direction == SortDirection.DESC

    def test_toggle_new_column_starts_desc(self) -> None:
        state: SortState = SortState(SortColumn.BALANCE, SortDirection.ASC)
        moved: SortState = state.toggle(SortColumn.NAME)
        assert moved == SortState(SortColumn.NAME, SortDirection.DESC)


class TestLedgerView:
    def test_totals_cover_filtered_rows(self) -> None:
        view: LedgerView = build_ledger_view(_snapshot(), status=StatusFilter.DUE)
        assert view.totals.partners == 1
        assert view.totals.balance == Decimal("80.00")

    def test_totals_all(self) -> None:
        view: LedgerView = build_ledger_view(_snapshot())
        assert view.totals.partners == 3
        assert view.totals.clients_count == 4
        assert view.totals.total_profit == Decimal("650.00")
        assert view.totals.partner_share == Decimal("245.00")
        assert view.totals.total_paid == Decimal("195.00")
        assert view.totals.balance == Decimal("50.00")
        assert view.sort == SortState()

    def test_recompute_is_idempotent(self) -> None:
        snap: Snapshot = _snapshot()
        assert build_ledger_view(snap) == build_ledger_view(snap)

    def test_empty_snapshot(self) -> None:
        view: LedgerView = build_ledger_view(Snapshot())
        assert view.rows == []
        assert view.totals == compute_totals([])

    def test_statuses_restrict_contributions(self) -> None:
        snap: Snapshot = Snapshot(
            partners=(_partner("p", "Alpha", "0.50", "0.50"),),
            assignments=(Assignment(id="a", client_id="C", partner_id="p"),),
            profit_records=(
                ProfitRecord(id="r1", client_id="C", profit=Decimal("10"), status="completed"),
                ProfitRecord(id="r2", client_id="C", profit=Decimal("90"), status="requested"),
            ),
        )
        everything: LedgerView = build_ledger_view(snap)
        completed: LedgerView = build_ledger_view(snap, statuses=frozenset({"completed"}))
        assert everything.totals.total_profit == Decimal("100")
        assert completed.totals.total_profit == Decimal("10")


class TestPartnerDetail:
    def test_unknown_partner(self) -> None:
        assert build_partner_detail(_snapshot(), "missing") is None

    def test_detail_parts(self) -> None:
        detail: PartnerDetail | None = build_partner_detail(_snapshot(), "p")
        assert detail is not None
        assert detail.partner.name == "Alpha"
        assert detail.status == BalanceStatus.SETTLED
        assert [line.client_name for line in detail.breakdown] == ["Carla Rossi", "Dario"]
        assert [(m.month, m.amount) for m in detail.monthly] == [
            ("2026-01", Decimal("30.00")),
            ("2026-02", Decimal("115.00")),
        ]
        assert [p.id for p in detail.payments] == ["pay1"]


class TestRandomLedgers:
    """Seeded random ledgers: exact arithmetic must hold for any data."""

    def _random_snapshot(self, rng: random.Random) -> Snapshot:
        partners: list[Partner] = []
        assignments: list[Assignment] = []
        records: list[ProfitRecord] = []
        payments: list[Payment] = []
        for pi in range(rng.randint(1, 5)):
            cut: Decimal = Decimal(rng.randint(0, 100)) / 100
            partners.append(_partner(f"p{pi}", f"Partner {pi}", str(cut), str(1 - cut)))
            for ci in range(rng.randint(0, 4)):
                client_id: str = f"c{pi}-{ci}"
                override: SplitPair | None = None
                if rng.random() < 0.3:
                    o: Decimal = Decimal(rng.randint(0, 100)) / 100
                    override = SplitPair(o, 1 - o)
                assignments.append(
                    Assignment(id=f"a{pi}-{ci}", client_id=client_id, partner_id=f"p{pi}",
                               override=override)
                )
                for ri in range(rng.randint(0, 5)):
                    profit: Decimal = Decimal(rng.randint(-5000, 50000)) / 100
                    records.append(
                        ProfitRecord(id=f"r{pi}-{ci}-{ri}", client_id=client_id,
                                     profit=profit, status="completed")
                    )
            for yi in range(rng.randint(0, 3)):
                payments.append(
                    Payment(id=f"pay{pi}-{yi}", partner_id=f"p{pi}",
                            amount=Decimal(rng.randint(1, 20000)) / 100,
                            paid_at=f"2026-01-{yi + 1:02d}T00:00:00+00:00")
                )
        return Snapshot(
            partners=tuple(partners),
            assignments=tuple(assignments),
            profit_records=tuple(records),
            payments=tuple(payments),
        )

    def test_shares_and_balances_are_exact(self) -> None:
        rng: random.Random = random.Random(20260119)
        for _ in range(50):
            snap: Snapshot = self._random_snapshot(rng)
            for summary in summarize_partners(snap):
                assert summary.partner_share + summary.owner_share == summary.total_profit
                assert summary.balance == summary.partner_share - summary.total_paid

    def test_status_filters_always_partition(self) -> None:
        rng: random.Random = random.Random(7)
        for _ in range(50):
            summaries: list[PartnerSummary] = summarize_partners(self._random_snapshot(rng))
            sizes: int = sum(
                len(filter_summaries(summaries, status=f))
                for f in (StatusFilter.DUE, StatusFilter.SETTLED, StatusFilter.NEGATIVE)
            )
            assert sizes == len(summaries)


class TestDisplayRounding:
    def test_tiny_advance_renders_as_zero_but_keeps_status(self) -> None:
        snap: Snapshot = Snapshot(
            partners=(_partner("p", "Alpha", "0.30", "0.70"),),
            assignments=(Assignment(id="a", client_id="C", partner_id="p"),),
            profit_records=(
                ProfitRecord(id="r", client_id="C", profit=Decimal("33.33"), status="completed"),
            ),
            payments=(
                Payment(id="pay", partner_id="p", amount=Decimal("10.00"),
                        paid_at="2026-01-01T00:00:00+00:00"),
            ),
        )
        summary: PartnerSummary = summarize_partners(snap)[0]
        assert summary.balance == Decimal("-0.001")
        assert summary.status == BalanceStatus.ADVANCE

        row = summary_dict(summary)
        assert row["balance"] == "0.00"
        assert row["status"] == "advance"

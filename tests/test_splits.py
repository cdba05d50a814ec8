"""Tests for partnerledger.services.splits."""

from decimal import Decimal

from db.enums import SplitSource
from partnerledger.services.schemas.records import (
    AppSplit,
    Assignment,
    Partner,
    ProfitRecord,
    SplitPair,
)
from partnerledger.services.splits import index_app_splits, resolve_record_split, resolve_split

DEFAULT: SplitPair = SplitPair(Decimal("0.30"), Decimal("0.70"))
PARTNER: Partner = Partner(id="p", name="P", default_split=DEFAULT)


def _assignment(override: SplitPair | None = None) -> Assignment:
    return Assignment(id="a", client_id="c", partner_id="p", override=override)


class TestSplitPair:
    def test_from_columns_both_set(self) -> None:
        pair: SplitPair | None = SplitPair.from_columns(Decimal("0.4"), Decimal("0.6"))
        assert pair == SplitPair(Decimal("0.4"), Decimal("0.6"))

    def test_from_columns_half_set_is_none(self) -> None:
        assert SplitPair.from_columns(Decimal("0.4"), None) is None
        assert SplitPair.from_columns(None, Decimal("0.6")) is None
        assert SplitPair.from_columns(None, None) is None

    def test_total(self) -> None:
        assert DEFAULT.total == Decimal("1.00")


class TestResolveSplit:
    def test_no_override_uses_default(self) -> None:
        assert resolve_split(_assignment(), PARTNER) == DEFAULT

    def test_override_wins(self) -> None:
        override: SplitPair = SplitPair(Decimal("0.5"), Decimal("0.5"))
        assert resolve_split(_assignment(override), PARTNER) is override

    def test_malformed_override_passes_through(self) -> None:
        odd: SplitPair = SplitPair(Decimal("0.9"), Decimal("0.9"))
        resolved: SplitPair = resolve_split(_assignment(odd), PARTNER)
        assert resolved.partner == Decimal("0.9")
        assert resolved.owner == Decimal("0.9")

    def test_malformed_default_passes_through(self) -> None:
        partner: Partner = Partner(
            id="p", name="P", default_split=SplitPair(Decimal("1.5"), Decimal("-0.2"))
        )
        assert resolve_split(_assignment(), partner) == SplitPair(Decimal("1.5"), Decimal("-0.2"))


class TestResolveRecordSplit:
    def _record(self, app_id: str | None) -> ProfitRecord:
        return ProfitRecord(
            id="r", client_id="c", profit=Decimal("10"), status="completed", app_id=app_id
        )

    def test_app_split_has_priority(self) -> None:
        override: SplitPair = SplitPair(Decimal("0.5"), Decimal("0.5"))
        app: SplitPair = SplitPair(Decimal("0.1"), Decimal("0.9"))
        split, source = resolve_record_split(
            self._record("app-1"), _assignment(override), PARTNER, {"app-1": app}
        )
        assert split == app
        assert source == SplitSource.APP

    def test_override_when_no_app_split(self) -> None:
        override: SplitPair = SplitPair(Decimal("0.5"), Decimal("0.5"))
        split, source = resolve_record_split(
            self._record("app-2"), _assignment(override), PARTNER, {}
        )
        assert split == override
        assert source == SplitSource.OVERRIDE

    def test_default_last(self) -> None:
        split, source = resolve_record_split(self._record(None), _assignment(), PARTNER, {})
        assert split == DEFAULT
        assert source == SplitSource.DEFAULT

    def test_index_app_splits_only_for_partner(self) -> None:
        splits: list[AppSplit] = [
            AppSplit(partner_id="p", app_id="a1", split=DEFAULT),
            AppSplit(partner_id="other", app_id="a2", split=DEFAULT),
        ]
        assert index_app_splits(PARTNER, splits) == {"a1": DEFAULT}

"""Split resolution: which partner/owner fractions apply to a client's profit."""

from collections.abc import Iterable, Mapping

from db.enums import SplitSource
from partnerledger.services.schemas.records import (
    AppSplit,
    Assignment,
    Partner,
    ProfitRecord,
    SplitPair,
)


def resolve_split(assignment: Assignment, partner: Partner) -> SplitPair:
    """Override pair if the assignment carries one, else the partner default.

    Values are returned as stored. Sums other than 1 are a write-time concern.
    """
    if assignment.override is not None:
        return assignment.override
    return partner.default_split


def index_app_splits(partner: Partner, app_splits: Iterable[AppSplit]) -> dict[str, SplitPair]:
    """app_id -> split for the given partner."""
    return {s.app_id: s.split for s in app_splits if s.partner_id == partner.id}


def resolve_record_split(
    record: ProfitRecord,
    assignment: Assignment,
    partner: Partner,
    app_splits: Mapping[str, SplitPair],
) -> tuple[SplitPair, SplitSource]:
    """Split for a single profit record: app split, then override, then default."""
    if record.app_id is not None and record.app_id in app_splits:
        return app_splits[record.app_id], SplitSource.APP
    if assignment.override is not None:
        return assignment.override, SplitSource.OVERRIDE
    return partner.default_split, SplitSource.DEFAULT

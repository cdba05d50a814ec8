"""Typed snapshot records consumed by the ledger.

Rows from storage are converted into these at the snapshot boundary so the
ledger never handles partial or loosely typed shapes.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class SplitPair:
    """Partner/owner fractions of profit. Stored values pass through unvalidated."""

    partner: Decimal
    owner: Decimal

    @property
    def total(self) -> Decimal:
        return self.partner + self.owner

    @classmethod
    def from_columns(cls, partner: Decimal | None, owner: Decimal | None) -> "SplitPair | None":
        """Both columns set -> pair, otherwise no pair."""
        if partner is None or owner is None:
            return None
        return cls(partner=partner, owner=owner)


@dataclass(frozen=True)
class Partner:
    id: str
    name: str
    default_split: SplitPair
    contact_info: str | None = None
    notes: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Assignment:
    id: str
    client_id: str
    partner_id: str
    override: SplitPair | None = None
    client_name: str = "Unknown"
    notes: str | None = None
    assigned_at: str | None = None


@dataclass(frozen=True)
class ProfitRecord:
    id: str
    client_id: str
    profit: Decimal | None
    status: str
    app_id: str | None = None
    created_at: str | None = None
    completed_at: str | None = None


@dataclass(frozen=True)
class Payment:
    id: str
    partner_id: str
    amount: Decimal | None
    paid_at: str
    note: str | None = None


@dataclass(frozen=True)
class AppSplit:
    partner_id: str
    app_id: str
    split: SplitPair


@dataclass(frozen=True)
class Snapshot:
    partners: tuple[Partner, ...] = ()
    assignments: tuple[Assignment, ...] = ()
    profit_records: tuple[ProfitRecord, ...] = ()
    payments: tuple[Payment, ...] = ()
    app_splits: tuple[AppSplit, ...] = field(default=())

    def partner(self, partner_id: str) -> Partner | None:
        for p in self.partners:
            if p.id == partner_id:
                return p
        return None

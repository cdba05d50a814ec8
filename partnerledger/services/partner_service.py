"""Partner, assignment, payment and app-split editors.

These are the write paths, so the 100% split rule and positive payment amounts
are validated here. The ledger itself reads whatever is stored.
"""

from decimal import Decimal, InvalidOperation

import structlog
from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models import (
    ClientPartnerAssignments,
    ClientPartners,
    Clients,
    PartnerAppSplits,
    PartnerPayments,
)
from partnerledger.services._helpers import ZERO, money_str, new_id, now_iso, to_decimal
from partnerledger.services._types import (
    AppSplitDict,
    AssignmentDict,
    PartnerDict,
    PaymentDict,
)
from partnerledger.services.errors import (
    ClientNotFoundError,
    InvalidPaymentError,
    InvalidSplitError,
    PartnerNotFoundError,
)
from partnerledger.services.schemas.records import SplitPair

logger = structlog.get_logger(__name__)

ONE: Decimal = Decimal(1)
SPLIT_STEP: Decimal = Decimal("0.0001")


def _as_decimal(value: object, label: str, error: type[Exception]) -> Decimal:
    try:
        result: Decimal = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise error(f"{label} is not a number: {value!r}") from e
    if not result.is_finite():
        raise error(f"{label} is not a number: {value!r}")
    return result


def validate_split(split_partner: object, split_owner: object) -> SplitPair:
    """Both fractions in [0, 1], at most four decimal places, totalling exactly 1.

    Four places survive the float columns unchanged, so the stored pair still
    totals exactly 1 when read back.
    """
    partner: Decimal = _as_decimal(split_partner, "split_partner", InvalidSplitError)
    owner: Decimal = _as_decimal(split_owner, "split_owner", InvalidSplitError)
    for label, value in (("split_partner", partner), ("split_owner", owner)):
        if value < ZERO or value > ONE:
            raise InvalidSplitError(f"{label} must be between 0 and 1, got {value}")
        if value != value.quantize(SPLIT_STEP):
            raise InvalidSplitError(f"{label} allows at most 4 decimal places, got {value}")
    if partner + owner != ONE:
        pct: Decimal = (partner + owner) * 100
        raise InvalidSplitError(f"Total split must equal 100% (currently {pct.normalize():f}%)")
    return SplitPair(partner=partner, owner=owner)


def validate_override(
    split_partner: object | None, split_owner: object | None
) -> SplitPair | None:
    """Neither set -> no override. Exactly one set is rejected."""
    if split_partner is None and split_owner is None:
        return None
    if split_partner is None or split_owner is None:
        raise InvalidSplitError("Override requires both split_partner and split_owner")
    return validate_split(split_partner, split_owner)


def _fraction_str(value: float | None) -> str | None:
    return None if value is None else str(to_decimal(value))


def _partner_dict(p: ClientPartners) -> PartnerDict:
    return PartnerDict(
        id=p.id,
        name=p.name,
        default_split_partner=str(to_decimal(p.default_split_partner)),
        default_split_owner=str(to_decimal(p.default_split_owner)),
        contact_info=p.contact_info,
        notes=p.notes,
        created_at=p.created_at,
    )


def _assignment_dict(a: ClientPartnerAssignments) -> AssignmentDict:
    return AssignmentDict(
        id=a.id,
        client_id=a.client_id,
        partner_id=a.partner_id,
        split_partner_override=_fraction_str(a.split_partner_override),
        split_owner_override=_fraction_str(a.split_owner_override),
        notes=a.notes,
        assigned_at=a.assigned_at,
    )


def _payment_dict(p: PartnerPayments) -> PaymentDict:
    return PaymentDict(
        id=p.id,
        partner_id=p.partner_id,
        amount=money_str(to_decimal(p.amount)),
        note=p.note,
        paid_at=p.paid_at,
    )


def _app_split_dict(s: PartnerAppSplits) -> AppSplitDict:
    return AppSplitDict(
        id=s.id,
        partner_id=s.partner_id,
        app_id=s.app_id,
        split_partner=str(to_decimal(s.split_partner)),
        split_owner=str(to_decimal(s.split_owner)),
        notes=s.notes,
    )


class PartnerService:
    """Write-side service for partners and everything hanging off them."""

    def __init__(self, session: Session) -> None:
        self.session: Session = session

    def _get_partner(self, pid: str) -> ClientPartners | None:
        return self.session.get(ClientPartners, pid)

    def _require_partner(self, pid: str) -> ClientPartners:
        partner: ClientPartners | None = self._get_partner(pid)
        if partner is None:
            raise PartnerNotFoundError(f"Partner {pid} not found")
        return partner

    def _get_assignment(self, client_id: str) -> ClientPartnerAssignments | None:
        stmt: Select[tuple[ClientPartnerAssignments]] = select(ClientPartnerAssignments).where(
            ClientPartnerAssignments.client_id == client_id
        )
        return self.session.scalars(stmt).first()

    # ------------------------------------------------------------------
    # Partners
    # ------------------------------------------------------------------

    def list_partners(self) -> list[PartnerDict]:
        stmt: Select[tuple[ClientPartners]] = select(ClientPartners).order_by(
            ClientPartners.name, ClientPartners.id
        )
        return [_partner_dict(p) for p in self.session.scalars(stmt).all()]

    def get_partner(self, pid: str) -> PartnerDict | None:
        partner: ClientPartners | None = self._get_partner(pid)
        return _partner_dict(partner) if partner else None

    def create_partner(
        self,
        name: str,
        split_partner: object,
        split_owner: object,
        contact_info: str | None = None,
        notes: str | None = None,
    ) -> PartnerDict:
        split: SplitPair = validate_split(split_partner, split_owner)
        partner: ClientPartners = ClientPartners(
            id=new_id(),
            name=name.strip(),
            default_split_partner=float(split.partner),
            default_split_owner=float(split.owner),
            contact_info=contact_info,
            notes=notes,
            created_at=now_iso(),
        )
        self.session.add(partner)
        self.session.flush()
        logger.info("partner_created", partner_id=partner.id, name=partner.name)
        return _partner_dict(partner)

    def update_partner(
        self,
        pid: str,
        *,
        name: str | None = None,
        split_partner: object | None = None,
        split_owner: object | None = None,
        contact_info: str | None = None,
        notes: str | None = None,
    ) -> PartnerDict | None:
        partner: ClientPartners | None = self._get_partner(pid)
        if partner is None:
            return None
        if split_partner is not None or split_owner is not None:
            split: SplitPair = validate_split(
                split_partner if split_partner is not None else partner.default_split_partner,
                split_owner if split_owner is not None else partner.default_split_owner,
            )
            partner.default_split_partner = float(split.partner)
            partner.default_split_owner = float(split.owner)
        if name is not None:
            partner.name = name.strip()
        if contact_info is not None:
            partner.contact_info = contact_info
        if notes is not None:
            partner.notes = notes
        self.session.flush()
        logger.info("partner_updated", partner_id=pid)
        return _partner_dict(partner)

    def delete_partner(self, pid: str) -> bool:
        """Remove a partner together with its assignments, payments and app splits."""
        partner: ClientPartners | None = self._get_partner(pid)
        if partner is None:
            return False
        self.session.delete(partner)
        self.session.flush()
        logger.info("partner_deleted", partner_id=pid)
        return True

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    def assign_client(
        self,
        partner_id: str,
        client_id: str,
        split_partner_override: object | None = None,
        split_owner_override: object | None = None,
        notes: str | None = None,
    ) -> AssignmentDict:
        """Assign (or reassign) a client. A client has at most one partner."""
        self._require_partner(partner_id)
        if self.session.get(Clients, client_id) is None:
            raise ClientNotFoundError(f"Client {client_id} not found")
        override: SplitPair | None = validate_override(split_partner_override, split_owner_override)

        assignment: ClientPartnerAssignments | None = self._get_assignment(client_id)
        if assignment is None:
            assignment = ClientPartnerAssignments(id=new_id(), client_id=client_id)
            self.session.add(assignment)
        elif assignment.partner_id != partner_id:
            logger.info(
                "client_reassigned",
                client_id=client_id,
                from_partner=assignment.partner_id,
                to_partner=partner_id,
            )
        assignment.partner_id = partner_id
        assignment.split_partner_override = float(override.partner) if override else None
        assignment.split_owner_override = float(override.owner) if override else None
        assignment.notes = notes
        assignment.assigned_at = now_iso()
        self.session.flush()
        return _assignment_dict(assignment)

    def unassign_client(self, client_id: str) -> bool:
        assignment: ClientPartnerAssignments | None = self._get_assignment(client_id)
        if assignment is None:
            return False
        self.session.delete(assignment)
        self.session.flush()
        return True

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def record_payment(
        self,
        partner_id: str,
        amount: object,
        note: str | None = None,
        paid_at: str | None = None,
    ) -> PaymentDict:
        """Append a payment. Payments are never edited afterwards."""
        self._require_partner(partner_id)
        value: Decimal = _as_decimal(amount, "amount", InvalidPaymentError)
        if value <= ZERO:
            raise InvalidPaymentError("Enter a valid amount")
        payment: PartnerPayments = PartnerPayments(
            id=new_id(),
            partner_id=partner_id,
            amount=float(value),
            note=(note or None),
            paid_at=paid_at or now_iso(),
        )
        self.session.add(payment)
        self.session.flush()
        logger.info("payment_recorded", partner_id=partner_id, amount=str(value))
        return _payment_dict(payment)

    def list_payments(self, partner_id: str) -> list[PaymentDict]:
        stmt: Select[tuple[PartnerPayments]] = (
            select(PartnerPayments)
            .where(PartnerPayments.partner_id == partner_id)
            .order_by(PartnerPayments.paid_at.desc())
        )
        return [_payment_dict(p) for p in self.session.scalars(stmt).all()]

    # ------------------------------------------------------------------
    # Per-app splits
    # ------------------------------------------------------------------

    def set_app_split(
        self,
        partner_id: str,
        app_id: str,
        split_partner: object,
        split_owner: object,
        notes: str | None = None,
    ) -> AppSplitDict:
        self._require_partner(partner_id)
        split: SplitPair = validate_split(split_partner, split_owner)
        stmt: Select[tuple[PartnerAppSplits]] = select(PartnerAppSplits).where(
            PartnerAppSplits.partner_id == partner_id,
            PartnerAppSplits.app_id == app_id,
        )
        row: PartnerAppSplits | None = self.session.scalars(stmt).first()
        if row is None:
            row = PartnerAppSplits(id=new_id(), partner_id=partner_id, app_id=app_id)
            self.session.add(row)
        row.split_partner = float(split.partner)
        row.split_owner = float(split.owner)
        row.notes = notes
        self.session.flush()
        return _app_split_dict(row)

    def remove_app_split(self, partner_id: str, app_id: str) -> bool:
        stmt: Select[tuple[PartnerAppSplits]] = select(PartnerAppSplits).where(
            PartnerAppSplits.partner_id == partner_id,
            PartnerAppSplits.app_id == app_id,
        )
        row: PartnerAppSplits | None = self.session.scalars(stmt).first()
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True

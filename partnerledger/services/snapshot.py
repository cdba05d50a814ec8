"""Snapshot loading: storage rows -> typed ledger records."""

import structlog
from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import (
    ClientApps,
    ClientPartnerAssignments,
    ClientPartners,
    Clients,
    PartnerAppSplits,
    PartnerPayments,
)
from partnerledger.services._helpers import optional_decimal, to_decimal
from partnerledger.services.errors import SnapshotLoadError
from partnerledger.services.schemas.records import (
    AppSplit,
    Assignment,
    Partner,
    Payment,
    ProfitRecord,
    Snapshot,
    SplitPair,
)

logger = structlog.get_logger(__name__)


def partner_from_row(row: ClientPartners) -> Partner:
    return Partner(
        id=row.id,
        name=row.name,
        default_split=SplitPair(
            partner=to_decimal(row.default_split_partner),
            owner=to_decimal(row.default_split_owner),
        ),
        contact_info=row.contact_info,
        notes=row.notes,
        created_at=row.created_at,
    )


def assignment_from_row(row: ClientPartnerAssignments, client_name: str = "Unknown") -> Assignment:
    override: SplitPair | None = SplitPair.from_columns(
        optional_decimal(row.split_partner_override),
        optional_decimal(row.split_owner_override),
    )
    if override is None and (
        row.split_partner_override is not None or row.split_owner_override is not None
    ):
        logger.warning(
            "partial_override_ignored",
            assignment_id=row.id,
            client_id=row.client_id,
            partner_id=row.partner_id,
        )
    return Assignment(
        id=row.id,
        client_id=row.client_id,
        partner_id=row.partner_id,
        override=override,
        client_name=client_name,
        notes=row.notes,
        assigned_at=row.assigned_at,
    )


def profit_record_from_row(row: ClientApps) -> ProfitRecord:
    return ProfitRecord(
        id=row.id,
        client_id=row.client_id,
        profit=optional_decimal(row.profit_us),
        status=row.status,
        app_id=row.app_id,
        created_at=row.created_at,
        completed_at=row.completed_at,
    )


def payment_from_row(row: PartnerPayments) -> Payment:
    return Payment(
        id=row.id,
        partner_id=row.partner_id,
        amount=optional_decimal(row.amount),
        paid_at=row.paid_at,
        note=row.note,
    )


def app_split_from_row(row: PartnerAppSplits) -> AppSplit:
    return AppSplit(
        partner_id=row.partner_id,
        app_id=row.app_id,
        split=SplitPair(partner=to_decimal(row.split_partner), owner=to_decimal(row.split_owner)),
    )


class SnapshotRepository:
    """Reads every ledger input in one pass."""

    def __init__(self, session: Session) -> None:
        self.session: Session = session

    def _client_names(self) -> dict[str, str]:
        stmt: Select[tuple[Clients]] = select(Clients)
        return {c.id: c.display_name for c in self.session.scalars(stmt).all()}

    def load(self) -> Snapshot:
        try:
            names: dict[str, str] = self._client_names()
            partners: list[ClientPartners] = list(
                self.session.scalars(
                    select(ClientPartners).order_by(ClientPartners.created_at, ClientPartners.id)
                ).all()
            )
            assignments: list[ClientPartnerAssignments] = list(
                self.session.scalars(
                    select(ClientPartnerAssignments).order_by(
                        ClientPartnerAssignments.assigned_at, ClientPartnerAssignments.id
                    )
                ).all()
            )
            apps: list[ClientApps] = list(
                self.session.scalars(select(ClientApps).order_by(ClientApps.id)).all()
            )
            payments: list[PartnerPayments] = list(
                self.session.scalars(
                    select(PartnerPayments).order_by(PartnerPayments.paid_at, PartnerPayments.id)
                ).all()
            )
            app_splits: list[PartnerAppSplits] = list(
                self.session.scalars(select(PartnerAppSplits).order_by(PartnerAppSplits.id)).all()
            )
        except SQLAlchemyError as e:
            logger.exception("snapshot_load_failed")
            raise SnapshotLoadError(f"Could not load ledger snapshot: {e}") from e

        snapshot: Snapshot = Snapshot(
            partners=tuple(partner_from_row(p) for p in partners),
            assignments=tuple(
                assignment_from_row(a, names.get(a.client_id, "Unknown")) for a in assignments
            ),
            profit_records=tuple(profit_record_from_row(r) for r in apps),
            payments=tuple(payment_from_row(p) for p in payments),
            app_splits=tuple(app_split_from_row(s) for s in app_splits),
        )
        logger.debug(
            "snapshot_loaded",
            partners=len(snapshot.partners),
            assignments=len(snapshot.assignments),
            profit_records=len(snapshot.profit_records),
            payments=len(snapshot.payments),
            app_splits=len(snapshot.app_splits),
        )
        return snapshot

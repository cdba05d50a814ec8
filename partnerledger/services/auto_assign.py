"""Auto-assignment of invited clients to the partner that invited them."""

import structlog
from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import ClientPartnerAssignments, ClientPartners, Clients
from partnerledger.services._helpers import new_id, now_iso
from partnerledger.services._types import AutoAssignDict, AutoAssignOutcomeDict
from partnerledger.services.errors import AutoAssignmentError
from partnerledger.services.schemas.results import AutoAssignOutcome, AutoAssignResult

logger = structlog.get_logger(__name__)


class AutoAssignmentService:
    """Assigns every invited client that has no partner yet.

    Clients that already have an assignment are reported with ``assigned=False``
    and left untouched, whichever partner they belong to.
    """

    def __init__(self, session: Session) -> None:
        self.session: Session = session

    def _invited_clients(self) -> list[Clients]:
        stmt: Select[tuple[Clients]] = (
            select(Clients)
            .where(Clients.invited_by_partner_id.is_not(None))
            .order_by(Clients.created_at, Clients.id)
        )
        return list(self.session.scalars(stmt).all())

    def _assigned_client_ids(self) -> set[str]:
        stmt = select(ClientPartnerAssignments.client_id)
        return set(self.session.scalars(stmt).all())

    def check_and_assign(self) -> AutoAssignResult:
        run_id: str = new_id()
        outcomes: list[AutoAssignOutcome] = []
        try:
            already: set[str] = self._assigned_client_ids()
            for client in self._invited_clients():
                partner: ClientPartners | None = self.session.get(
                    ClientPartners, client.invited_by_partner_id
                )
                if partner is None:
                    logger.warning(
                        "inviting_partner_missing",
                        client_id=client.id,
                        partner_id=client.invited_by_partner_id,
                    )
                    continue
                assigned: bool = client.id not in already
                if assigned:
                    self.session.add(
                        ClientPartnerAssignments(
                            id=new_id(),
                            client_id=client.id,
                            partner_id=partner.id,
                            assigned_at=now_iso(),
                        )
                    )
                    already.add(client.id)
                outcomes.append(
                    AutoAssignOutcome(
                        client_id=client.id,
                        client_name=client.display_name,
                        partner_id=partner.id,
                        partner_name=partner.name,
                        assigned=assigned,
                    )
                )
            self.session.flush()
        except SQLAlchemyError as e:
            logger.exception("Auto-assignment failed", run_id=run_id)
            raise AutoAssignmentError(f"Failed to check assignments: {e}") from e

        result: AutoAssignResult = AutoAssignResult(run_id=run_id, outcomes=outcomes)
        logger.info(
            "Auto-assignment complete",
            run_id=run_id,
            assigned=result.assigned_count,
            total=result.total_count,
        )
        return result

    def run(self) -> AutoAssignDict:
        """Route-facing wrapper returning a plain dict."""
        result: AutoAssignResult = self.check_and_assign()
        return AutoAssignDict(
            run_id=result.run_id,
            assigned_count=result.assigned_count,
            total_count=result.total_count,
            message=result.message,
            outcomes=[
                AutoAssignOutcomeDict(
                    client_id=o.client_id,
                    client_name=o.client_name,
                    partner_id=o.partner_id,
                    partner_name=o.partner_name,
                    assigned=o.assigned,
                )
                for o in result.outcomes
            ],
        )

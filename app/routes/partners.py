"""Partner ledger endpoints: thin routes, logic in services."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.dependencies import get_api_key, get_contributing_statuses, get_db
from app.schemas.ledger import LedgerViewResponse, PartnerDetailResponse
from app.schemas.partners import (
    AppSplitResponse,
    AppSplitSet,
    AssignmentCreate,
    AssignmentResponse,
    AutoAssignResponse,
    PartnerCreate,
    PartnerResponse,
    PartnerUpdate,
    PaymentCreate,
    PaymentResponse,
)
from db.enums import SortColumn, SortDirection, StatusFilter
from partnerledger.services._types import (
    AppSplitDict,
    AssignmentDict,
    AutoAssignDict,
    LedgerViewDict,
    PartnerDetailDict,
    PartnerDict,
    PaymentDict,
)
from partnerledger.services.auto_assign import AutoAssignmentService
from partnerledger.services.ledger_service import LedgerService
from partnerledger.services.partner_service import PartnerService

router: APIRouter = APIRouter(prefix="/api", tags=["partners"])


@router.get("/partners", response_model=LedgerViewResponse)
def list_partners(
    search: str = Query(""),
    status: StatusFilter = Query(StatusFilter.ALL),
    sort: SortColumn = Query(SortColumn.BALANCE),
    direction: SortDirection = Query(SortDirection.DESC),
    db: Session = Depends(get_db),
    statuses: frozenset[str] | None = Depends(get_contributing_statuses),
) -> LedgerViewDict:
    svc: LedgerService = LedgerService(db, statuses=statuses)
    return svc.get_ledger_view(search, status, sort, direction)


@router.post("/partners/auto-assign", response_model=AutoAssignResponse)
def auto_assign(
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> AutoAssignDict:
    return AutoAssignmentService(db).run()


@router.post("/partners", response_model=PartnerResponse, status_code=201)
def create_partner(
    body: PartnerCreate,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> PartnerDict:
    svc: PartnerService = PartnerService(db)
    return svc.create_partner(
        name=body.name,
        split_partner=body.default_split_partner,
        split_owner=body.default_split_owner,
        contact_info=body.contact_info,
        notes=body.notes,
    )


@router.get("/partners/{partner_id}", response_model=PartnerDetailResponse)
def get_partner(
    partner_id: str,
    db: Session = Depends(get_db),
    statuses: frozenset[str] | None = Depends(get_contributing_statuses),
) -> PartnerDetailDict:
    svc: LedgerService = LedgerService(db, statuses=statuses)
    detail: PartnerDetailDict | None = svc.get_partner_detail(partner_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Partner not found")
    return detail


@router.put("/partners/{partner_id}", response_model=PartnerResponse)
def update_partner(
    partner_id: str,
    body: PartnerUpdate,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> PartnerDict:
    svc: PartnerService = PartnerService(db)
    p: PartnerDict | None = svc.update_partner(
        partner_id,
        name=body.name,
        split_partner=body.default_split_partner,
        split_owner=body.default_split_owner,
        contact_info=body.contact_info,
        notes=body.notes,
    )
    if not p:
        raise HTTPException(status_code=404, detail="Partner not found")
    return p


@router.delete("/partners/{partner_id}", status_code=204)
def delete_partner(
    partner_id: str,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> None:
    if not PartnerService(db).delete_partner(partner_id):
        raise HTTPException(status_code=404, detail="Partner not found")


@router.post(
    "/partners/{partner_id}/assignments",
    response_model=AssignmentResponse,
    status_code=201,
)
def assign_client(
    partner_id: str,
    body: AssignmentCreate,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> AssignmentDict:
    svc: PartnerService = PartnerService(db)
    return svc.assign_client(
        partner_id,
        body.client_id,
        split_partner_override=body.split_partner_override,
        split_owner_override=body.split_owner_override,
        notes=body.notes,
    )


@router.delete("/assignments/{client_id}", status_code=204)
def unassign_client(
    client_id: str,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> None:
    if not PartnerService(db).unassign_client(client_id):
        raise HTTPException(status_code=404, detail="Assignment not found")


@router.get("/partners/{partner_id}/payments", response_model=list[PaymentResponse])
def list_payments(partner_id: str, db: Session = Depends(get_db)) -> list[PaymentDict]:
    return PartnerService(db).list_payments(partner_id)


@router.post(
    "/partners/{partner_id}/payments",
    response_model=PaymentResponse,
    status_code=201,
)
def record_payment(
    partner_id: str,
    body: PaymentCreate,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> PaymentDict:
    svc: PartnerService = PartnerService(db)
    return svc.record_payment(partner_id, body.amount, note=body.note, paid_at=body.paid_at)


@router.put("/partners/{partner_id}/app-splits", response_model=AppSplitResponse)
def set_app_split(
    partner_id: str,
    body: AppSplitSet,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> AppSplitDict:
    svc: PartnerService = PartnerService(db)
    return svc.set_app_split(
        partner_id,
        body.app_id,
        body.split_partner,
        body.split_owner,
        notes=body.notes,
    )


@router.delete("/partners/{partner_id}/app-splits/{app_id}", status_code=204)
def remove_app_split(
    partner_id: str,
    app_id: str,
    db: Session = Depends(get_db),
    _key: str = Depends(get_api_key),
) -> None:
    if not PartnerService(db).remove_app_split(partner_id, app_id):
        raise HTTPException(status_code=404, detail="App split not found")

"""Export endpoints: thin routes, logic in services."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.dependencies import get_contributing_statuses, get_db
from app.schemas.exports import ExportDataResponse
from db.enums import ExportFormat, StatusFilter
from partnerledger.services._types import ExportDataDict
from partnerledger.services.export import ExportService

router: APIRouter = APIRouter(prefix="/api", tags=["exports"])


@router.get("/exports/partners", response_model=ExportDataResponse)
def export_partners(
    format: ExportFormat = Query(ExportFormat.CSV),
    search: str = Query(""),
    status: StatusFilter = Query(StatusFilter.ALL),
    db: Session = Depends(get_db),
    statuses: frozenset[str] | None = Depends(get_contributing_statuses),
) -> ExportDataDict:
    svc: ExportService = ExportService(db, statuses=statuses)
    return svc.generate_export(format, search, status)


@router.get("/exports/partners/{partner_id}", response_model=ExportDataResponse)
def export_partner_breakdown(
    partner_id: str,
    format: ExportFormat = Query(ExportFormat.CSV),
    db: Session = Depends(get_db),
    statuses: frozenset[str] | None = Depends(get_contributing_statuses),
) -> ExportDataDict:
    svc: ExportService = ExportService(db, statuses=statuses)
    return svc.generate_partner_export(partner_id, format)

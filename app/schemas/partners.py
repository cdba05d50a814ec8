"""Partner request/response schemas."""

from pydantic import Field

from app.schemas.common import CamelModel


class PartnerCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    default_split_partner: float = Field(0.25, ge=0, le=1)
    default_split_owner: float = Field(0.75, ge=0, le=1)
    contact_info: str | None = None
    notes: str | None = None


class PartnerUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    default_split_partner: float | None = Field(None, ge=0, le=1)
    default_split_owner: float | None = Field(None, ge=0, le=1)
    contact_info: str | None = None
    notes: str | None = None


class AssignmentCreate(CamelModel):
    client_id: str = Field(..., min_length=1)
    split_partner_override: float | None = Field(None, ge=0, le=1)
    split_owner_override: float | None = Field(None, ge=0, le=1)
    notes: str | None = None


class PaymentCreate(CamelModel):
    amount: float = Field(..., gt=0)
    note: str | None = None
    paid_at: str | None = None


class AppSplitSet(CamelModel):
    app_id: str = Field(..., min_length=1)
    split_partner: float = Field(..., ge=0, le=1)
    split_owner: float = Field(..., ge=0, le=1)
    notes: str | None = None


class PartnerResponse(CamelModel):
    id: str
    name: str
    default_split_partner: str
    default_split_owner: str
    contact_info: str | None
    notes: str | None
    created_at: str


class AssignmentResponse(CamelModel):
    id: str
    client_id: str
    partner_id: str
    split_partner_override: str | None
    split_owner_override: str | None
    notes: str | None
    assigned_at: str


class PaymentResponse(CamelModel):
    id: str
    partner_id: str
    amount: str
    note: str | None
    paid_at: str


class AppSplitResponse(CamelModel):
    id: str
    partner_id: str
    app_id: str
    split_partner: str
    split_owner: str
    notes: str | None


class AutoAssignOutcomeResponse(CamelModel):
    client_id: str
    client_name: str
    partner_id: str
    partner_name: str
    assigned: bool


class AutoAssignResponse(CamelModel):
    run_id: str
    assigned_count: int
    total_count: int
    message: str
    outcomes: list[AutoAssignOutcomeResponse]

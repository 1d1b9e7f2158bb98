"""Channel partner panel routes (``/api/cp``)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import Field
from sqlalchemy.orm import Session

from api.auth_deps import require_admin, require_cp
from api.deps import get_db
from api.routes.leads import LeadCreate, LeadUpdate
from api.schemas import (
    AdOut,
    AdRequestListOut,
    ApiModel,
    AssignmentWithProject,
    CpDashboardOut,
    LeadOut,
    LeadPageOut,
    MarketingCounterOut,
    MarketingRequestListOut,
    MarketingRequestOut,
    MarketingSummaryOut,
    ProfileOut,
    StrictUpdate,
)
from core import validators as v
from core.exceptions import ValidationError
from core.models import (
    Ad,
    AdObjective,
    CpProjectMap,
    Lead,
    LeadStatus,
    MarketingCounter,
    MarketingRequest,
    MarketingRequestType,
    User,
)
from core.utils import local_midnight_utc
from domain.ads import AdService
from domain.assignments import AssignmentService
from domain.dashboard import DashboardService
from domain.leads import LeadService
from domain.marketing import MarketingService
from domain.profiles import ProfileService

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================


class AdRequestCreate(ApiModel):
    project_id: str
    objective: AdObjective
    budget_inr: int = Field(..., gt=0)
    duration_days: int = Field(..., gt=0)
    notes: Optional[str] = None


class AdRequestUpdate(StrictUpdate):
    status: Optional[str] = None
    description: Optional[str] = None


class ProfileUpdate(StrictUpdate):
    full_name: Optional[str] = None
    company_name: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=v.PHONE_PATTERN)
    city: Optional[str] = None
    extra_json: Optional[str] = None


class MarketingRequestCreate(ApiModel):
    """``type`` is checked by the service so the error names the allowed values."""

    type: Optional[str] = None
    project_id: Optional[str] = None
    notes: Optional[str] = None


class CounterIncrement(ApiModel):
    cp_id: str = Field(..., min_length=1)
    project_id: Optional[str] = None
    creatives: int = Field(0, ge=0)
    edms: int = Field(0, ge=0)


# =============================================================================
# Dashboard
# =============================================================================


@router.get("/dashboard", response_model=CpDashboardOut)
def dashboard(
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Dict[str, int]:
    return DashboardService(db).cp_stats(cp)


# =============================================================================
# Leads
# =============================================================================


@router.get("/leads", response_model=LeadPageOut)
def list_leads(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    project_id: Optional[str] = Query(None),
    lead_status: Optional[LeadStatus] = Query(None, alias="status"),
    date: Optional[str] = Query(None, description="'today' limits to leads since local midnight"),
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    created_from = local_midnight_utc() if date == "today" else None
    result = LeadService(db).list_for_cp(
        cp.id,
        page=page,
        limit=limit,
        project_id=project_id,
        status=lead_status.value if lead_status else None,
        created_from=created_from,
    )
    return {
        "data": result.data,
        "meta": {"page": result.page, "limit": result.limit, "total": result.total},
    }


@router.get("/leads/{lead_id}", response_model=LeadOut)
def get_lead(
    lead_id: str,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Lead:
    return LeadService(db).get_for_cp(lead_id, cp)


@router.post("/leads", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
def create_lead(
    body: LeadCreate,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Lead:
    return LeadService(db).create_lead(cp, body.model_dump())


@router.put("/leads/{lead_id}", response_model=LeadOut)
def update_lead(
    lead_id: str,
    body: LeadUpdate,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Lead:
    return LeadService(db).update_lead(lead_id, cp, body.model_dump(exclude_unset=True))


@router.delete("/leads/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lead(
    lead_id: str,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Response:
    """Soft delete: the lead moves to ``lost`` and stays in the table."""
    LeadService(db).soft_delete(lead_id, cp)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Ad requests
# =============================================================================


@router.get("/ads-requests", response_model=AdRequestListOut)
def list_ad_requests(
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    ads = AdService(db).list_for_user(cp)
    return {"data": ads, "meta": {"total": len(ads)}}


@router.get("/ads-requests/{ad_id}", response_model=AdOut)
def get_ad_request(
    ad_id: str,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Ad:
    return AdService(db).get_visible(ad_id, cp, label="Ad request")


@router.post("/ads-requests", response_model=AdOut, status_code=status.HTTP_201_CREATED)
def create_ad_request(
    body: AdRequestCreate,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Ad:
    return AdService(db).create_request(
        cp,
        project_id=body.project_id,
        objective=body.objective,
        budget_inr=body.budget_inr,
        duration_days=body.duration_days,
        notes=body.notes,
    )


@router.put("/ads-requests/{ad_id}", response_model=AdOut)
def update_ad_request(
    ad_id: str,
    body: AdRequestUpdate,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Ad:
    return AdService(db).update_request(ad_id, cp, status=body.status, description=body.description)


# =============================================================================
# Marketing
# =============================================================================


@router.get("/marketing", response_model=MarketingSummaryOut)
def marketing_counters(
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return MarketingService(db).summary(cp.id)


@router.post("/marketing/increment", response_model=MarketingCounterOut, dependencies=[Depends(require_admin)])
def increment_marketing_counters(
    body: CounterIncrement,
    db: Session = Depends(get_db),
) -> MarketingCounter:
    """Operator feed: add deltas to a CP's counters in one atomic statement."""
    return MarketingService(db).increment(
        body.cp_id, body.project_id, creatives=body.creatives, edms=body.edms
    )


@router.post("/marketing/request", response_model=MarketingRequestOut, status_code=status.HTTP_201_CREATED)
def create_marketing_request(
    body: MarketingRequestCreate,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> MarketingRequest:
    if body.type is None:
        allowed = ", ".join(t.value for t in MarketingRequestType)
        raise ValidationError.from_fields({"type": f"Type is required ({allowed})"})
    return MarketingService(db).create_request(
        cp, body.type, project_id=body.project_id, notes=body.notes
    )


@router.get("/marketing/requests", response_model=MarketingRequestListOut)
def list_marketing_requests(
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    requests = MarketingService(db).list_requests(cp.id)
    return {"data": requests, "meta": {"total": len(requests)}}


# =============================================================================
# Profile and projects
# =============================================================================


@router.get("/profile", response_model=ProfileOut)
def get_profile(
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return ProfileService(db).get_profile(cp)


@router.put("/profile", response_model=ProfileOut)
def update_profile(
    body: ProfileUpdate,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    service = ProfileService(db)
    service.update_profile(cp, body.model_dump(exclude_unset=True))
    return service.get_profile(cp)


@router.get("/projects", response_model=List[AssignmentWithProject])
def assigned_projects(
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> List[CpProjectMap]:
    """The CP's assignments, each with its project attached."""
    return AssignmentService(db).list_for_cp(cp.id)

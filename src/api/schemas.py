"""Response models shared across routes.

Every model serializes with camelCase keys; input models built on
``ApiModel`` accept both camelCase and snake_case.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.utils import ensure_aware

# SQLite hands back naive datetimes; everything stored is UTC.
UtcDatetime = Annotated[datetime, AfterValidator(ensure_aware)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class StrictUpdate(ApiModel):
    """Partial-update body; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Users
# =============================================================================


class UserOut(ApiModel):
    """Public user record. The password hash never leaves the server."""

    id: str
    full_name: str
    email: str
    phone: str
    city: str
    role: str
    company_name: Optional[str] = None
    contact_person: Optional[str] = None
    gst_number: Optional[str] = None
    rera_number: Optional[str] = None
    is_rera_registered: bool = False
    doc_link: Optional[str] = None
    budget: Optional[str] = None
    is_active: bool = True
    created_at: UtcDatetime


class CpSummary(ApiModel):
    id: str
    full_name: str
    email: str
    phone: str
    city: str
    company_name: Optional[str] = None


# =============================================================================
# Projects and assignments
# =============================================================================


class ProjectOut(ApiModel):
    id: str
    developer_id: str
    name: str
    description: Optional[str] = None
    location: str
    city: str
    project_type: str
    status: str
    price_min: Optional[int] = None
    price_max: Optional[int] = None
    rera_number: Optional[str] = None
    total_units: Optional[int] = None
    available_units: Optional[int] = None
    amenities: Optional[str] = None
    image_url: Optional[str] = None
    brochure_url: Optional[str] = None
    is_active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AssignmentOut(ApiModel):
    id: str
    cp_id: str
    project_id: str
    status: str
    commission_percent: Optional[float] = None
    assigned_at: UtcDatetime


class AssignmentWithProject(AssignmentOut):
    project: Optional[ProjectOut] = None


class PartnerOut(AssignmentOut):
    cp: CpSummary
    project_name: str
    total_leads: int = 0
    has_run_ads: bool = False
    creatives_shared: int = 0
    edms_shared: int = 0


# =============================================================================
# Leads
# =============================================================================


class LeadOut(ApiModel):
    id: str
    cp_id: str
    project_id: str
    developer_id: str
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    customer_city: Optional[str] = None
    budget: Optional[str] = None
    status: str
    notes: Optional[str] = None
    source: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int


class LeadPageOut(BaseModel):
    data: List[LeadOut]
    meta: PageMeta


# =============================================================================
# Ads
# =============================================================================


class AdOut(ApiModel):
    id: str
    cp_id: Optional[str] = None
    project_id: Optional[str] = None
    developer_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    budget: int
    spent_amount: int
    start_date: UtcDatetime
    end_date: UtcDatetime
    status: str
    platform: str
    impressions: int
    clicks: int
    leads: int
    created_at: UtcDatetime
    updated_at: UtcDatetime


# =============================================================================
# CP panel
# =============================================================================


class CpDashboardOut(ApiModel):
    todays_leads: int
    total_leads: int
    active_projects: int
    active_ads: int


class DeveloperDashboardOut(ApiModel):
    total_projects: int
    active_projects: int
    total_leads: int
    converted_leads: int
    approved_partners: int
    pending_partners: int
    active_ads: int


class ProjectMarketingOut(ApiModel):
    project_id: str
    project_name: str
    creatives_shared: int
    edms_shared: int


class DeveloperMarketingOut(ApiModel):
    creatives_shared: int
    edms_shared: int
    per_project: List[ProjectMarketingOut]


class ProfileOut(ApiModel):
    id: Optional[str] = None
    user_id: str
    full_name: str
    company_name: Optional[str] = None
    phone: str
    city: str
    extra_json: Optional[str] = None
    email: Optional[str] = None


class MarketingCounterOut(ApiModel):
    id: str
    cp_id: str
    project_id: Optional[str] = None
    creatives_shared: int
    edms_shared: int
    last_updated: UtcDatetime


class ProjectCounterOut(ApiModel):
    project_id: str
    project_title: str
    creatives_shared: int
    edms_shared: int


class MarketingSummaryOut(BaseModel):
    """Dashboard totals; top-level keys stay snake_case as the panel reads them."""

    creatives_shared: int
    edms_shared: int
    per_project: List[ProjectCounterOut] = Field(default_factory=list)


class MarketingRequestOut(ApiModel):
    id: str
    cp_id: str
    project_id: Optional[str] = None
    request_type: str
    notes: Optional[str] = None
    status: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ListMeta(BaseModel):
    total: int


class MarketingRequestListOut(BaseModel):
    data: List[MarketingRequestOut]
    meta: ListMeta


class AdRequestListOut(BaseModel):
    data: List[AdOut]
    meta: ListMeta

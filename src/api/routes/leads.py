"""Lead routes shared by both roles.

The CP-scoped list and delete live in ``cp_panel``; request models defined
here are reused there.
"""
from __future__ import annotations

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, status
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from api.auth_deps import get_current_user, require_cp
from api.deps import get_db
from api.schemas import ApiModel, LeadOut, StrictUpdate
from core import validators as v
from core.models import Lead, LeadSource, LeadStatus, User
from domain.leads import LeadService

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================


class _LeadFields(ApiModel):
    @field_validator("customer_email", check_fields=False)
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        if value and not v.is_email(value):
            raise ValueError("Invalid email address")
        return value or None

    @field_validator("budget", check_fields=False)
    @classmethod
    def budget_as_text(cls, value):
        return None if value is None else str(value)


class LeadCreate(_LeadFields):
    """New lead. The developer is taken from the project."""

    project_id: Optional[str] = None
    developer_id: Optional[str] = None
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., pattern=v.PHONE_PATTERN)
    customer_email: Optional[str] = None
    customer_city: Optional[str] = None
    budget: Optional[Union[str, int, float]] = None
    status: Optional[LeadStatus] = None
    notes: Optional[str] = None
    source: Optional[LeadSource] = None


class LeadUpdate(_LeadFields, StrictUpdate):
    customer_name: Optional[str] = Field(None, min_length=1)
    customer_phone: Optional[str] = Field(None, pattern=v.PHONE_PATTERN)
    customer_email: Optional[str] = None
    customer_city: Optional[str] = None
    budget: Optional[Union[str, int, float]] = None
    status: Optional[LeadStatus] = None
    notes: Optional[str] = None
    source: Optional[LeadSource] = None


# =============================================================================
# Routes
# =============================================================================


@router.get("", response_model=List[LeadOut])
def list_leads(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[Lead]:
    """CPs get their own leads; developers get leads on their projects."""
    return LeadService(db).list_for_user(current_user)


@router.get("/{lead_id}", response_model=LeadOut)
def get_lead(
    lead_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Lead:
    return LeadService(db).get_visible(lead_id, current_user)


@router.post("", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
def create_lead(
    body: LeadCreate,
    cp: User = Depends(require_cp),
    db: Session = Depends(get_db),
) -> Lead:
    return LeadService(db).create_lead(cp, body.model_dump())


@router.put("/{lead_id}", response_model=LeadOut)
def update_lead(
    lead_id: str,
    body: LeadUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Lead:
    """Only the owning CP may change a lead; its developer gets 403."""
    return LeadService(db).update_lead(lead_id, current_user, body.model_dump(exclude_unset=True))

"""Ad campaign routes for CPs and developers."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field
from sqlalchemy.orm import Session

from api.auth_deps import get_current_user
from api.deps import get_db
from api.schemas import AdOut, ApiModel, StrictUpdate
from core.models import Ad, AdPlatform, AdStatus, User
from domain.ads import AdService

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================


class AdCreate(ApiModel):
    """New campaign; the owner column is filled from the session."""

    project_id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    budget: int = Field(..., ge=0)
    start_date: datetime
    end_date: datetime
    status: Optional[AdStatus] = None
    platform: Optional[AdPlatform] = None


class AdUpdate(StrictUpdate):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    budget: Optional[int] = Field(None, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[AdStatus] = None
    platform: Optional[AdPlatform] = None


# =============================================================================
# Routes
# =============================================================================


@router.get("", response_model=List[AdOut])
def list_ads(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[Ad]:
    return AdService(db).list_for_user(current_user)


@router.get("/{ad_id}", response_model=AdOut)
def get_ad(
    ad_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Ad:
    return AdService(db).get_visible(ad_id, current_user)


@router.post("", response_model=AdOut, status_code=status.HTTP_201_CREATED)
def create_ad(
    body: AdCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Ad:
    return AdService(db).create_ad(current_user, body.model_dump())


@router.put("/{ad_id}", response_model=AdOut)
def update_ad(
    ad_id: str,
    body: AdUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Ad:
    """Owners only. Channel partners may only set ``status`` to ``cancelled``."""
    return AdService(db).update_ad(ad_id, current_user, body.model_dump(exclude_unset=True))

"""Operator routes authenticated with the static admin bearer token."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from api.auth_deps import require_admin
from api.deps import get_db
from api.schemas import AdOut, ApiModel
from core.models import Ad
from domain.ads import AdService

router = APIRouter(dependencies=[Depends(require_admin)])


class AdPerformanceUpdate(ApiModel):
    """Externally measured campaign numbers. Omitted fields are left as they are."""

    impressions: Optional[int] = Field(None, ge=0)
    clicks: Optional[int] = Field(None, ge=0)
    leads: Optional[int] = Field(None, ge=0)
    spent_amount: Optional[int] = Field(None, ge=0)


@router.put("/ads/{ad_id}/performance", response_model=AdOut)
def set_ad_performance(
    ad_id: str,
    body: AdPerformanceUpdate,
    db: Session = Depends(get_db),
) -> Ad:
    return AdService(db).set_performance(ad_id, **body.model_dump())

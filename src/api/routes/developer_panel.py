"""Developer panel routes (``/api/developer``)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.auth_deps import require_developer
from api.deps import get_db
from api.schemas import DeveloperDashboardOut, DeveloperMarketingOut, PartnerOut
from core.models import AssignmentStatus, User
from domain.dashboard import DashboardService

router = APIRouter()


@router.get("/dashboard", response_model=DeveloperDashboardOut)
def dashboard(
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> Dict[str, int]:
    return DashboardService(db).developer_stats(developer)


@router.get("/partners", response_model=List[PartnerOut])
def partners(
    partner_status: Optional[AssignmentStatus] = Query(None, alias="status"),
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Channel partners on the developer's projects, newest assignment first."""
    rows = DashboardService(db).developer_partners(
        developer, status=partner_status.value if partner_status else None
    )
    return [
        {
            "id": row["assignment"].id,
            "cp_id": row["assignment"].cp_id,
            "project_id": row["assignment"].project_id,
            "status": row["assignment"].status,
            "commission_percent": row["assignment"].commission_percent,
            "assigned_at": row["assignment"].assigned_at,
            "cp": row["cp"],
            "project_name": row["project"].name,
            "total_leads": row["total_leads"],
            "has_run_ads": row["has_run_ads"],
            "creatives_shared": row["creatives_shared"],
            "edms_shared": row["edms_shared"],
        }
        for row in rows
    ]


@router.get("/marketing", response_model=DeveloperMarketingOut)
def marketing(
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return DashboardService(db).developer_marketing(developer)

"""CP-project assignment routes."""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy.orm import Session

from api.auth_deps import get_current_user, require_developer
from api.deps import get_db
from api.schemas import ApiModel, AssignmentOut
from core.exceptions import ForbiddenError, ValidationError
from core.models import AssignmentStatus, CpProjectMap, User, UserRole
from domain.assignments import AssignmentService

router = APIRouter()


class AssignmentCreate(ApiModel):
    project_id: str
    cp_id: Optional[str] = None
    status: Optional[AssignmentStatus] = None
    commission_percent: Optional[Decimal] = Field(None, ge=0, le=100)


class AssignmentStatusUpdate(ApiModel):
    status: AssignmentStatus


@router.get("", response_model=List[AssignmentOut])
def list_assignments(
    project_id: Optional[str] = Query(None, alias="projectId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[CpProjectMap]:
    """
    CPs list their own assignments.

    Developers must name one of their projects with ``projectId``.
    """
    service = AssignmentService(db)
    if current_user.role == UserRole.CP.value:
        return service.list_for_cp(current_user.id)
    if current_user.role == UserRole.DEVELOPER.value:
        if not project_id:
            raise ValidationError.from_fields({"projectId": "projectId is required"})
        return service.list_for_project(project_id, current_user)
    raise ForbiddenError("Access denied")


@router.post("", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
def create_assignment(
    body: AssignmentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CpProjectMap:
    return AssignmentService(db).assign(
        current_user,
        project_id=body.project_id,
        cp_id=body.cp_id,
        status=body.status,
        commission_percent=body.commission_percent,
    )


@router.put("/{assignment_id}/status", response_model=AssignmentOut)
def update_assignment_status(
    assignment_id: str,
    body: AssignmentStatusUpdate,
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> CpProjectMap:
    return AssignmentService(db).set_status(assignment_id, developer, body.status)

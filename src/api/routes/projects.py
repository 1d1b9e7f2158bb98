"""Project routes."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import Field
from sqlalchemy.orm import Session

from api.auth_deps import get_current_user, require_developer
from api.deps import get_db
from api.schemas import ApiModel, ProjectOut, StrictUpdate
from core.models import Project, ProjectStatus, ProjectType, User
from domain.projects import ProjectService

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================


class ProjectCreate(ApiModel):
    """New project. ``developerId`` in the payload is ignored."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    project_type: ProjectType
    status: ProjectStatus
    price_min: Optional[int] = Field(None, ge=0)
    price_max: Optional[int] = Field(None, ge=0)
    rera_number: Optional[str] = None
    total_units: Optional[int] = Field(None, ge=0)
    available_units: Optional[int] = Field(None, ge=0)
    amenities: Optional[str] = None
    image_url: Optional[str] = None
    brochure_url: Optional[str] = None
    is_active: bool = True


class ProjectUpdate(StrictUpdate):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    project_type: Optional[ProjectType] = None
    status: Optional[ProjectStatus] = None
    price_min: Optional[int] = Field(None, ge=0)
    price_max: Optional[int] = Field(None, ge=0)
    rera_number: Optional[str] = None
    total_units: Optional[int] = Field(None, ge=0)
    available_units: Optional[int] = Field(None, ge=0)
    amenities: Optional[str] = None
    image_url: Optional[str] = None
    brochure_url: Optional[str] = None
    is_active: Optional[bool] = None


# =============================================================================
# Routes
# =============================================================================


@router.get("", response_model=List[ProjectOut])
def list_projects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[Project]:
    """Developers see their own portfolio; other roles see every active project."""
    return ProjectService(db).list_visible_to(current_user)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Project:
    return ProjectService(db).require_project(project_id)


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreate,
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> Project:
    return ProjectService(db).create_project(developer, body.model_dump())


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: str,
    body: ProjectUpdate,
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> Project:
    return ProjectService(db).update_project(project_id, developer, body.model_dump(exclude_unset=True))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: str,
    developer: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> Response:
    ProjectService(db).delete_project(project_id, developer)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

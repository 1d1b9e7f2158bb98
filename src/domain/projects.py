"""Project domain service."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, ForbiddenError, NotFoundError
from core.logging_config import get_logger
from core.models import Ad, Lead, MarketingCounter, MarketingRequest, Project, User, UserRole

LOGGER = get_logger(__name__)

# Columns a developer may not set through create/update payloads.
PROTECTED_FIELDS = {"id", "developer_id", "created_at", "updated_at"}
# NOT NULL columns; an explicit null in an update leaves them unchanged.
REQUIRED_FIELDS = {"name", "location", "city", "project_type", "status", "is_active"}


class ProjectService:
    """Project CRUD with developer ownership checks."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.session.get(Project, project_id)

    def require_project(self, project_id: str) -> Project:
        project = self.get_project(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    def require_owned(self, project_id: str, developer: User) -> Project:
        """
        Load a project owned by the developer.

        Non-owners get the same NotFoundError as a missing row.
        """
        project = self.get_project(project_id)
        if project is None or project.developer_id != developer.id:
            raise NotFoundError("Project not found")
        return project

    def list_for_developer(self, developer_id: str) -> List[Project]:
        stmt = (
            select(Project)
            .where(Project.developer_id == developer_id)
            .order_by(Project.created_at.desc())
        )
        return list(self.session.scalars(stmt))

    def list_active(self) -> List[Project]:
        stmt = (
            select(Project)
            .where(Project.is_active.is_(True))
            .order_by(Project.created_at.desc())
        )
        return list(self.session.scalars(stmt))

    def list_visible_to(self, user: User) -> List[Project]:
        """Developers see their own portfolio; everyone else sees active projects."""
        if user.role == UserRole.DEVELOPER.value:
            return self.list_for_developer(user.id)
        return self.list_active()

    def create_project(self, developer: User, values: Dict[str, Any]) -> Project:
        if developer.role != UserRole.DEVELOPER.value:
            raise ForbiddenError("Only developers can create projects")

        clean = {k: val for k, val in values.items() if k not in PROTECTED_FIELDS}
        project = Project(developer_id=developer.id, **clean)
        self.session.add(project)
        self.session.flush()
        LOGGER.info(f"Project {project.id} created by developer {developer.id}")
        return project

    def update_project(self, project_id: str, developer: User, values: Dict[str, Any]) -> Project:
        if developer.role != UserRole.DEVELOPER.value:
            raise ForbiddenError("Only developers can update projects")

        project = self.require_owned(project_id, developer)
        for key, val in values.items():
            if key in PROTECTED_FIELDS or (val is None and key in REQUIRED_FIELDS):
                continue
            setattr(project, key, val)
        self.session.flush()
        return project

    def delete_project(self, project_id: str, developer: User) -> None:
        """
        Delete an owned project together with its CP assignments.

        Projects that already carry leads, ads or marketing history cannot be
        removed; deactivate them instead.
        """
        if developer.role != UserRole.DEVELOPER.value:
            raise ForbiddenError("Only developers can delete projects")

        project = self.require_owned(project_id, developer)
        for model in (Lead, Ad, MarketingCounter, MarketingRequest):
            count = self.session.scalar(
                select(func.count()).select_from(model).where(model.project_id == project.id)
            )
            if count:
                raise ConflictError(
                    "Project has activity and cannot be deleted; set isActive to false instead"
                )

        self.session.delete(project)
        self.session.flush()
        LOGGER.info(f"Project {project_id} deleted by developer {developer.id}")

"""CP-project assignment service."""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from core.logging_config import get_logger
from core.models import AssignmentStatus, CpProjectMap, Project, User, UserRole

LOGGER = get_logger(__name__)


class AssignmentService:
    """
    Links channel partners to projects.

    A CP may only ask for itself and always starts as ``pending``; the
    project's developer decides. Ownership is re-read from the project on
    every status change.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _project(self, project_id: str) -> Project:
        project = self.session.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    def list_for_cp(self, cp_id: str) -> List[CpProjectMap]:
        stmt = (
            select(CpProjectMap)
            .where(CpProjectMap.cp_id == cp_id)
            .order_by(CpProjectMap.assigned_at.desc())
        )
        return list(self.session.scalars(stmt))

    def list_for_project(self, project_id: str, developer: User) -> List[CpProjectMap]:
        project = self.session.get(Project, project_id)
        if project is None or project.developer_id != developer.id:
            raise ForbiddenError("Access denied")

        stmt = (
            select(CpProjectMap)
            .where(CpProjectMap.project_id == project_id)
            .order_by(CpProjectMap.assigned_at.desc())
        )
        return list(self.session.scalars(stmt))

    def assign(
        self,
        user: User,
        project_id: str,
        cp_id: Optional[str] = None,
        status: Optional[str] = None,
        commission_percent: Optional[Decimal] = None,
    ) -> CpProjectMap:
        """Create an assignment as the requesting CP or as the owning developer."""
        project = self._project(project_id)

        if user.role == UserRole.CP.value:
            if cp_id and cp_id != user.id:
                raise ForbiddenError("CPs can only request access for themselves")
            cp_id = user.id
            status = AssignmentStatus.PENDING.value
        elif user.role == UserRole.DEVELOPER.value:
            if project.developer_id != user.id:
                raise ForbiddenError("Access denied")
            if not cp_id:
                raise ValidationError.from_fields({"cpId": "Channel partner is required"})
            cp = self.session.get(User, cp_id)
            if cp is None or cp.role != UserRole.CP.value:
                raise NotFoundError("Channel partner not found")
        else:
            raise ForbiddenError("Access denied")

        existing = self.session.scalar(
            select(CpProjectMap).where(
                CpProjectMap.cp_id == cp_id, CpProjectMap.project_id == project.id
            )
        )
        if existing is not None:
            raise ConflictError("Channel partner is already linked to this project")

        assignment = CpProjectMap(
            cp_id=cp_id,
            project_id=project.id,
            status=status or AssignmentStatus.PENDING.value,
            commission_percent=commission_percent,
        )
        self.session.add(assignment)
        self.session.flush()
        LOGGER.info(f"Assignment {assignment.id}: CP {cp_id} -> project {project.id} ({assignment.status})")
        return assignment

    def set_status(self, assignment_id: str, developer: User, status: str) -> CpProjectMap:
        if developer.role != UserRole.DEVELOPER.value:
            raise ForbiddenError("Only developers can update assignment status")
        if status not in {s.value for s in AssignmentStatus}:
            raise ValidationError.from_fields({"status": "Invalid status"})

        assignment = self.session.get(CpProjectMap, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")

        project = self.session.get(Project, assignment.project_id)
        if project is None or project.developer_id != developer.id:
            raise ForbiddenError("Access denied")

        assignment.status = status
        self.session.flush()
        LOGGER.info(f"Assignment {assignment.id} set to {status} by developer {developer.id}")
        return assignment

    def count_projects_for_cp(self, cp_id: str) -> int:
        stmt = (
            select(func.count(func.distinct(CpProjectMap.project_id)))
            .where(CpProjectMap.cp_id == cp_id)
        )
        return self.session.scalar(stmt) or 0

    def count_by_status_for_developer(self, developer_id: str) -> Dict[str, int]:
        stmt = (
            select(CpProjectMap.status, func.count())
            .join(Project, Project.id == CpProjectMap.project_id)
            .where(Project.developer_id == developer_id)
            .group_by(CpProjectMap.status)
        )
        counts = {s.value: 0 for s in AssignmentStatus}
        for status, count in self.session.execute(stmt):
            counts[status] = count
        return counts

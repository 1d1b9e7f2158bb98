"""Lead domain service - CP lead lifecycle and listing."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.config import get_settings
from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from core.logging_config import get_context_logger, get_logger
from core.models import Lead, LeadStatus, Project, User, UserRole

LOGGER = get_logger(__name__)
SETTINGS = get_settings()

# Fields a CP may change after creation.
UPDATABLE_FIELDS = {
    "customer_name",
    "customer_phone",
    "customer_email",
    "customer_city",
    "budget",
    "status",
    "notes",
    "source",
}
# NOT NULL columns; an explicit null in an update leaves them unchanged.
REQUIRED_FIELDS = {"customer_name", "customer_phone", "status"}


@dataclass
class LeadPage:
    """One page of leads plus the size of the whole filtered set."""

    data: List[Lead]
    page: int
    limit: int
    total: int


class LeadService:
    """Service for lead-related operations."""

    def __init__(self, session: Session) -> None:
        """Initialize the lead service with a database session."""
        self.session = session

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def _require(self, lead_id: str) -> Lead:
        lead = self.session.get(Lead, lead_id)
        if lead is None:
            raise NotFoundError("Lead not found")
        return lead

    def _deny(self, user: User, lead: Lead) -> ForbiddenError:
        get_context_logger(__name__, user_id=user.id, role=user.role).warning(
            f"Lead access denied: {lead.id}"
        )
        return ForbiddenError("Access denied")

    def get_for_cp(self, lead_id: str, cp: User) -> Lead:
        """Fetch a lead the CP owns; other CPs' leads are forbidden."""
        lead = self._require(lead_id)
        if lead.cp_id != cp.id:
            raise self._deny(cp, lead)
        return lead

    def get_visible(self, lead_id: str, user: User) -> Lead:
        """Fetch a lead for its owning CP or for the developer of its project."""
        lead = self._require(lead_id)
        if user.role == UserRole.CP.value and lead.cp_id == user.id:
            return lead
        if user.role == UserRole.DEVELOPER.value and lead.developer_id == user.id:
            return lead
        raise self._deny(user, lead)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_lead(self, cp: User, values: Dict[str, Any]) -> Lead:
        """
        Register a lead for a CP.

        The developer is taken from the project; a conflicting explicit
        developer id is rejected.
        """
        if cp.role != UserRole.CP.value:
            raise ForbiddenError("Only channel partners can create leads")

        project_id = values.get("project_id")
        if not project_id:
            raise ValidationError.from_fields({"projectId": "Project is required"})

        project = self.session.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project not found")

        developer_id = values.get("developer_id")
        if developer_id and developer_id != project.developer_id:
            raise ValidationError.from_fields(
                {"developerId": "Developer does not match the project's developer"}
            )

        lead = Lead(
            cp_id=cp.id,
            project_id=project.id,
            developer_id=project.developer_id,
            customer_name=values["customer_name"],
            customer_phone=values["customer_phone"],
            customer_email=values.get("customer_email") or None,
            customer_city=values.get("customer_city"),
            budget=values.get("budget"),
            source=values.get("source"),
            status=values.get("status") or LeadStatus.NEW.value,
            notes=values.get("notes"),
        )
        self.session.add(lead)
        self.session.flush()
        LOGGER.info(f"Lead {lead.id} created by CP {cp.id} for project {project.id}")
        return lead

    def update_lead(self, lead_id: str, user: User, values: Dict[str, Any]) -> Lead:
        """
        Apply a partial update. Only the owning CP may mutate a lead.

        Status moves freely between all states, including reopening
        ``lost`` or ``converted`` leads.
        """
        lead = self._require(lead_id)
        if user.role != UserRole.CP.value or lead.cp_id != user.id:
            raise self._deny(user, lead)

        for key, val in values.items():
            if key not in UPDATABLE_FIELDS:
                continue
            if val is None and key in REQUIRED_FIELDS:
                continue
            setattr(lead, key, val)
        self.session.flush()
        return lead

    def soft_delete(self, lead_id: str, cp: User) -> Lead:
        """Mark a lead lost instead of deleting it; the row and its history remain."""
        lead = self.update_lead(lead_id, cp, {"status": LeadStatus.LOST.value})
        LOGGER.info(f"Lead {lead.id} marked lost by CP {cp.id}")
        return lead

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_for_user(self, user: User) -> List[Lead]:
        if user.role == UserRole.CP.value:
            column = Lead.cp_id
        elif user.role == UserRole.DEVELOPER.value:
            column = Lead.developer_id
        else:
            raise ForbiddenError("Access denied")

        stmt = select(Lead).where(column == user.id).order_by(Lead.created_at.desc(), Lead.id)
        return list(self.session.scalars(stmt))

    def list_for_cp(
        self,
        cp_id: str,
        page: int = 1,
        limit: Optional[int] = None,
        project_id: Optional[str] = None,
        status: Optional[str] = None,
        created_from: Optional[datetime] = None,
    ) -> LeadPage:
        """
        Paginated, filtered leads for one CP, newest first.

        ``total`` counts every matching row regardless of page and limit.
        """
        page = max(page or 1, 1)
        limit = SETTINGS.clamp_page_size(limit)

        conditions = [Lead.cp_id == cp_id]
        if project_id:
            conditions.append(Lead.project_id == project_id)
        if status:
            conditions.append(Lead.status == status)
        if created_from is not None:
            conditions.append(Lead.created_at >= created_from)

        stmt = (
            select(Lead)
            .where(*conditions)
            .order_by(Lead.created_at.desc(), Lead.id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        total = self.session.scalar(select(func.count()).select_from(Lead).where(*conditions)) or 0

        return LeadPage(data=list(self.session.scalars(stmt)), page=page, limit=limit, total=total)

    def count_for_cp(self, cp_id: str, created_from: Optional[datetime] = None) -> int:
        conditions = [Lead.cp_id == cp_id]
        if created_from is not None:
            conditions.append(Lead.created_at >= created_from)
        return self.session.scalar(select(func.count()).select_from(Lead).where(*conditions)) or 0

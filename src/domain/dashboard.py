"""Aggregate statistics for the CP and developer panels."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.models import (
    Ad,
    AdStatus,
    AssignmentStatus,
    CpProjectMap,
    Lead,
    LeadStatus,
    MarketingCounter,
    Project,
    User,
)
from core.utils import local_midnight_utc
from domain.ads import AdService
from domain.assignments import AssignmentService
from domain.leads import LeadService


# Ads that actually went out to an audience
RUN_AD_STATUSES = (AdStatus.ACTIVE.value, AdStatus.PAUSED.value, AdStatus.COMPLETED.value)


class DashboardService:
    """Read-only counts; each figure is a single aggregate query."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.leads = LeadService(session)
        self.ads = AdService(session)
        self.assignments = AssignmentService(session)

    def cp_stats(self, cp: User, now=None) -> Dict[str, int]:
        """
        Dashboard numbers for a channel partner.

        ``todaysLeads`` counts leads created since local midnight.
        ``activeProjects`` counts distinct assigned projects, whatever the
        approval state.
        """
        return {
            "todaysLeads": self.leads.count_for_cp(cp.id, local_midnight_utc(now)),
            "totalLeads": self.leads.count_for_cp(cp.id),
            "activeProjects": self.assignments.count_projects_for_cp(cp.id),
            "activeAds": self.ads.count_active_for_cp(cp.id),
        }

    def developer_stats(self, developer: User) -> Dict[str, int]:
        project_counts = self.session.execute(
            select(
                func.count(Project.id),
                func.count(Project.id).filter(Project.is_active.is_(True)),
            ).where(Project.developer_id == developer.id)
        ).one()

        lead_counts = self.session.execute(
            select(
                func.count(Lead.id),
                func.count(Lead.id).filter(Lead.status == LeadStatus.CONVERTED.value),
            ).where(Lead.developer_id == developer.id)
        ).one()

        partners = self.assignments.count_by_status_for_developer(developer.id)

        return {
            "totalProjects": project_counts[0] or 0,
            "activeProjects": project_counts[1] or 0,
            "totalLeads": lead_counts[0] or 0,
            "convertedLeads": lead_counts[1] or 0,
            "approvedPartners": partners[AssignmentStatus.APPROVED.value],
            "pendingPartners": partners[AssignmentStatus.PENDING.value],
            "activeAds": self.ads.count_active_for_developer(developer.id),
        }

    def developer_partners(
        self, developer: User, status: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Assignments on the developer's projects with CP display fields and partner activity."""
        stmt = (
            select(CpProjectMap, User, Project)
            .join(User, User.id == CpProjectMap.cp_id)
            .join(Project, Project.id == CpProjectMap.project_id)
            .where(Project.developer_id == developer.id)
            .order_by(CpProjectMap.assigned_at.desc())
        )
        if status:
            stmt = stmt.where(CpProjectMap.status == status)

        activity = self._partner_activity(developer.id)

        rows = []
        for assignment, cp, project in self.session.execute(stmt):
            key = (assignment.cp_id, assignment.project_id)
            rows.append({
                "assignment": assignment,
                "cp": cp,
                "project": project,
                "total_leads": activity["leads"].get(key, 0),
                "has_run_ads": activity["ads"].get(key, 0) > 0,
                "creatives_shared": activity["creatives"].get(key, 0),
                "edms_shared": activity["edms"].get(key, 0),
            })
        return rows

    def _owned_project_ids(self, developer_id: str):
        return select(Project.id).where(Project.developer_id == developer_id)

    def _partner_activity(self, developer_id: str) -> Dict[str, Dict[Tuple[str, str], int]]:
        """Per (cp, project) lead, ad and marketing totals across the developer's projects."""
        owned = self._owned_project_ids(developer_id)

        leads = self.session.execute(
            select(Lead.cp_id, Lead.project_id, func.count(Lead.id))
            .where(Lead.developer_id == developer_id)
            .group_by(Lead.cp_id, Lead.project_id)
        ).all()

        ads = self.session.execute(
            select(Ad.cp_id, Ad.project_id, func.count(Ad.id))
            .where(
                Ad.cp_id.is_not(None),
                Ad.project_id.in_(owned),
                Ad.status.in_(RUN_AD_STATUSES),
            )
            .group_by(Ad.cp_id, Ad.project_id)
        ).all()

        counters = self.session.execute(
            select(
                MarketingCounter.cp_id,
                MarketingCounter.project_id,
                func.sum(MarketingCounter.creatives_shared),
                func.sum(MarketingCounter.edms_shared),
            )
            .where(MarketingCounter.project_id.in_(owned))
            .group_by(MarketingCounter.cp_id, MarketingCounter.project_id)
        ).all()

        return {
            "leads": {(cp_id, project_id): count for cp_id, project_id, count in leads},
            "ads": {(cp_id, project_id): count for cp_id, project_id, count in ads},
            "creatives": {(cp_id, project_id): int(c or 0) for cp_id, project_id, c, _ in counters},
            "edms": {(cp_id, project_id): int(e or 0) for cp_id, project_id, _, e in counters},
        }

    def developer_marketing(self, developer: User) -> Dict[str, Any]:
        """
        Creatives and EDMs shared with partners, summed over the developer's projects.

        Only project-scoped counters count here; a CP's global counter is not
        attributable to any one developer.
        """
        per_project = self.session.execute(
            select(
                Project.id,
                Project.name,
                func.coalesce(func.sum(MarketingCounter.creatives_shared), 0),
                func.coalesce(func.sum(MarketingCounter.edms_shared), 0),
            )
            .outerjoin(MarketingCounter, MarketingCounter.project_id == Project.id)
            .where(Project.developer_id == developer.id)
            .group_by(Project.id, Project.name)
            .order_by(Project.name)
        ).all()

        projects = [
            {
                "project_id": project_id,
                "project_name": name,
                "creatives_shared": int(creatives),
                "edms_shared": int(edms),
            }
            for project_id, name, creatives, edms in per_project
        ]
        return {
            "creatives_shared": sum(p["creatives_shared"] for p in projects),
            "edms_shared": sum(p["edms_shared"] for p in projects),
            "per_project": projects,
        }

"""Marketing counters and collateral requests for channel partners."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from core.exceptions import ConfigurationError, NotFoundError, ValidationError
from core.logging_config import get_logger
from core.models import (
    GLOBAL_SCOPE,
    MarketingCounter,
    MarketingRequest,
    MarketingRequestStatus,
    MarketingRequestType,
    Project,
    User,
    UserRole,
)
from core.utils import generate_id, utcnow

LOGGER = get_logger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class MarketingService:
    """Counter increments (operator only) and CP collateral requests."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    def increment(
        self,
        cp_id: str,
        project_id: Optional[str] = None,
        creatives: int = 0,
        edms: int = 0,
    ) -> MarketingCounter:
        """
        Add non-negative deltas to the (CP, project) counter row.

        The row is created on first write. The whole operation is one
        ``INSERT ... ON CONFLICT DO UPDATE`` statement, so concurrent
        increments on the same key never lose an update.
        """
        creatives = creatives or 0
        edms = edms or 0
        errors: Dict[str, str] = {}
        if creatives < 0:
            errors["creatives"] = "Must be zero or greater"
        if edms < 0:
            errors["edms"] = "Must be zero or greater"
        if errors:
            raise ValidationError.from_fields(errors)

        cp = self.session.get(User, cp_id)
        if cp is None or cp.role != UserRole.CP.value:
            raise NotFoundError("Channel partner not found")
        if project_id and self.session.get(Project, project_id) is None:
            raise NotFoundError("Project not found")

        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise ConfigurationError(f"Atomic counter increment is not supported on {dialect}")

        scope_key = project_id or GLOBAL_SCOPE
        now = utcnow()
        stmt = insert(MarketingCounter).values(
            id=generate_id(),
            cp_id=cp_id,
            project_id=project_id or None,
            scope_key=scope_key,
            creatives_shared=creatives,
            edms_shared=edms,
            last_updated=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[MarketingCounter.cp_id, MarketingCounter.scope_key],
            set_={
                "creatives_shared": MarketingCounter.creatives_shared + stmt.excluded.creatives_shared,
                "edms_shared": MarketingCounter.edms_shared + stmt.excluded.edms_shared,
                "last_updated": stmt.excluded.last_updated,
            },
        )
        self.session.execute(stmt)

        counter = self.session.scalar(
            select(MarketingCounter)
            .where(MarketingCounter.cp_id == cp_id, MarketingCounter.scope_key == scope_key)
            .execution_options(populate_existing=True)
        )
        LOGGER.info(
            f"Marketing counters for CP {cp_id} ({scope_key}) +{creatives} creatives, +{edms} EDMs"
        )
        return counter

    def list_counters(self, cp_id: str) -> List[MarketingCounter]:
        stmt = (
            select(MarketingCounter)
            .where(MarketingCounter.cp_id == cp_id)
            .order_by(MarketingCounter.last_updated.desc())
        )
        return list(self.session.scalars(stmt))

    def summary(self, cp_id: str) -> Dict[str, Any]:
        """Totals across every counter row plus one entry per project-scoped row."""
        total_creatives = 0
        total_edms = 0
        per_project = []

        for counter in self.list_counters(cp_id):
            total_creatives += counter.creatives_shared or 0
            total_edms += counter.edms_shared or 0
            if counter.project_id:
                project = self.session.get(Project, counter.project_id)
                per_project.append({
                    "projectId": counter.project_id,
                    "projectTitle": project.name if project else "Unknown",
                    "creativesShared": counter.creatives_shared or 0,
                    "edmsShared": counter.edms_shared or 0,
                })

        return {
            "creatives_shared": total_creatives,
            "edms_shared": total_edms,
            "per_project": per_project,
        }

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def create_request(
        self,
        cp: User,
        request_type: str,
        project_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MarketingRequest:
        if request_type not in {t.value for t in MarketingRequestType}:
            raise ValidationError.from_fields(
                {"type": "Invalid request type. Must be 'creative' or 'edm'"}
            )
        if project_id and self.session.get(Project, project_id) is None:
            raise NotFoundError("Project not found")

        request = MarketingRequest(
            cp_id=cp.id,
            project_id=project_id or None,
            request_type=request_type,
            notes=notes or "",
            status=MarketingRequestStatus.PENDING.value,
        )
        self.session.add(request)
        self.session.flush()
        LOGGER.info(f"Marketing request {request.id} ({request_type}) from CP {cp.id}")
        return request

    def list_requests(self, cp_id: str) -> List[MarketingRequest]:
        stmt = (
            select(MarketingRequest)
            .where(MarketingRequest.cp_id == cp_id)
            .order_by(MarketingRequest.created_at.desc(), MarketingRequest.id)
        )
        return list(self.session.scalars(stmt))
